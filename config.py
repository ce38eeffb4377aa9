import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///digital_lebanon.db"
DEFAULT_STORE_KEY = "digital-lebanon-store"


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return max(0.0, float(raw))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    database_url: str | None
    log_level: str
    store_key: str
    login_delay_seconds: float
    submit_delay_seconds: float
    estimated_completion_days: int
    demo_email: str
    demo_password: str


def get_settings() -> Settings:
    return Settings(
        database_url=os.getenv("DATABASE_URL"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        store_key=os.getenv("STORE_KEY", DEFAULT_STORE_KEY),
        login_delay_seconds=_float_env("LOGIN_DELAY_SECONDS", 1.5),
        submit_delay_seconds=_float_env("SUBMIT_DELAY_SECONDS", 2.0),
        estimated_completion_days=int(os.getenv("ESTIMATED_COMPLETION_DAYS", "7")),
        demo_email=os.getenv("DEMO_EMAIL", "ahmad.khalil@example.com"),
        demo_password=os.getenv("DEMO_PASSWORD", "demo123"),
    )
