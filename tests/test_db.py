from db import normalize_database_url


def test_heroku_style_postgres_url_gets_driver_and_tls() -> None:
    url = normalize_database_url(' "postgres://user:pw@db.example.com:5432/portal" ')
    assert url == "postgresql+psycopg2://user:pw@db.example.com:5432/portal?sslmode=require"


def test_explicit_sslmode_and_local_hosts_are_left_alone() -> None:
    remote = "postgresql+psycopg2://user:pw@db.example.com/portal?sslmode=disable"
    assert normalize_database_url(remote) == remote
    assert normalize_database_url("postgresql://user@localhost/portal") == "postgresql+psycopg2://user@localhost/portal"


def test_sqlite_urls_pass_through() -> None:
    assert normalize_database_url("sqlite:///digital_lebanon.db") == "sqlite:///digital_lebanon.db"
