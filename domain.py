from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Optional, Union

SERVICE_CATEGORIES = (
    "civil-registry",
    "vehicle-registration",
    "taxation",
    "utilities",
    "social-security",
    "health",
    "education",
    "justice",
    "interior",
    "labor",
)
SERVICE_STATUSES = ("online", "offline", "maintenance", "limited")
UNAVAILABLE_SERVICE_STATUSES = {"offline", "maintenance"}
APPLICATION_STATUSES = (
    "draft",
    "submitted",
    "under-review",
    "additional-documents-required",
    "approved",
    "rejected",
    "completed",
    "expired",
)
DOCUMENT_TYPES = (
    "national-id",
    "passport",
    "birth-certificate",
    "marriage-certificate",
    "divorce-certificate",
    "death-certificate",
    "residence-proof",
    "income-proof",
    "tax-clearance",
    "medical-report",
    "photo",
    "other",
)
NOTIFICATION_TYPES = ("info", "success", "warning", "error", "reminder")
PAYMENT_METHODS = ("credit-card", "debit-card", "bank-transfer", "cash", "digital-wallet")


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass(frozen=True)
class Language:
    code: str  # en | ar
    name: str
    direction: str  # ltr | rtl


ENGLISH = Language(code="en", name="English", direction="ltr")
ARABIC = Language(code="ar", name="العربية", direction="rtl")
LANGUAGES = {ENGLISH.code: ENGLISH, ARABIC.code: ARABIC}


def language_from_code(code: str | None) -> Language:
    return LANGUAGES.get(code or "", ENGLISH)


@dataclass(frozen=True)
class Address:
    street: str = ""
    street_ar: str = ""
    building: str = ""
    city: str = ""
    city_ar: str = ""
    district: str = ""
    district_ar: str = ""
    postal_code: str = ""


@dataclass(frozen=True)
class User:
    id: str
    national_id: str
    first_name: str
    last_name: str
    first_name_ar: str
    last_name_ar: str
    email: str
    phone: str
    date_of_birth: str
    gender: str  # male | female
    nationality: str
    address: Address = field(default_factory=Address)
    avatar: Optional[str] = None
    is_verified: bool = False
    registration_date: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def full_name_ar(self) -> str:
        return f"{self.first_name_ar} {self.last_name_ar}".strip()

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["registration_date"] = self.registration_date.isoformat() if self.registration_date else None
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "User":
        data = dict(payload)
        data["address"] = Address(**(data.get("address") or {}))
        data["registration_date"] = _parse_datetime(data.get("registration_date"))
        return cls(**data)


@dataclass(frozen=True)
class Service:
    id: str
    name: str
    name_ar: str
    description: str
    description_ar: str
    category: str
    status: str
    fees: float
    ministry: str
    ministry_ar: str
    icon: str = ""
    estimated_time: str = ""
    required_documents: tuple[str, ...] = ()
    url: str = ""

    @property
    def is_available(self) -> bool:
        return self.status not in UNAVAILABLE_SERVICE_STATUSES


@dataclass(frozen=True)
class MinistryContact:
    phone: str = ""
    email: str = ""
    website: str = ""
    address: str = ""
    address_ar: str = ""


@dataclass(frozen=True)
class Ministry:
    id: str
    name: str
    name_ar: str
    description: str
    description_ar: str
    status: str
    services: tuple[str, ...] = ()
    contact: MinistryContact = field(default_factory=MinistryContact)
    logo: str = ""
    color: str = ""


@dataclass(frozen=True)
class Document:
    id: str
    name: str
    name_ar: str
    type: str
    size: int
    upload_date: datetime
    is_required: bool = False
    is_verified: bool = False
    url: Optional[str] = None


@dataclass(frozen=True)
class Application:
    id: str
    service_id: str
    user_id: str
    status: str
    submission_date: datetime
    estimated_completion_date: datetime
    fees: float
    is_paid: bool
    current_step: int
    total_steps: int
    tracking_number: str
    documents: tuple[Document, ...] = ()
    completion_date: Optional[datetime] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class Notification:
    id: str
    user_id: str
    title: str
    title_ar: str
    message: str
    message_ar: str
    type: str
    created_at: datetime
    is_read: bool = False
    action_url: Optional[str] = None
    application_id: Optional[str] = None


@dataclass(frozen=True)
class DashboardStats:
    total_applications: int
    pending_applications: int
    completed_applications: int
    total_payments: float
    unread_notifications: int
    services_used: int


@dataclass(frozen=True)
class LoggedOut:
    pass


@dataclass(frozen=True)
class LoggedIn:
    user: User


SessionView = Union[LoggedOut, LoggedIn]
