from __future__ import annotations

import math
import re
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Sequence, TypeVar

from babel.dates import format_date as babel_format_date
from babel.dates import format_datetime as babel_format_datetime
from babel.numbers import format_currency as babel_format_currency

from domain import DashboardStats

T = TypeVar("T")

BABEL_LOCALES = {"en": "en_US", "ar": "ar_LB"}
EN_DATE_PATTERN = "MMM dd, yyyy"
EN_DATE_TIME_PATTERN = "MMM dd, yyyy HH:mm"

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_SEPARATORS_RE = re.compile(r"[\s\-()]")
# Local form (optional trunk 0 + 8 digits) or international form (+961 / 961 / 00961)
# followed by a 7 or 8 digit national number that cannot start with 0.
PHONE_RE = re.compile(r"^(?:0?[0-9]{8}|(?:\+961|00961|961)[1-9][0-9]{6,7})$")
NATIONAL_ID_RE = re.compile(r"^\d{11}$")
WHITESPACE_RE = re.compile(r"\s+")

LOGIN_PASSWORD_MIN = 6
REGISTRATION_PASSWORD_MIN = 8
MINIMUM_AGE = 18

PENDING_STATUSES = {"submitted", "under-review", "additional-documents-required"}
COMPLETED_STATUSES = {"completed", "approved"}

STATUS_TONES = {
    "online": "success",
    "completed": "success",
    "approved": "success",
    "offline": "error",
    "rejected": "error",
    "expired": "error",
    "maintenance": "warning",
    "under-review": "warning",
    "additional-documents-required": "warning",
    "limited": "primary",
    "submitted": "primary",
    "draft": "primary",
}

STATUS_TEXTS = {
    "en": {
        "online": "Online",
        "offline": "Offline",
        "maintenance": "Maintenance",
        "limited": "Limited",
        "draft": "Draft",
        "submitted": "Submitted",
        "under-review": "Under Review",
        "additional-documents-required": "Documents Required",
        "approved": "Approved",
        "rejected": "Rejected",
        "completed": "Completed",
        "expired": "Expired",
    },
    "ar": {
        "online": "متاح",
        "offline": "غير متاح",
        "maintenance": "صيانة",
        "limited": "محدود",
        "draft": "مسودة",
        "submitted": "مقدم",
        "under-review": "قيد المراجعة",
        "additional-documents-required": "مطلوب مستندات",
        "approved": "موافق عليه",
        "rejected": "مرفوض",
        "completed": "مكتمل",
        "expired": "منتهي الصلاحية",
    },
}

MESSAGES: dict[str, tuple[str, str]] = {
    "email_required": ("Email is required", "البريد الإلكتروني مطلوب"),
    "email_invalid": ("Invalid email address", "البريد الإلكتروني غير صحيح"),
    "password_required": ("Password is required", "كلمة المرور مطلوبة"),
    "password_short_login": (
        f"Password must be at least {LOGIN_PASSWORD_MIN} characters",
        f"كلمة المرور يجب أن تكون {LOGIN_PASSWORD_MIN} أحرف على الأقل",
    ),
    "password_short_registration": (
        f"Password must be at least {REGISTRATION_PASSWORD_MIN} characters",
        f"كلمة المرور يجب أن تكون {REGISTRATION_PASSWORD_MIN} أحرف على الأقل",
    ),
    "password_mismatch": ("Passwords do not match", "كلمتا المرور غير متطابقتين"),
    "first_name_required": ("First name is required", "الاسم الأول مطلوب"),
    "last_name_required": ("Last name is required", "اسم العائلة مطلوب"),
    "phone_required": ("Phone number is required", "رقم الهاتف مطلوب"),
    "phone_invalid": ("Invalid phone number", "رقم الهاتف غير صحيح"),
    "national_id_required": ("National ID is required", "رقم الهوية مطلوب"),
    "national_id_invalid": ("National ID must be 11 digits", "رقم الهوية يجب أن يتكون من 11 رقماً"),
    "date_of_birth_required": ("Date of birth is required", "تاريخ الولادة مطلوب"),
    "date_of_birth_invalid": ("Invalid date of birth", "تاريخ الولادة غير صحيح"),
    "under_age": (
        f"You must be at least {MINIMUM_AGE} years old",
        f"يجب أن يكون عمرك {MINIMUM_AGE} سنة على الأقل",
    ),
    "terms_required": ("You must accept the terms and conditions", "يجب الموافقة على الشروط والأحكام"),
    "unknown_service": ("Unknown Service", "خدمة غير معروفة"),
    "profile_email_taken": ("This email is already used by another account", "هذا البريد الإلكتروني مستخدم لحساب آخر"),
}


def _field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def _language_code(language: Any) -> str:
    if isinstance(language, str):
        return language
    return _field(language, "code", "en") or "en"


def _to_datetime(value: str | date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def get_localized_text(text_en: str, text_ar: str, language: Any) -> str:
    return text_ar if _language_code(language) == "ar" else text_en


def message(key: str, language: Any) -> str:
    text_en, text_ar = MESSAGES[key]
    return get_localized_text(text_en, text_ar, language)


def format_date(value: str | date | datetime, locale: str = "en") -> str:
    moment = _to_datetime(value)
    if locale == "ar":
        return babel_format_date(moment, format="long", locale=BABEL_LOCALES["ar"])
    return babel_format_date(moment, format=EN_DATE_PATTERN, locale=BABEL_LOCALES["en"])


def format_date_time(value: str | date | datetime, locale: str = "en") -> str:
    moment = _to_datetime(value)
    if locale == "ar":
        return babel_format_datetime(moment, format="d MMMM y HH:mm", locale=BABEL_LOCALES["ar"])
    return babel_format_datetime(moment, format=EN_DATE_TIME_PATTERN, locale=BABEL_LOCALES["en"])


def format_currency(amount: float | int | Decimal, currency: str = "USD", locale: str = "en") -> str:
    # CLDR carries the fraction digits per currency: two for USD, none for LBP.
    babel_locale = BABEL_LOCALES.get(locale, BABEL_LOCALES["en"])
    return babel_format_currency(amount, currency, locale=babel_locale, currency_digits=True)


def get_status_color(status: str) -> str:
    return STATUS_TONES.get(status, "neutral")


def get_status_text(status: str, language: Any) -> str:
    texts = STATUS_TEXTS.get(_language_code(language), STATUS_TEXTS["en"])
    return texts.get(status, status)


def validate_national_id(national_id: str) -> bool:
    return bool(NATIONAL_ID_RE.match(WHITESPACE_RE.sub("", national_id or "")))


def validate_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


def validate_phone_number(phone: str) -> bool:
    return bool(PHONE_RE.match(PHONE_SEPARATORS_RE.sub("", phone or "")))


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def format_file_size(size_bytes: int) -> str:
    if size_bytes <= 0:
        return "0 Bytes"
    sizes = ["Bytes", "KB", "MB", "GB"]
    index = 0
    while size_bytes >= 1024 ** (index + 1) and index < len(sizes) - 1:
        index += 1
    value = f"{size_bytes / (1024 ** index):.2f}".rstrip("0").rstrip(".")
    return f"{value} {sizes[index]}"


def calculate_progress(current_step: int, total_steps: int) -> int:
    # Half-up rounding; round() would send 12.5 to 12.
    return int(math.floor(current_step / total_steps * 100 + 0.5))


def sort_by_date(items: Iterable[T], date_field: str, order: str = "desc") -> list[T]:
    return sorted(
        items,
        key=lambda item: _to_datetime(_field(item, date_field)).timestamp(),
        reverse=order == "desc",
    )


def search_items(items: Sequence[T], search_term: str, search_fields: Sequence[str]) -> Sequence[T]:
    if not search_term:
        return items
    needle = search_term.lower()
    return [
        item
        for item in items
        if any(
            isinstance(_field(item, name), str) and needle in _field(item, name).lower()
            for name in search_fields
        )
    ]


def generate_id() -> str:
    return uuid.uuid4().hex


def build_tracking_number(ministry: str, now: datetime) -> str:
    millis = str(int(now.timestamp() * 1000))
    return f"LB-{WHITESPACE_RE.sub('', ministry).upper()}-{millis[-6:]}"


def filter_services(services: Sequence[T], search_term: str = "", category: str = "all") -> list[T]:
    matches = search_items(services, search_term, ["name", "name_ar", "description", "description_ar"])
    return [service for service in matches if category == "all" or _field(service, "category") == category]


def filter_applications(applications: Sequence[T], status: str = "all") -> list[T]:
    return [app for app in applications if status == "all" or _field(app, "status") == status]


def filter_notifications(notifications: Sequence[T], type_filter: str = "all", read_filter: str = "all") -> list[T]:
    results = []
    for notification in notifications:
        type_match = type_filter == "all" or _field(notification, "type") == type_filter
        is_read = bool(_field(notification, "is_read", False))
        read_match = (
            read_filter == "all"
            or (read_filter == "read" and is_read)
            or (read_filter == "unread" and not is_read)
        )
        if type_match and read_match:
            results.append(notification)
    return results


def count_unread(notifications: Iterable[Any]) -> int:
    return sum(1 for notification in notifications if not _field(notification, "is_read", False))


def compute_dashboard_stats(applications: Sequence[Any], notifications: Sequence[Any]) -> DashboardStats:
    return DashboardStats(
        total_applications=len(applications),
        pending_applications=sum(1 for app in applications if _field(app, "status") in PENDING_STATUSES),
        completed_applications=sum(1 for app in applications if _field(app, "status") in COMPLETED_STATUSES),
        total_payments=float(sum(_field(app, "fees", 0) or 0 for app in applications if _field(app, "is_paid"))),
        unread_notifications=count_unread(notifications),
        services_used=len({_field(app, "service_id") for app in applications}),
    )


def resolve_service_name(service_id: str, services: Sequence[Any], language: Any) -> str:
    for service in services:
        if _field(service, "id") == service_id:
            return get_localized_text(_field(service, "name", ""), _field(service, "name_ar", ""), language)
    return message("unknown_service", language)


def calculate_age(date_of_birth: date, today: date) -> int:
    had_birthday = (today.month, today.day) >= (date_of_birth.month, date_of_birth.day)
    return today.year - date_of_birth.year - (0 if had_birthday else 1)


def _check_email(errors: dict[str, str], email: str, language: Any) -> None:
    if not email:
        errors["email"] = message("email_required", language)
    elif not validate_email(email):
        errors["email"] = message("email_invalid", language)


def _check_phone(errors: dict[str, str], phone: str, language: Any) -> None:
    if not phone:
        errors["phone"] = message("phone_required", language)
    elif not validate_phone_number(phone):
        errors["phone"] = message("phone_invalid", language)


def validate_login_form(email: str, password: str, language: Any) -> dict[str, str]:
    errors: dict[str, str] = {}
    _check_email(errors, (email or "").strip(), language)
    if not password:
        errors["password"] = message("password_required", language)
    elif len(password) < LOGIN_PASSWORD_MIN:
        errors["password"] = message("password_short_login", language)
    return errors


def validate_profile_form(fields: dict[str, Any], language: Any) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not (fields.get("first_name") or "").strip():
        errors["first_name"] = message("first_name_required", language)
    if not (fields.get("last_name") or "").strip():
        errors["last_name"] = message("last_name_required", language)
    _check_email(errors, (fields.get("email") or "").strip(), language)
    _check_phone(errors, (fields.get("phone") or "").strip(), language)
    return errors


def validate_registration_form(form: dict[str, Any], language: Any, today: date | None = None) -> dict[str, str]:
    today = today or date.today()
    errors = validate_profile_form(form, language)

    national_id = (form.get("national_id") or "").strip()
    if not national_id:
        errors["national_id"] = message("national_id_required", language)
    elif not validate_national_id(national_id):
        errors["national_id"] = message("national_id_invalid", language)

    raw_dob = form.get("date_of_birth")
    if not raw_dob:
        errors["date_of_birth"] = message("date_of_birth_required", language)
    else:
        try:
            dob = raw_dob if isinstance(raw_dob, date) else date.fromisoformat(str(raw_dob))
        except ValueError:
            errors["date_of_birth"] = message("date_of_birth_invalid", language)
        else:
            if calculate_age(dob, today) < MINIMUM_AGE:
                errors["date_of_birth"] = message("under_age", language)

    password = form.get("password") or ""
    if not password:
        errors["password"] = message("password_required", language)
    elif len(password) < REGISTRATION_PASSWORD_MIN:
        errors["password"] = message("password_short_registration", language)
    if password and password != (form.get("confirm_password") or ""):
        errors["confirm_password"] = message("password_mismatch", language)

    if not form.get("accept_terms"):
        errors["accept_terms"] = message("terms_required", language)
    return errors
