from datetime import date, datetime, timezone

from domain import ARABIC, ENGLISH
from logic import (
    build_tracking_number,
    calculate_progress,
    compute_dashboard_stats,
    filter_applications,
    filter_notifications,
    filter_services,
    format_currency,
    format_date,
    format_file_size,
    get_localized_text,
    get_status_color,
    get_status_text,
    resolve_service_name,
    search_items,
    sort_by_date,
    truncate_text,
    validate_email,
    validate_login_form,
    validate_national_id,
    validate_phone_number,
    validate_registration_form,
)


def base_registration_form() -> dict:
    return {
        "first_name": "Rima",
        "last_name": "Haddad",
        "email": "rima.haddad@example.com",
        "phone": "+961 3 123 456",
        "national_id": "12345678901",
        "date_of_birth": "1990-06-01",
        "password": "secret123",
        "confirm_password": "secret123",
        "accept_terms": True,
    }


def test_get_localized_text_follows_language_code() -> None:
    assert get_localized_text("Hello", "مرحبا", "en") == "Hello"
    assert get_localized_text("Hello", "مرحبا", "ar") == "مرحبا"
    assert get_localized_text("Hello", "مرحبا", ARABIC) == "مرحبا"
    assert get_localized_text("Hello", "مرحبا", ENGLISH) == "Hello"


def test_phone_validation_accepts_lebanese_formats() -> None:
    assert validate_phone_number("+961 3 123 456") is True
    assert validate_phone_number("03123456") is True
    assert validate_phone_number("71-123-456") is True
    assert validate_phone_number("(03) 123456") is True
    assert validate_phone_number("+961 71 123 456") is True
    assert validate_phone_number("96171123456") is True
    assert validate_phone_number("0096171123456") is True
    assert validate_phone_number("12345") is False
    assert validate_phone_number("+961 0312 3456") is False
    assert validate_phone_number("") is False


def test_email_and_national_id_validation() -> None:
    assert validate_email("citizen@gov.lb") is True
    assert validate_email("citizen@gov") is False
    assert validate_email("citi zen@gov.lb") is False
    assert validate_national_id("123 456 789 01") is True
    assert validate_national_id("1234567890") is False
    assert validate_national_id("1234567890a") is False


def test_calculate_progress_bounds_and_rounding() -> None:
    assert calculate_progress(0, 4) == 0
    assert calculate_progress(1, 4) == 25
    assert calculate_progress(4, 4) == 100
    assert calculate_progress(1, 3) == 33
    assert calculate_progress(2, 3) == 67
    assert calculate_progress(1, 8) == 13


def test_truncate_text_and_file_size() -> None:
    assert truncate_text("hello world", 5) == "hello..."
    assert truncate_text("short", 10) == "short"
    assert format_file_size(0) == "0 Bytes"
    assert format_file_size(1024) == "1 KB"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(1048576) == "1 MB"


def test_format_date_and_currency() -> None:
    moment = datetime(2024, 3, 5, 9, 30)
    assert format_date(moment) == "Mar 05, 2024"
    assert format_date("2024-03-05") == "Mar 05, 2024"
    assert format_date(moment, "ar") != format_date(moment, "en")
    assert format_currency(25) == "$25.00"
    lbp = format_currency(150000, "LBP")
    assert "150,000" in lbp
    assert "." not in lbp


def test_search_items_is_case_insensitive_and_passes_through_empty_term() -> None:
    items = [{"name": "Passport Application"}, {"name": "Birth Certificate"}, {"name": None}]
    assert search_items(items, "", ["name"]) is items
    assert search_items(items, "PASSPORT", ["name"]) == [items[0]]
    assert search_items(items, "zzz", ["name"]) == []


def test_filter_services_by_term_and_category() -> None:
    services = [
        {"name": "Passport", "name_ar": "جواز", "description": "", "description_ar": "", "category": "interior"},
        {"name": "Tax Filing", "name_ar": "ضريبة", "description": "", "description_ar": "", "category": "taxation"},
    ]
    assert filter_services(services, "", "all") == services
    assert filter_services(services, "", "taxation") == [services[1]]
    assert filter_services(services, "جواز") == [services[0]]


def test_sort_by_date_orders_descending_by_default() -> None:
    items = [{"d": "2024-01-02"}, {"d": "2024-03-01"}, {"d": "2023-12-31"}]
    assert [item["d"] for item in sort_by_date(items, "d")] == ["2024-03-01", "2024-01-02", "2023-12-31"]
    assert [item["d"] for item in sort_by_date(items, "d", "asc")][0] == "2023-12-31"


def test_build_tracking_number_uses_ministry_and_epoch_suffix() -> None:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert build_tracking_number("Interior", now) == "LB-INTERIOR-200000"
    assert build_tracking_number("Public Works", now).startswith("LB-PUBLICWORKS-")


def test_status_helpers() -> None:
    assert get_status_color("online") == "success"
    assert get_status_color("maintenance") == "warning"
    assert get_status_color("unknown-status") == "neutral"
    assert get_status_text("under-review", "en") == "Under Review"
    assert get_status_text("under-review", "ar") == "قيد المراجعة"


def test_filters_and_dashboard_stats() -> None:
    applications = [
        {"status": "submitted", "fees": 10, "is_paid": False, "service_id": "a"},
        {"status": "completed", "fees": 25, "is_paid": True, "service_id": "b"},
        {"status": "under-review", "fees": 5, "is_paid": True, "service_id": "a"},
    ]
    notifications = [
        {"type": "info", "is_read": False},
        {"type": "success", "is_read": True},
        {"type": "info", "is_read": True},
    ]

    assert len(filter_applications(applications, "completed")) == 1
    assert len(filter_applications(applications)) == 3
    assert filter_notifications(notifications, "info", "unread") == [notifications[0]]
    assert len(filter_notifications(notifications, "all", "read")) == 2

    stats = compute_dashboard_stats(applications, notifications)
    assert stats.total_applications == 3
    assert stats.pending_applications == 2
    assert stats.completed_applications == 1
    assert stats.total_payments == 30
    assert stats.unread_notifications == 1
    assert stats.services_used == 2


def test_resolve_service_name_falls_back() -> None:
    services = [{"id": "x", "name": "Passport", "name_ar": "جواز"}]
    assert resolve_service_name("x", services, "ar") == "جواز"
    assert resolve_service_name("missing", services, "en") == "Unknown Service"


def test_validate_login_form_messages() -> None:
    assert validate_login_form("citizen@gov.lb", "secret", "en") == {}
    errors = validate_login_form("", "123", "en")
    assert set(errors) == {"email", "password"}
    assert validate_login_form("bad", "secret", "ar")["email"] == "البريد الإلكتروني غير صحيح"


def test_validate_registration_form() -> None:
    today = date(2026, 1, 1)
    assert validate_registration_form(base_registration_form(), "en", today=today) == {}

    form = base_registration_form()
    form.update(
        date_of_birth="2015-01-01",
        national_id="123",
        confirm_password="different",
        accept_terms=False,
    )
    errors = validate_registration_form(form, "en", today=today)
    assert set(errors) >= {"date_of_birth", "national_id", "confirm_password", "accept_terms"}

    short = base_registration_form()
    short.update(password="short1", confirm_password="short1")
    assert "password" in validate_registration_form(short, "en", today=today)
