import re
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from domain import Service
from seed import demo_user, initialize_store
from store import AppStore
from wizard import (
    DOCUMENTS,
    PERSONAL_INFO,
    REVIEW,
    ApplicationWizard,
    ServiceUnavailableError,
    WizardError,
)

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_service(**overrides) -> Service:
    data = {
        "id": "id-renewal",
        "name": "ID Renewal",
        "name_ar": "تجديد الهوية",
        "description": "Renew your national identity card.",
        "description_ar": "تجديد بطاقة الهوية.",
        "category": "civil-registry",
        "status": "online",
        "fees": 25,
        "ministry": "Interior",
        "ministry_ar": "الداخلية",
    }
    data.update(overrides)
    return Service(**data)


def logged_in_store() -> AppStore:
    store = AppStore()
    initialize_store(store)
    store.login(demo_user())
    return store


def at_review(wizard: ApplicationWizard) -> ApplicationWizard:
    while wizard.can_go_next():
        wizard.next()
    return wizard


def test_navigation_is_clamped() -> None:
    wizard = ApplicationWizard(make_service())
    assert wizard.step == PERSONAL_INFO
    assert wizard.previous() == PERSONAL_INFO
    assert wizard.can_go_previous() is False
    for _ in range(6):
        wizard.next()
    assert wizard.step == REVIEW
    assert wizard.is_review is True
    assert wizard.progress == 100
    assert wizard.previous() == 3


def test_step_titles_are_localized() -> None:
    wizard = ApplicationWizard(make_service())
    assert wizard.step_title("en") == "Personal Information"
    assert wizard.step_title("ar", DOCUMENTS) == "المستندات المطلوبة"


def test_explicit_step_title_ignores_the_current_step() -> None:
    wizard = ApplicationWizard(make_service())
    at_review(wizard)
    assert wizard.step_title("en") == wizard.step_title("en", REVIEW)
    assert wizard.step_title("en", PERSONAL_INFO) == "Personal Information"
    with pytest.raises(ValueError):
        wizard.step_title("en", 0)
    with pytest.raises(ValueError):
        wizard.step_title("en", REVIEW + 1)


def test_personal_info_prefills_from_user() -> None:
    user = demo_user()
    wizard = ApplicationWizard(make_service(), user)
    info = wizard.draft.personal_info
    assert info.full_name == "Ahmad Khalil"
    assert info.national_id == user.national_id
    assert info.email == user.email

    wizard.update_personal_info(phone="03123456")
    assert wizard.draft.personal_info.phone == "03123456"
    with pytest.raises(ValueError):
        wizard.update_personal_info(favourite_colour="blue")


def test_payment_method_must_be_supported() -> None:
    wizard = ApplicationWizard(make_service())
    wizard.set_payment_method("cash")
    assert wizard.draft.payment_method == "cash"
    with pytest.raises(ValueError):
        wizard.set_payment_method("bitcoin")


def test_documents_can_be_attached_and_removed() -> None:
    wizard = ApplicationWizard(make_service())
    wizard.attach_document("id.pdf", 2048, "application/pdf")
    wizard.attach_document("photo.jpg", 1024, "image/jpeg")
    assert wizard.remove_document(0) is True
    assert wizard.remove_document(5) is False
    assert [item.name for item in wizard.draft.documents] == ["photo.jpg"]


def test_submit_creates_application_and_notification() -> None:
    store = logged_in_store()
    wizard = at_review(ApplicationWizard(make_service(), store.user))
    wizard.attach_document("id.pdf", 2048, "application/pdf")
    wizard.set_additional_info("Urgent travel")

    result = wizard.submit(store, now=NOW)
    application = result.application

    assert application.status == "submitted"
    assert application.fees == 25
    assert application.is_paid is False
    assert application.current_step == 1
    assert application.total_steps == 3
    assert application.user_id == store.user.id
    assert application.estimated_completion_date == NOW + timedelta(days=7)
    assert application.notes == "Urgent travel"
    assert re.match(r"^LB-INTERIOR-\d{6}$", application.tracking_number)
    assert application.documents[0].type == "other"
    assert application.documents[0].is_required is True

    assert store.applications[0] == application
    notification = store.notifications[0]
    assert notification == result.notification
    assert notification.type == "success"
    assert notification.title == "Application Submitted Successfully"
    assert notification.title_ar == "تم تقديم الطلب بنجاح"
    assert notification.application_id == application.id
    assert notification.is_read is False
    assert wizard.is_submitted is True


def test_submit_guards() -> None:
    store = logged_in_store()

    early = ApplicationWizard(make_service(), store.user)
    with pytest.raises(WizardError):
        early.submit(store, now=NOW)

    anonymous = at_review(ApplicationWizard(make_service()))
    with pytest.raises(WizardError):
        anonymous.submit(AppStore(), now=NOW)

    wizard = at_review(ApplicationWizard(make_service(), store.user))
    wizard.submit(store, now=NOW)
    with pytest.raises(WizardError):
        wizard.submit(store, now=NOW)
    assert len([item for item in store.applications if item.service_id == "id-renewal"]) == 1


@pytest.mark.parametrize("status", ["offline", "maintenance"])
def test_unavailable_services_cannot_be_applied_for(status: str) -> None:
    with pytest.raises(ServiceUnavailableError):
        ApplicationWizard(make_service(status=status))


def test_service_going_offline_blocks_submission() -> None:
    store = logged_in_store()
    wizard = at_review(ApplicationWizard(make_service(), store.user))
    wizard.service = replace(wizard.service, status="maintenance")
    with pytest.raises(ServiceUnavailableError):
        wizard.submit(store, now=NOW)
    assert store.applications == []


def test_limited_services_accept_submissions() -> None:
    store = logged_in_store()
    service = store.get_service("work-permit")
    result = at_review(ApplicationWizard(service, store.user)).submit(store, now=NOW)
    assert result.application.tracking_number.startswith("LB-LABOR-")
