import json
from dataclasses import replace
from datetime import datetime, timezone

from export import application_summary, build_application_receipt, build_json_summary
from seed import SERVICE_ROWS, demo_applications, demo_user, load_services

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def sample_application():
    return demo_applications("user-demo-001", NOW)[0]


def test_receipt_is_a_pdf() -> None:
    application = sample_application()
    service = next(item for item in load_services(SERVICE_ROWS) if item.id == application.service_id)
    pdf = build_application_receipt(application, service, demo_user())
    assert pdf.startswith(b"%PDF")


def test_receipt_tolerates_missing_records_and_markup() -> None:
    application = replace(sample_application(), notes="Bring <originals> & copies")
    assert build_application_receipt(application, None, None).startswith(b"%PDF")


def test_json_summary_contains_tracking_details() -> None:
    application = sample_application()
    payload = application_summary(application, None, demo_user())
    data = json.loads(build_json_summary(payload).decode("utf-8"))
    assert data["tracking_number"] == application.tracking_number
    assert data["service_name"] is None
    assert data["applicant"]["name"] == "Ahmad Khalil"
    assert data["documents"][0]["type"] == "national-id"
