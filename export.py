from __future__ import annotations

import io
import json
from datetime import datetime, timezone
from html import escape
from typing import Any, Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from domain import Application, Service, User
from logic import format_currency, format_date, format_file_size, get_status_text


def _safe_text(value: Any) -> str:
    if value is None or value == "":
        return "-"
    return escape(str(value))


def application_summary(
    application: Application,
    service: Optional[Service],
    user: Optional[User],
) -> dict[str, Any]:
    return {
        "tracking_number": application.tracking_number,
        "service_id": application.service_id,
        "service_name": service.name if service else None,
        "ministry": service.ministry if service else None,
        "status": application.status,
        "submission_date": application.submission_date.isoformat(),
        "estimated_completion_date": application.estimated_completion_date.isoformat(),
        "completion_date": application.completion_date.isoformat() if application.completion_date else None,
        "fees": application.fees,
        "is_paid": application.is_paid,
        "progress": {"current_step": application.current_step, "total_steps": application.total_steps},
        "applicant": {
            "name": user.full_name if user else None,
            "national_id": user.national_id if user else None,
            "email": user.email if user else None,
        },
        "documents": [{"name": doc.name, "type": doc.type, "size": doc.size} for doc in application.documents],
        "notes": application.notes,
    }


def build_application_receipt(
    application: Application,
    service: Optional[Service],
    user: Optional[User],
) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, title=f"Receipt {application.tracking_number}")
    styles = getSampleStyleSheet()
    normal = styles["BodyText"]
    heading = styles["Heading2"]

    story = []
    story.append(Paragraph("Digital Lebanon - Application Receipt", styles["Title"]))
    story.append(Paragraph(f"Generated: {datetime.now(timezone.utc).isoformat(timespec='seconds')}", normal))
    story.append(Spacer(1, 12))

    story.append(Paragraph("Application", heading))
    story.append(Paragraph(f"Tracking number: {_safe_text(application.tracking_number)}", normal))
    story.append(Paragraph(f"Service: {_safe_text(service.name if service else application.service_id)}", normal))
    story.append(Paragraph(f"Ministry: {_safe_text(service.ministry if service else None)}", normal))
    story.append(Paragraph(f"Status: {get_status_text(application.status, 'en')}", normal))
    story.append(Paragraph(f"Submitted: {format_date(application.submission_date)}", normal))
    story.append(Paragraph(f"Estimated completion: {format_date(application.estimated_completion_date)}", normal))
    if application.completion_date:
        story.append(Paragraph(f"Completed: {format_date(application.completion_date)}", normal))
    story.append(Paragraph(f"Processing stage: {application.current_step} of {application.total_steps}", normal))
    story.append(Spacer(1, 8))

    story.append(Paragraph("Payment", heading))
    story.append(Paragraph(f"Fees: {format_currency(application.fees)}", normal))
    story.append(Paragraph(f"Paid: {'Yes' if application.is_paid else 'No'}", normal))
    story.append(Spacer(1, 8))

    if user:
        story.append(Paragraph("Applicant", heading))
        story.append(Paragraph(f"Name: {_safe_text(user.full_name)}", normal))
        story.append(Paragraph(f"National ID: {_safe_text(user.national_id)}", normal))
        story.append(Paragraph(f"Email: {_safe_text(user.email)}", normal))
        story.append(Paragraph(f"Phone: {_safe_text(user.phone)}", normal))
        story.append(Spacer(1, 8))

    story.append(Paragraph("Documents", heading))
    if application.documents:
        for item in application.documents:
            story.append(Paragraph(f"- {_safe_text(item.name)} ({format_file_size(item.size)})", normal))
    else:
        story.append(Paragraph("- none attached", normal))

    if application.notes:
        story.append(Spacer(1, 8))
        story.append(Paragraph("Notes", heading))
        story.append(Paragraph(_safe_text(application.notes), normal))

    doc.build(story)
    buffer.seek(0)
    return buffer.read()


def build_json_summary(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str).encode("utf-8")
