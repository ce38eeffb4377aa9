from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from domain import Application, Document, LoggedIn, Notification, Service, User
from logic import build_tracking_number, calculate_progress, generate_id, get_localized_text
from store import AppStore

logger = logging.getLogger(__name__)

PERSONAL_INFO = 1
DOCUMENTS = 2
PAYMENT = 3
REVIEW = 4

# Post-submission processing stages tracked on the application record.
PROCESSING_STEPS = 3
DEFAULT_COMPLETION_DAYS = 7
WIZARD_PAYMENT_METHODS = ("credit-card", "bank-transfer", "cash")
APPLICATIONS_URL = "/dashboard/applications"


class WizardError(Exception):
    pass


class ServiceUnavailableError(WizardError):
    pass


@dataclass(frozen=True)
class WizardStep:
    id: int
    name: str
    name_ar: str


STEPS = (
    WizardStep(PERSONAL_INFO, "Personal Information", "المعلومات الشخصية"),
    WizardStep(DOCUMENTS, "Required Documents", "المستندات المطلوبة"),
    WizardStep(PAYMENT, "Payment", "الدفع"),
    WizardStep(REVIEW, "Review & Submit", "المراجعة والإرسال"),
)


@dataclass
class PersonalInfo:
    full_name: str = ""
    national_id: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""

    @classmethod
    def from_user(cls, user: User | None) -> "PersonalInfo":
        if user is None:
            return cls()
        address = ", ".join(part for part in (user.address.street, user.address.city) if part)
        return cls(
            full_name=user.full_name,
            national_id=user.national_id,
            phone=user.phone,
            email=user.email,
            address=address,
        )


@dataclass
class AttachedFile:
    name: str
    size: int
    content_type: Optional[str] = None


@dataclass
class ApplicationDraft:
    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    documents: list[AttachedFile] = field(default_factory=list)
    additional_info: str = ""
    payment_method: str = "credit-card"
    accepted_terms: bool = False


@dataclass(frozen=True)
class SubmissionResult:
    application: Application
    notification: Notification


def ensure_service_available(service: Service) -> None:
    if not service.is_available:
        raise ServiceUnavailableError(f"Service {service.id} is {service.status}")


class ApplicationWizard:
    """Four-step linear flow that collects a draft and turns it into an Application.

    Navigation is clamped to steps 1..4. The draft stays local to the wizard
    until :meth:`submit`, which writes the new application and its success
    notification through the store.
    """

    def __init__(self, service: Service, user: User | None = None):
        ensure_service_available(service)
        self.service = service
        self.step = PERSONAL_INFO
        self.draft = ApplicationDraft(personal_info=PersonalInfo.from_user(user))
        self.result: SubmissionResult | None = None

    @property
    def total_steps(self) -> int:
        return len(STEPS)

    @property
    def progress(self) -> int:
        return calculate_progress(self.step, self.total_steps)

    @property
    def is_review(self) -> bool:
        return self.step == REVIEW

    @property
    def is_submitted(self) -> bool:
        return self.result is not None

    def can_go_next(self) -> bool:
        return self.step < self.total_steps

    def can_go_previous(self) -> bool:
        return self.step > PERSONAL_INFO

    def next(self) -> int:
        self.step = min(self.step + 1, self.total_steps)
        return self.step

    def previous(self) -> int:
        self.step = max(self.step - 1, PERSONAL_INFO)
        return self.step

    def step_title(self, language: Any, step: int | None = None) -> str:
        number = self.step if step is None else step
        if not PERSONAL_INFO <= number <= len(STEPS):
            raise ValueError(f"Unknown wizard step: {number}")
        current = STEPS[number - 1]
        return get_localized_text(current.name, current.name_ar, language)

    # -- draft edits --------------------------------------------------------

    def update_personal_info(self, **changes: str) -> PersonalInfo:
        known = {item.name for item in fields(PersonalInfo)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValueError(f"Unknown personal info fields: {', '.join(unknown)}")
        for name, value in changes.items():
            setattr(self.draft.personal_info, name, value)
        return self.draft.personal_info

    def attach_document(self, name: str, size: int, content_type: str | None = None) -> AttachedFile:
        attached = AttachedFile(name=name, size=size, content_type=content_type)
        self.draft.documents.append(attached)
        return attached

    def remove_document(self, index: int) -> bool:
        if not 0 <= index < len(self.draft.documents):
            return False
        del self.draft.documents[index]
        return True

    def set_additional_info(self, text: str) -> None:
        self.draft.additional_info = text

    def set_payment_method(self, method: str) -> None:
        if method not in WIZARD_PAYMENT_METHODS:
            raise ValueError(f"Unsupported payment method: {method}")
        self.draft.payment_method = method

    def accept_terms(self, accepted: bool = True) -> None:
        self.draft.accepted_terms = accepted

    # -- submission ---------------------------------------------------------

    def submit(
        self,
        store: AppStore,
        now: datetime | None = None,
        delay_seconds: float = 0.0,
        completion_days: int = DEFAULT_COMPLETION_DAYS,
    ) -> SubmissionResult:
        if self.result is not None:
            raise WizardError(f"Application already submitted as {self.result.application.tracking_number}")
        if not self.is_review:
            raise WizardError(f"Submit is only available from the review step (current step {self.step})")
        session = store.session
        if not isinstance(session, LoggedIn):
            raise WizardError("Login required to submit an application")
        ensure_service_available(self.service)

        if delay_seconds > 0:
            time.sleep(delay_seconds)

        now = now or datetime.now(timezone.utc)
        tracking_number = build_tracking_number(self.service.ministry, now)
        documents = tuple(
            Document(
                id=generate_id(),
                name=item.name,
                name_ar=item.name,
                type="other",
                size=item.size,
                upload_date=now,
                is_required=True,
                is_verified=False,
            )
            for item in self.draft.documents
        )
        application = Application(
            id=generate_id(),
            service_id=self.service.id,
            user_id=session.user.id,
            status="submitted",
            submission_date=now,
            estimated_completion_date=now + timedelta(days=completion_days),
            fees=self.service.fees,
            is_paid=False,
            current_step=1,
            total_steps=PROCESSING_STEPS,
            tracking_number=tracking_number,
            documents=documents,
            notes=self.draft.additional_info or None,
        )
        notification = Notification(
            id=generate_id(),
            user_id=session.user.id,
            title="Application Submitted Successfully",
            title_ar="تم تقديم الطلب بنجاح",
            message=f"Tracking number: {tracking_number}",
            message_ar=f"رقم التتبع: {tracking_number}",
            type="success",
            created_at=now,
            is_read=False,
            action_url=APPLICATIONS_URL,
            application_id=application.id,
        )

        store.add_application(application)
        store.add_notification(notification)
        self.result = SubmissionResult(application=application, notification=notification)
        logger.info(
            "Application %s submitted for service %s (%d documents, payment %s)",
            tracking_number,
            self.service.id,
            len(documents),
            self.draft.payment_method,
        )
        return self.result
