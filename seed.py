from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy.orm import Session

from auth import create_account, get_account_by_email
from config import get_settings
from domain import Application, Document, Ministry, MinistryContact, Notification, Service, User
from store import AppStore

logger = logging.getLogger(__name__)

REQUIRED_SERVICE_FIELDS = {
    "id",
    "name",
    "name_ar",
    "description",
    "description_ar",
    "category",
    "status",
    "fees",
    "ministry",
    "ministry_ar",
}
REQUIRED_MINISTRY_FIELDS = {"id", "name", "name_ar", "description", "description_ar", "status", "services"}

MINISTRY_ROWS: list[dict[str, Any]] = [
    {
        "id": "interior",
        "name": "Ministry of Interior and Municipalities",
        "name_ar": "وزارة الداخلية والبلديات",
        "description": "Civil status records, identity documents and municipal affairs.",
        "description_ar": "سجلات الأحوال الشخصية ووثائق الهوية والشؤون البلدية.",
        "status": "online",
        "services": "birth-certificate|family-civil-extract|marriage-registration|passport-application",
        "color": "#1d4ed8",
        "contact": {
            "phone": "+961 1 750 000",
            "email": "info@interior.gov.lb",
            "website": "https://www.interior.gov.lb",
            "address": "Sanayeh, Beirut",
            "address_ar": "الصنائع، بيروت",
        },
    },
    {
        "id": "finance",
        "name": "Ministry of Finance",
        "name_ar": "وزارة المالية",
        "description": "Tax filing, clearances and public revenue services.",
        "description_ar": "التصريح الضريبي وبراءات الذمة وخدمات الإيرادات العامة.",
        "status": "online",
        "services": "income-tax-filing|tax-clearance",
        "color": "#047857",
        "contact": {
            "phone": "+961 1 981 001",
            "email": "info@finance.gov.lb",
            "website": "https://www.finance.gov.lb",
            "address": "Riad El Solh, Beirut",
            "address_ar": "رياض الصلح، بيروت",
        },
    },
    {
        "id": "public-works",
        "name": "Ministry of Public Works and Transport",
        "name_ar": "وزارة الأشغال العامة والنقل",
        "description": "Vehicle registration and driving licences.",
        "description_ar": "تسجيل المركبات ورخص القيادة.",
        "status": "limited",
        "services": "vehicle-registration|driving-license-renewal",
        "color": "#b45309",
        "contact": {
            "phone": "+961 1 371 644",
            "email": "info@transportation.gov.lb",
            "website": "https://www.transportation.gov.lb",
            "address": "Bir Hassan, Beirut",
            "address_ar": "بئر حسن، بيروت",
        },
    },
    {
        "id": "labor",
        "name": "Ministry of Labor",
        "name_ar": "وزارة العمل",
        "description": "Work permits and social security registration.",
        "description_ar": "إجازات العمل والتسجيل في الضمان الاجتماعي.",
        "status": "online",
        "services": "nssf-registration|work-permit",
        "color": "#7c3aed",
        "contact": {
            "phone": "+961 1 556 800",
            "email": "info@labor.gov.lb",
            "website": "https://www.labor.gov.lb",
            "address": "Chiyah, Beirut",
            "address_ar": "الشياح، بيروت",
        },
    },
    {
        "id": "public-health",
        "name": "Ministry of Public Health",
        "name_ar": "وزارة الصحة العامة",
        "description": "Health coverage cards and medical approvals.",
        "description_ar": "بطاقات التغطية الصحية والموافقات الطبية.",
        "status": "online",
        "services": "health-card",
        "color": "#be123c",
        "contact": {
            "phone": "1214",
            "email": "info@moph.gov.lb",
            "website": "https://www.moph.gov.lb",
            "address": "Museum Square, Beirut",
            "address_ar": "ساحة المتحف، بيروت",
        },
    },
    {
        "id": "justice",
        "name": "Ministry of Justice",
        "name_ar": "وزارة العدل",
        "description": "Judicial records and legal certificates.",
        "description_ar": "السجلات العدلية والشهادات القانونية.",
        "status": "online",
        "services": "criminal-record",
        "color": "#374151",
        "contact": {
            "phone": "+961 1 422 954",
            "email": "info@justice.gov.lb",
            "website": "https://www.justice.gov.lb",
            "address": "Adlieh, Beirut",
            "address_ar": "العدلية، بيروت",
        },
    },
    {
        "id": "education",
        "name": "Ministry of Education and Higher Education",
        "name_ar": "وزارة التربية والتعليم العالي",
        "description": "Certificate equivalence and official exam records.",
        "description_ar": "معادلة الشهادات وسجلات الامتحانات الرسمية.",
        "status": "online",
        "services": "certificate-equivalence",
        "color": "#0e7490",
        "contact": {
            "phone": "+961 1 789 611",
            "email": "info@mehe.gov.lb",
            "website": "https://www.mehe.gov.lb",
            "address": "UNESCO, Beirut",
            "address_ar": "الأونيسكو، بيروت",
        },
    },
    {
        "id": "energy",
        "name": "Ministry of Energy and Water",
        "name_ar": "وزارة الطاقة والمياه",
        "description": "Electricity and water subscriptions.",
        "description_ar": "اشتراكات الكهرباء والمياه.",
        "status": "maintenance",
        "services": "electricity-subscription",
        "color": "#ca8a04",
        "contact": {
            "phone": "+961 1 565 100",
            "email": "info@energyandwater.gov.lb",
            "website": "https://www.energyandwater.gov.lb",
            "address": "Corniche El Nahr, Beirut",
            "address_ar": "كورنيش النهر، بيروت",
        },
    },
]

SERVICE_ROWS: list[dict[str, Any]] = [
    {
        "id": "birth-certificate",
        "name": "Birth Certificate",
        "name_ar": "وثيقة ولادة",
        "description": "Request an official extract of a birth registration.",
        "description_ar": "طلب إخراج قيد رسمي لتسجيل الولادة.",
        "category": "civil-registry",
        "status": "online",
        "fees": 5,
        "estimated_time": "3-5 days",
        "required_documents": "National ID copy|Hospital birth notice",
        "ministry": "Interior",
        "ministry_ar": "الداخلية",
    },
    {
        "id": "family-civil-extract",
        "name": "Family Civil Status Extract",
        "name_ar": "إخراج قيد عائلي",
        "description": "Obtain the civil status record of your family.",
        "description_ar": "الحصول على سجل الأحوال الشخصية لعائلتك.",
        "category": "civil-registry",
        "status": "online",
        "fees": 3,
        "estimated_time": "2-3 days",
        "required_documents": "National ID copy",
        "ministry": "Interior",
        "ministry_ar": "الداخلية",
    },
    {
        "id": "marriage-registration",
        "name": "Marriage Registration",
        "name_ar": "تسجيل زواج",
        "description": "Register a marriage contract with the civil registry.",
        "description_ar": "تسجيل عقد الزواج لدى دائرة النفوس.",
        "category": "civil-registry",
        "status": "limited",
        "fees": 15,
        "estimated_time": "7-10 days",
        "required_documents": "Marriage contract|National ID copies|Family civil extract",
        "ministry": "Interior",
        "ministry_ar": "الداخلية",
    },
    {
        "id": "passport-application",
        "name": "Passport Application",
        "name_ar": "طلب جواز سفر",
        "description": "Apply for a new biometric passport or renew an existing one.",
        "description_ar": "تقديم طلب جواز سفر بيومتري جديد أو تجديده.",
        "category": "interior",
        "status": "online",
        "fees": 60,
        "estimated_time": "10-15 days",
        "required_documents": "National ID copy|Personal photo|Previous passport",
        "ministry": "Interior",
        "ministry_ar": "الداخلية",
    },
    {
        "id": "income-tax-filing",
        "name": "Income Tax Filing",
        "name_ar": "التصريح عن ضريبة الدخل",
        "description": "File your yearly income tax declaration.",
        "description_ar": "تقديم التصريح السنوي عن ضريبة الدخل.",
        "category": "taxation",
        "status": "online",
        "fees": 0,
        "estimated_time": "1 day",
        "required_documents": "Income statement",
        "ministry": "Finance",
        "ministry_ar": "المالية",
    },
    {
        "id": "tax-clearance",
        "name": "Tax Clearance Certificate",
        "name_ar": "براءة ذمة مالية",
        "description": "Certificate confirming that no taxes are outstanding.",
        "description_ar": "شهادة تثبت عدم وجود ضرائب مستحقة.",
        "category": "taxation",
        "status": "offline",
        "fees": 20,
        "estimated_time": "5 days",
        "required_documents": "National ID copy|Tax number",
        "ministry": "Finance",
        "ministry_ar": "المالية",
    },
    {
        "id": "vehicle-registration",
        "name": "Vehicle Registration",
        "name_ar": "تسجيل مركبة",
        "description": "Register a new or imported vehicle.",
        "description_ar": "تسجيل مركبة جديدة أو مستوردة.",
        "category": "vehicle-registration",
        "status": "online",
        "fees": 50,
        "estimated_time": "5-7 days",
        "required_documents": "Customs clearance|Insurance policy|National ID copy",
        "ministry": "Public Works",
        "ministry_ar": "الأشغال العامة",
    },
    {
        "id": "driving-license-renewal",
        "name": "Driving License Renewal",
        "name_ar": "تجديد رخصة القيادة",
        "description": "Renew an expired or expiring driving license.",
        "description_ar": "تجديد رخصة قيادة منتهية أو على وشك الانتهاء.",
        "category": "vehicle-registration",
        "status": "maintenance",
        "fees": 35,
        "estimated_time": "3 days",
        "required_documents": "Current license|Medical report|Personal photo",
        "ministry": "Public Works",
        "ministry_ar": "الأشغال العامة",
    },
    {
        "id": "nssf-registration",
        "name": "Social Security Registration",
        "name_ar": "التسجيل في الضمان الاجتماعي",
        "description": "Register an employee with the National Social Security Fund.",
        "description_ar": "تسجيل موظف في الصندوق الوطني للضمان الاجتماعي.",
        "category": "social-security",
        "status": "online",
        "fees": 0,
        "estimated_time": "7 days",
        "required_documents": "Employment contract|National ID copy",
        "ministry": "Labor",
        "ministry_ar": "العمل",
    },
    {
        "id": "work-permit",
        "name": "Work Permit",
        "name_ar": "إجازة عمل",
        "description": "Apply for or renew a work permit.",
        "description_ar": "تقديم طلب إجازة عمل أو تجديدها.",
        "category": "labor",
        "status": "limited",
        "fees": 120,
        "estimated_time": "14 days",
        "required_documents": "Passport copy|Employer letter|Medical report",
        "ministry": "Labor",
        "ministry_ar": "العمل",
    },
    {
        "id": "health-card",
        "name": "Health Coverage Card",
        "name_ar": "بطاقة التغطية الصحية",
        "description": "Request a card for hospital coverage by the ministry.",
        "description_ar": "طلب بطاقة للاستشفاء على نفقة الوزارة.",
        "category": "health",
        "status": "online",
        "fees": 0,
        "estimated_time": "5 days",
        "required_documents": "National ID copy|Proof of no other coverage",
        "ministry": "Public Health",
        "ministry_ar": "الصحة العامة",
    },
    {
        "id": "criminal-record",
        "name": "Criminal Record Certificate",
        "name_ar": "سجل عدلي",
        "description": "Obtain an official criminal record certificate.",
        "description_ar": "الحصول على سجل عدلي رسمي.",
        "category": "justice",
        "status": "online",
        "fees": 8,
        "estimated_time": "2 days",
        "required_documents": "National ID copy",
        "ministry": "Justice",
        "ministry_ar": "العدل",
    },
    {
        "id": "certificate-equivalence",
        "name": "Certificate Equivalence",
        "name_ar": "معادلة شهادة",
        "description": "Request equivalence for a foreign academic certificate.",
        "description_ar": "طلب معادلة شهادة أكاديمية أجنبية.",
        "category": "education",
        "status": "online",
        "fees": 25,
        "estimated_time": "21 days",
        "required_documents": "Certified certificate copy|Transcript|Passport copy",
        "ministry": "Education",
        "ministry_ar": "التربية",
    },
    {
        "id": "electricity-subscription",
        "name": "Electricity Subscription",
        "name_ar": "اشتراك كهرباء",
        "description": "Open a new electricity meter subscription.",
        "description_ar": "فتح اشتراك جديد بعداد كهرباء.",
        "category": "utilities",
        "status": "maintenance",
        "fees": 30,
        "estimated_time": "10 days",
        "required_documents": "Property deed or lease|National ID copy",
        "ministry": "Energy",
        "ministry_ar": "الطاقة",
    },
]

DEMO_USER_ROW: dict[str, Any] = {
    "id": "user-demo-001",
    "national_id": "12345678901",
    "first_name": "Ahmad",
    "last_name": "Khalil",
    "first_name_ar": "أحمد",
    "last_name_ar": "خليل",
    "email": "ahmad.khalil@example.com",
    "phone": "+961 71 123 456",
    "date_of_birth": "1988-05-14",
    "gender": "male",
    "nationality": "Lebanese",
    "address": {
        "street": "Hamra Street",
        "street_ar": "شارع الحمرا",
        "building": "Al Nour Building, 4th floor",
        "city": "Beirut",
        "city_ar": "بيروت",
        "district": "Ras Beirut",
        "district_ar": "رأس بيروت",
        "postal_code": "1103",
    },
    "is_verified": True,
    "registration_date": "2023-03-15T10:00:00+00:00",
}


def _parse_list(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(item).strip() for item in value if str(item).strip())
    return tuple(item.strip() for item in str(value).split("|") if item.strip())


def validate_required_fields(row: dict[str, Any], required: set[str]) -> tuple[bool, list[str]]:
    missing = sorted(required - set(row))
    return len(missing) == 0, missing


def load_services(rows: list[dict[str, Any]]) -> list[Service]:
    services = []
    for row in rows:
        valid, missing = validate_required_fields(row, REQUIRED_SERVICE_FIELDS)
        if not valid:
            raise ValueError(f"Service {row.get('id', '?')} is missing fields: {missing}")
        services.append(
            Service(
                id=row["id"],
                name=row["name"],
                name_ar=row["name_ar"],
                description=row["description"],
                description_ar=row["description_ar"],
                category=row["category"],
                status=row["status"],
                fees=float(row["fees"]),
                ministry=row["ministry"],
                ministry_ar=row["ministry_ar"],
                icon=row.get("icon", ""),
                estimated_time=row.get("estimated_time", ""),
                required_documents=_parse_list(row.get("required_documents")),
                url=row.get("url") or f"/services/{row['id']}",
            )
        )
    return services


def load_ministries(rows: list[dict[str, Any]]) -> list[Ministry]:
    ministries = []
    for row in rows:
        valid, missing = validate_required_fields(row, REQUIRED_MINISTRY_FIELDS)
        if not valid:
            raise ValueError(f"Ministry {row.get('id', '?')} is missing fields: {missing}")
        ministries.append(
            Ministry(
                id=row["id"],
                name=row["name"],
                name_ar=row["name_ar"],
                description=row["description"],
                description_ar=row["description_ar"],
                status=row["status"],
                services=_parse_list(row["services"]),
                contact=MinistryContact(**(row.get("contact") or {})),
                logo=row.get("logo", ""),
                color=row.get("color", ""),
            )
        )
    return ministries


def demo_user() -> User:
    return User.from_dict(DEMO_USER_ROW)


def demo_applications(user_id: str, now: datetime | None = None) -> list[Application]:
    now = now or datetime.now(timezone.utc)
    return [
        Application(
            id="app-demo-001",
            service_id="passport-application",
            user_id=user_id,
            status="under-review",
            submission_date=now - timedelta(days=6),
            estimated_completion_date=now + timedelta(days=8),
            fees=60,
            is_paid=True,
            current_step=2,
            total_steps=3,
            tracking_number="LB-INTERIOR-482913",
            documents=(
                Document(
                    id="doc-demo-001",
                    name="national-id.pdf",
                    name_ar="الهوية.pdf",
                    type="national-id",
                    size=245760,
                    upload_date=now - timedelta(days=6),
                    is_required=True,
                    is_verified=True,
                ),
            ),
        ),
        Application(
            id="app-demo-002",
            service_id="criminal-record",
            user_id=user_id,
            status="completed",
            submission_date=now - timedelta(days=30),
            completion_date=now - timedelta(days=27),
            estimated_completion_date=now - timedelta(days=28),
            fees=8,
            is_paid=True,
            current_step=3,
            total_steps=3,
            tracking_number="LB-JUSTICE-117204",
        ),
        Application(
            id="app-demo-003",
            service_id="vehicle-registration",
            user_id=user_id,
            status="additional-documents-required",
            submission_date=now - timedelta(days=4),
            estimated_completion_date=now + timedelta(days=3),
            fees=50,
            is_paid=False,
            current_step=1,
            total_steps=3,
            tracking_number="LB-PUBLICWORKS-650381",
            notes="Insurance policy copy is missing.",
        ),
        Application(
            id="app-demo-004",
            service_id="family-civil-extract",
            user_id=user_id,
            status="submitted",
            submission_date=now - timedelta(days=1),
            estimated_completion_date=now + timedelta(days=6),
            fees=3,
            is_paid=False,
            current_step=1,
            total_steps=3,
            tracking_number="LB-INTERIOR-903275",
        ),
    ]


def demo_notifications(user_id: str, now: datetime | None = None) -> list[Notification]:
    now = now or datetime.now(timezone.utc)
    return [
        Notification(
            id="notif-demo-001",
            user_id=user_id,
            title="Application Under Review",
            title_ar="الطلب قيد المراجعة",
            message="Your passport application LB-INTERIOR-482913 is being reviewed.",
            message_ar="طلب جواز السفر LB-INTERIOR-482913 قيد المراجعة.",
            type="info",
            created_at=now - timedelta(days=2),
            application_id="app-demo-001",
            action_url="/dashboard/applications",
        ),
        Notification(
            id="notif-demo-002",
            user_id=user_id,
            title="Documents Required",
            title_ar="مستندات مطلوبة",
            message="Please upload your insurance policy for LB-PUBLICWORKS-650381.",
            message_ar="يرجى تحميل بوليصة التأمين للطلب LB-PUBLICWORKS-650381.",
            type="warning",
            created_at=now - timedelta(days=3),
            application_id="app-demo-003",
            action_url="/dashboard/applications",
        ),
        Notification(
            id="notif-demo-003",
            user_id=user_id,
            title="Certificate Ready",
            title_ar="الشهادة جاهزة",
            message="Your criminal record certificate is ready for pickup.",
            message_ar="السجل العدلي جاهز للاستلام.",
            type="success",
            created_at=now - timedelta(days=27),
            is_read=True,
            application_id="app-demo-002",
        ),
        Notification(
            id="notif-demo-004",
            user_id=user_id,
            title="Payment Reminder",
            title_ar="تذكير بالدفع",
            message="Fees for LB-INTERIOR-903275 are still unpaid.",
            message_ar="رسوم الطلب LB-INTERIOR-903275 لم تسدد بعد.",
            type="reminder",
            created_at=now - timedelta(hours=12),
            application_id="app-demo-004",
        ),
        Notification(
            id="notif-demo-005",
            user_id=user_id,
            title="Scheduled Maintenance",
            title_ar="صيانة مجدولة",
            message="Driving license services are under maintenance this week.",
            message_ar="خدمات رخص القيادة قيد الصيانة هذا الأسبوع.",
            type="error",
            created_at=now - timedelta(days=5),
        ),
    ]


def initialize_store(store: AppStore) -> None:
    if not store.services:
        store.set_services(load_services(SERVICE_ROWS))
    if not store.ministries:
        store.set_ministries(load_ministries(MINISTRY_ROWS))


def load_dashboard(store: AppStore, now: datetime | None = None) -> None:
    """Merge the demo applications and notifications into a logged-in session.

    Records already present (by id) are left untouched, so calling this on
    every dashboard visit neither duplicates rows nor drops new submissions.
    """
    if store.user is None:
        return
    user_id = store.user.id
    known_apps = {item.id for item in store.applications}
    fresh_apps = [item for item in demo_applications(user_id, now) if item.id not in known_apps]
    if fresh_apps:
        store.set_applications(store.applications + fresh_apps)

    known_notifications = {item.id for item in store.notifications}
    for notification in demo_notifications(user_id, now):
        if notification.id not in known_notifications:
            store.add_notification(notification)
    logger.debug("Dashboard loaded for %s: %d new applications", user_id, len(fresh_apps))


def seed_demo_account(db: Session, email: str | None = None, password: str | None = None) -> None:
    settings = get_settings()
    email = email or settings.demo_email
    password = password or settings.demo_password
    if get_account_by_email(db, email):
        return
    create_account(db, replace(demo_user(), email=email.strip().lower()), password)
    logger.info("Created demo account %s", email)
