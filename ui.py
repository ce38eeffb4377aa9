from __future__ import annotations

from html import escape
from typing import Any

import streamlit as st

from domain import Application, Notification, Service
from logic import (
    format_currency,
    format_date,
    format_date_time,
    get_localized_text,
    get_status_color,
    get_status_text,
    truncate_text,
)


I18N = {
    "en": {
        "app_title": "Digital Lebanon",
        "subtitle": "Government services for every citizen, online.",
        "home": "Home",
        "services": "Services",
        "ministries": "Ministries",
        "dashboard": "Dashboard",
        "applications": "My Applications",
        "notifications": "Notifications",
        "profile": "Profile",
        "login": "Login",
        "logout": "Logout",
        "register": "Register",
        "language_toggle": "العربية",
        "search_services": "Search services",
        "category": "Category",
        "all_categories": "All categories",
        "no_results": "No results match your search.",
        "fees": "Fees",
        "free": "Free",
        "estimated_time": "Estimated time",
        "required_documents": "Required documents",
        "ministry": "Ministry",
        "apply_now": "Apply Now",
        "view_details": "View details",
        "service_unavailable": "This service is temporarily unavailable.",
        "back_to_services": "Back to services",
        "contact": "Contact",
        "next": "Next",
        "back": "Back",
        "submit": "Submit Application",
        "submitting": "Submitting your application...",
        "step": "Step",
        "full_name": "Full name",
        "national_id": "National ID",
        "phone": "Phone",
        "email": "Email",
        "address": "Address",
        "upload_documents": "Upload documents",
        "attached_documents": "Attached documents",
        "remove": "Remove",
        "additional_info": "Additional information",
        "payment_method": "Payment method",
        "credit-card": "Credit card",
        "bank-transfer": "Bank transfer",
        "cash": "Cash at the ministry",
        "accept_terms": "I confirm the information provided is accurate.",
        "review": "Review",
        "login_required": "Please log in to continue.",
        "password": "Password",
        "confirm_password": "Confirm password",
        "first_name": "First name",
        "last_name": "Last name",
        "first_name_ar": "First name (Arabic)",
        "last_name_ar": "Last name (Arabic)",
        "date_of_birth": "Date of birth",
        "gender": "Gender",
        "male": "Male",
        "female": "Female",
        "street": "Street",
        "city": "City",
        "district": "District",
        "login_title": "Sign in to your account",
        "login_hint": "Demo: any valid email and a password of at least 6 characters.",
        "logging_in": "Signing in...",
        "invalid_credentials": "Invalid email or password.",
        "register_title": "Create an account",
        "registered": "Account created. You can now sign in.",
        "no_account": "Don't have an account?",
        "welcome": "Welcome back",
        "total_applications": "Total applications",
        "pending_applications": "Pending",
        "completed_applications": "Completed",
        "total_payments": "Total payments",
        "unread_notifications": "Unread notifications",
        "services_used": "Services used",
        "recent_applications": "Recent applications",
        "recent_notifications": "Recent notifications",
        "view_all": "View all",
        "status": "Status",
        "all_statuses": "All statuses",
        "tracking_number": "Tracking number",
        "submitted_on": "Submitted",
        "estimated_completion": "Estimated completion",
        "progress": "Progress",
        "download_receipt": "Download receipt (PDF)",
        "download_json": "Download JSON summary",
        "no_applications": "You have not submitted any applications yet.",
        "type": "Type",
        "all_types": "All types",
        "read_state": "Read state",
        "all": "All",
        "unread": "Unread",
        "read": "Read",
        "mark_as_read": "Mark as read",
        "mark_all_read": "Mark all as read",
        "no_notifications": "No notifications.",
        "edit_profile": "Edit profile",
        "save": "Save",
        "cancel": "Cancel",
        "profile_saved": "Profile updated.",
        "verified": "Verified",
        "not_verified": "Not verified",
        "member_since": "Member since",
        "submission_success": "Your application was submitted successfully.",
        "go_to_applications": "Go to my applications",
        "not_found": "The requested item was not found.",
    },
    "ar": {
        "app_title": "لبنان الرقمي",
        "subtitle": "الخدمات الحكومية لكل مواطن، عبر الإنترنت.",
        "home": "الرئيسية",
        "services": "الخدمات",
        "ministries": "الوزارات",
        "dashboard": "لوحة التحكم",
        "applications": "طلباتي",
        "notifications": "الإشعارات",
        "profile": "الملف الشخصي",
        "login": "تسجيل الدخول",
        "logout": "تسجيل الخروج",
        "register": "إنشاء حساب",
        "language_toggle": "English",
        "search_services": "ابحث عن خدمة",
        "category": "الفئة",
        "all_categories": "كل الفئات",
        "no_results": "لا توجد نتائج مطابقة لبحثك.",
        "fees": "الرسوم",
        "free": "مجاني",
        "estimated_time": "المدة المتوقعة",
        "required_documents": "المستندات المطلوبة",
        "ministry": "الوزارة",
        "apply_now": "قدّم الآن",
        "view_details": "عرض التفاصيل",
        "service_unavailable": "هذه الخدمة غير متاحة مؤقتاً.",
        "back_to_services": "العودة إلى الخدمات",
        "contact": "التواصل",
        "next": "التالي",
        "back": "السابق",
        "submit": "تقديم الطلب",
        "submitting": "جارٍ تقديم طلبك...",
        "step": "الخطوة",
        "full_name": "الاسم الكامل",
        "national_id": "رقم الهوية",
        "phone": "الهاتف",
        "email": "البريد الإلكتروني",
        "address": "العنوان",
        "upload_documents": "تحميل المستندات",
        "attached_documents": "المستندات المرفقة",
        "remove": "إزالة",
        "additional_info": "معلومات إضافية",
        "payment_method": "طريقة الدفع",
        "credit-card": "بطاقة ائتمان",
        "bank-transfer": "تحويل مصرفي",
        "cash": "نقداً في الوزارة",
        "accept_terms": "أؤكد أن المعلومات المقدمة صحيحة.",
        "review": "المراجعة",
        "login_required": "يرجى تسجيل الدخول للمتابعة.",
        "password": "كلمة المرور",
        "confirm_password": "تأكيد كلمة المرور",
        "first_name": "الاسم الأول",
        "last_name": "اسم العائلة",
        "first_name_ar": "الاسم الأول (بالعربية)",
        "last_name_ar": "اسم العائلة (بالعربية)",
        "date_of_birth": "تاريخ الميلاد",
        "gender": "الجنس",
        "male": "ذكر",
        "female": "أنثى",
        "street": "الشارع",
        "city": "المدينة",
        "district": "القضاء",
        "login_title": "سجّل الدخول إلى حسابك",
        "login_hint": "تجريبي: أي بريد إلكتروني صالح وكلمة مرور من 6 أحرف على الأقل.",
        "logging_in": "جارٍ تسجيل الدخول...",
        "invalid_credentials": "البريد الإلكتروني أو كلمة المرور غير صحيحة.",
        "register_title": "إنشاء حساب جديد",
        "registered": "تم إنشاء الحساب. يمكنك الآن تسجيل الدخول.",
        "no_account": "ليس لديك حساب؟",
        "welcome": "مرحباً بعودتك",
        "total_applications": "مجموع الطلبات",
        "pending_applications": "قيد الانتظار",
        "completed_applications": "المكتملة",
        "total_payments": "مجموع المدفوعات",
        "unread_notifications": "إشعارات غير مقروءة",
        "services_used": "الخدمات المستخدمة",
        "recent_applications": "أحدث الطلبات",
        "recent_notifications": "أحدث الإشعارات",
        "view_all": "عرض الكل",
        "status": "الحالة",
        "all_statuses": "كل الحالات",
        "tracking_number": "رقم التتبع",
        "submitted_on": "تاريخ التقديم",
        "estimated_completion": "الإنجاز المتوقع",
        "progress": "التقدم",
        "download_receipt": "تحميل الإيصال (PDF)",
        "download_json": "تحميل ملخص JSON",
        "no_applications": "لم تقدّم أي طلب بعد.",
        "type": "النوع",
        "all_types": "كل الأنواع",
        "read_state": "حالة القراءة",
        "all": "الكل",
        "unread": "غير مقروء",
        "read": "مقروء",
        "mark_as_read": "تحديد كمقروء",
        "mark_all_read": "تحديد الكل كمقروء",
        "no_notifications": "لا توجد إشعارات.",
        "edit_profile": "تعديل الملف",
        "save": "حفظ",
        "cancel": "إلغاء",
        "profile_saved": "تم تحديث الملف الشخصي.",
        "verified": "موثّق",
        "not_verified": "غير موثّق",
        "member_since": "عضو منذ",
        "submission_success": "تم تقديم طلبك بنجاح.",
        "go_to_applications": "الانتقال إلى طلباتي",
        "not_found": "العنصر المطلوب غير موجود.",
    },
}

CATEGORY_LABELS = {
    "civil-registry": ("Civil Registry", "الأحوال الشخصية"),
    "vehicle-registration": ("Vehicles & Transport", "المركبات والنقل"),
    "taxation": ("Taxation", "الضرائب"),
    "utilities": ("Utilities", "المرافق العامة"),
    "social-security": ("Social Security", "الضمان الاجتماعي"),
    "health": ("Health", "الصحة"),
    "education": ("Education", "التعليم"),
    "justice": ("Justice", "العدل"),
    "interior": ("Interior", "الداخلية"),
    "labor": ("Labor", "العمل"),
}

TONE_COLORS = {
    "success": ("#dcfce7", "#166534"),
    "error": ("#fee2e2", "#991b1b"),
    "warning": ("#fef3c7", "#92400e"),
    "primary": ("#dbeafe", "#1e40af"),
    "neutral": ("#f1f5f9", "#334155"),
}


@st.cache_data
def get_i18n(language: str) -> dict[str, str]:
    return I18N.get(language, I18N["en"])


def t(language: str, key: str) -> str:
    return get_i18n(language).get(key, key)


def category_label(category: str, language: str) -> str:
    en, ar = CATEGORY_LABELS.get(category, (category, category))
    return get_localized_text(en, ar, language)


def inject_css(direction: str = "ltr") -> None:
    align = "right" if direction == "rtl" else "left"
    st.markdown(
        f"""
        <style>
            :root {{
                --lb-red: #c8102e;
                --lb-green: #00a651;
                --text-main: #1f2937;
                --text-muted: #6b7280;
                --surface: #ffffff;
                --border: #e5e7eb;
            }}
            [data-testid="stAppViewContainer"] .main,
            [data-testid="stSidebar"] {{
                direction: {direction};
                text-align: {align};
            }}
            .dl-hero {{
                border-radius: 16px;
                padding: 1.4rem 1.2rem;
                margin-bottom: 1rem;
                color: #ffffff;
                background: linear-gradient(135deg, var(--lb-red) 0%, #8b0a1f 60%, var(--lb-green) 100%);
            }}
            .dl-hero h1 {{
                margin: 0;
                font-size: 1.8rem;
                color: #ffffff;
            }}
            .dl-card {{
                border: 1px solid var(--border);
                border-radius: 14px;
                padding: 1rem;
                margin-bottom: 0.8rem;
                background: var(--surface);
                box-shadow: 0 4px 14px rgba(15, 23, 42, 0.05);
            }}
            .dl-card.unread {{
                border-{'right' if direction == 'rtl' else 'left'}: 4px solid var(--lb-red);
            }}
            .dl-card-title {{
                font-weight: 700;
                color: var(--text-main);
                font-size: 1.02rem;
            }}
            .dl-card-meta {{
                color: var(--text-muted);
                font-size: 0.85rem;
                margin-top: 0.25rem;
            }}
            .dl-badge {{
                display: inline-block;
                padding: 0.12rem 0.6rem;
                border-radius: 999px;
                font-size: 0.76rem;
                font-weight: 600;
            }}
            .dl-stepper {{
                display: flex;
                gap: 0.32rem;
                flex-wrap: wrap;
                margin-bottom: 0.5rem;
            }}
            .dl-step {{
                padding: 0.18rem 0.58rem;
                border-radius: 999px;
                border: 1px solid var(--border);
                color: var(--text-muted);
                font-size: 0.76rem;
                background: var(--surface);
            }}
            .dl-step.active {{
                border-color: var(--lb-red);
                background: var(--lb-red);
                color: #ffffff;
            }}
            .dl-step.done {{
                border-color: #86efac;
                background: #f0fdf4;
                color: #166534;
            }}
            .dl-meter {{
                margin: 0.4rem 0 0.8rem 0;
            }}
            .dl-meter-head {{
                display: flex;
                justify-content: space-between;
                font-size: 0.8rem;
                color: var(--text-muted);
            }}
            .dl-meter-track {{
                height: 8px;
                border-radius: 999px;
                background: #f1f5f9;
                overflow: hidden;
            }}
            .dl-meter-fill {{
                height: 100%;
                border-radius: 999px;
                background: linear-gradient(90deg, var(--lb-red), var(--lb-green));
            }}
            .dl-stat {{
                border: 1px solid var(--border);
                border-radius: 12px;
                padding: 0.8rem;
                background: var(--surface);
            }}
            .dl-stat-value {{
                font-size: 1.5rem;
                font-weight: 800;
                color: var(--text-main);
            }}
            .dl-stat-label {{
                font-size: 0.8rem;
                color: var(--text-muted);
            }}
            @media (max-width: 768px) {{
                .dl-hero h1 {{font-size: 1.35rem;}}
                .dl-stat-value {{font-size: 1.2rem;}}
            }}
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_hero(language: str) -> None:
    st.markdown(
        f"""
        <div class="dl-hero">
            <h1>{escape(t(language, "app_title"))}</h1>
            <div>{escape(t(language, "subtitle"))}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def status_badge_html(status: str, language: str) -> str:
    background, color = TONE_COLORS[get_status_color(status)]
    label = escape(get_status_text(status, language))
    return f"<span class='dl-badge' style='background:{background};color:{color};'>{label}</span>"


def render_progress(step: int, total: int, labels: list[str], language: str) -> None:
    chips = []
    for i in range(1, total + 1):
        klass = "dl-step"
        if i < step:
            klass += " done"
        elif i == step:
            klass += " active"
        label = labels[i - 1] if i <= len(labels) else f"{t(language, 'step')} {i}"
        chips.append(f"<span class='{klass}'>{i}. {escape(label)}</span>")
    st.markdown(f"<div class='dl-stepper'>{''.join(chips)}</div>", unsafe_allow_html=True)
    render_meter(t(language, "progress"), step / max(1, total), f"{t(language, 'step')} {step}/{total}")


def render_meter(label: str, pct: float, value_text: str | None = None) -> None:
    pct = max(0.0, min(1.0, pct))
    pct_text = value_text or f"{int(round(pct * 100))}%"
    st.markdown(
        f"""
        <div class="dl-meter">
            <div class="dl-meter-head">
                <span>{escape(label)}</span>
                <span>{escape(pct_text)}</span>
            </div>
            <div class="dl-meter-track">
                <div class="dl-meter-fill" style="width: {pct * 100:.1f}%;"></div>
            </div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def render_stat(label: str, value: Any) -> None:
    st.markdown(
        f"""
        <div class="dl-stat">
            <div class="dl-stat-value">{escape(str(value))}</div>
            <div class="dl-stat-label">{escape(label)}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def fees_text(fees: float, language: str) -> str:
    if not fees:
        return t(language, "free")
    return format_currency(fees, locale=language)


def render_service_card(service: Service, language: str) -> None:
    name = get_localized_text(service.name, service.name_ar, language)
    description = get_localized_text(service.description, service.description_ar, language)
    ministry = get_localized_text(service.ministry, service.ministry_ar, language)
    st.markdown(
        f"""
        <div class="dl-card">
            <div class="dl-card-title">{escape(name)} {status_badge_html(service.status, language)}</div>
            <div>{escape(truncate_text(description, 110))}</div>
            <div class="dl-card-meta">
                {escape(t(language, "ministry"))}: {escape(ministry)} |
                {escape(t(language, "fees"))}: {escape(fees_text(service.fees, language))} |
                {escape(category_label(service.category, language))}
            </div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def render_application_card(application: Application, service_name: str, language: str) -> None:
    st.markdown(
        f"""
        <div class="dl-card">
            <div class="dl-card-title">{escape(service_name)} {status_badge_html(application.status, language)}</div>
            <div class="dl-card-meta">
                {escape(t(language, "tracking_number"))}: {escape(application.tracking_number)} |
                {escape(t(language, "submitted_on"))}: {escape(format_date(application.submission_date, language))} |
                {escape(t(language, "estimated_completion"))}: {escape(format_date(application.estimated_completion_date, language))}
            </div>
        </div>
        """,
        unsafe_allow_html=True,
    )
    render_meter(
        t(language, "progress"),
        application.current_step / max(1, application.total_steps),
        f"{application.current_step}/{application.total_steps}",
    )


def render_notification_card(notification: Notification, language: str) -> None:
    title = get_localized_text(notification.title, notification.title_ar, language)
    body = get_localized_text(notification.message, notification.message_ar, language)
    klass = "dl-card" if notification.is_read else "dl-card unread"
    st.markdown(
        f"""
        <div class="{klass}">
            <div class="dl-card-title">{escape(title)}</div>
            <div>{escape(body)}</div>
            <div class="dl-card-meta">{escape(format_date_time(notification.created_at, language))}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )
