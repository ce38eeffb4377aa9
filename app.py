from __future__ import annotations

import time
import uuid
from dataclasses import replace
from datetime import date
from typing import Any

import pandas as pd
import streamlit as st

from auth import authenticate_user, register_account, update_account_profile
from config import get_settings
from db import db_session, get_session_factory, init_schema
from domain import NOTIFICATION_TYPES, SERVICE_CATEGORIES, LoggedIn, User
from export import application_summary, build_application_receipt, build_json_summary
from logging_config import setup_logging
from logic import (
    filter_applications,
    filter_notifications,
    filter_services,
    format_currency,
    format_date,
    get_localized_text,
    message,
    get_status_text,
    resolve_service_name,
    sort_by_date,
    validate_login_form,
    validate_profile_form,
    validate_registration_form,
)
from persistence import SqlStateStorage, log_action
from seed import demo_user, initialize_store, load_dashboard, seed_demo_account
from store import AppStore
from ui import (
    category_label,
    fees_text,
    inject_css,
    render_application_card,
    render_hero,
    render_notification_card,
    render_progress,
    render_service_card,
    render_stat,
    status_badge_html,
    t,
)
from wizard import (
    DOCUMENTS,
    PAYMENT,
    PERSONAL_INFO,
    STEPS,
    WIZARD_PAYMENT_METHODS,
    ApplicationWizard,
    ServiceUnavailableError,
    WizardError,
)

settings = get_settings()
setup_logging(settings.log_level)
st.set_page_config(page_title="Digital Lebanon", layout="wide")

PAGES = {
    "home",
    "services",
    "service",
    "apply",
    "ministries",
    "ministry",
    "login",
    "register",
    "dashboard",
    "applications",
    "notifications",
    "profile",
}
PROTECTED_PAGES = {"apply", "dashboard", "applications", "notifications", "profile"}
URL_ROUTES = {
    "/dashboard": "dashboard",
    "/dashboard/applications": "applications",
    "/dashboard/notifications": "notifications",
    "/dashboard/profile": "profile",
}


def bootstrap() -> None:
    init_schema()
    with db_session() as db:
        seed_demo_account(db, settings.demo_email, settings.demo_password)


def _query_get(key: str, default: str | None = None) -> str | None:
    value = st.query_params.get(key, default)
    if isinstance(value, list):
        return value[0] if value else default
    return value


def _query_set(**kwargs: str | None) -> None:
    for key, value in kwargs.items():
        current = _query_get(key)
        if value is None:
            if current is not None:
                if key in st.query_params:
                    del st.query_params[key]
        else:
            if current != value:
                st.query_params[key] = value


def _navigate(page: str, **params: str | None) -> None:
    _query_set(
        page=page,
        service_id=params.get("service_id"),
        ministry_id=params.get("ministry_id"),
        next=params.get("next"),
    )
    st.rerun()


def get_client_token() -> str:
    if "client_token" not in st.session_state:
        st.session_state["client_token"] = _query_get("client") or uuid.uuid4().hex
    _query_set(client=st.session_state["client_token"])
    return st.session_state["client_token"]


def get_store() -> AppStore:
    if "store" not in st.session_state:
        storage = SqlStateStorage(get_session_factory())
        store = AppStore(storage=storage, storage_key=f"{settings.store_key}:{get_client_token()}")
        initialize_store(store)
        st.session_state["store"] = store
    return st.session_state["store"]


def record_action(user_id: str | None, action: str, details: dict[str, Any]) -> None:
    with db_session() as db:
        log_action(db, user_id, action, details)


def _show_errors(errors: dict[str, str]) -> None:
    for text in errors.values():
        st.error(text)


def _flash(text: str) -> None:
    st.session_state["flash"] = text


def _render_flash() -> None:
    text = st.session_state.pop("flash", None)
    if text:
        st.success(text)


def _require_user(store: AppStore, page: str) -> User | None:
    session = store.session
    if isinstance(session, LoggedIn):
        return session.user
    _navigate("login", next=page, service_id=_query_get("service_id"))
    return None


def _ensure_dashboard_data(store: AppStore) -> None:
    user = store.user
    if user is None:
        return
    flag = f"dashboard_loaded_{user.id}"
    if not st.session_state.get(flag):
        load_dashboard(store)
        st.session_state[flag] = True


def _clear_session_flags() -> None:
    for key in list(st.session_state.keys()):
        if key.startswith(("dashboard_loaded_", "wizard_")):
            del st.session_state[key]


def render_sidebar(store: AppStore, active_page: str) -> None:
    language = store.language.code
    with st.sidebar:
        st.markdown(f"### {t(language, 'app_title')}")
        if st.button(t(language, "language_toggle"), key="toggle_language", use_container_width=True):
            store.toggle_language()
            st.rerun()

        unread = store.unread_count
        links = [("home", "home"), ("services", "services"), ("ministries", "ministries")]
        if store.is_authenticated:
            links += [
                ("dashboard", "dashboard"),
                ("applications", "applications"),
                ("notifications", "notifications"),
                ("profile", "profile"),
            ]
        for page, label_key in links:
            label = t(language, label_key)
            if page == "notifications" and unread:
                label = f"{label} ({unread})"
            if st.button(
                label,
                key=f"nav_{page}",
                use_container_width=True,
                type="primary" if page == active_page else "secondary",
            ):
                _navigate(page)

        st.divider()
        session = store.session
        if isinstance(session, LoggedIn):
            st.caption(get_localized_text(session.user.full_name, session.user.full_name_ar, language))
            if st.button(t(language, "logout"), key="logout", use_container_width=True):
                user_id = session.user.id
                store.logout()
                _clear_session_flags()
                record_action(user_id, "logout", {})
                _navigate("home")
        else:
            c1, c2 = st.columns(2)
            with c1:
                if st.button(t(language, "login"), key="nav_login", use_container_width=True):
                    _navigate("login")
            with c2:
                if st.button(t(language, "register"), key="nav_register", use_container_width=True):
                    _navigate("register")


def render_home(store: AppStore) -> None:
    language = store.language.code
    render_hero(language)
    cols = st.columns(3)
    with cols[0]:
        render_stat(t(language, "services"), len(store.services))
    with cols[1]:
        render_stat(t(language, "ministries"), len(store.ministries))
    with cols[2]:
        available = sum(1 for service in store.services if service.is_available)
        render_stat(get_status_text("online", language), available)

    st.subheader(t(language, "services"))
    featured = [service for service in store.services if service.is_available][:6]
    grid = st.columns(2)
    for idx, service in enumerate(featured):
        with grid[idx % 2]:
            render_service_card(service, language)
            if st.button(t(language, "view_details"), key=f"home_service_{service.id}"):
                _navigate("service", service_id=service.id)
    if st.button(t(language, "view_all"), key="home_all_services"):
        _navigate("services")


def render_services(store: AppStore) -> None:
    language = store.language.code
    st.header(t(language, "services"))
    c1, c2 = st.columns([3, 1])
    with c1:
        term = st.text_input(t(language, "search_services"), key="service_search")
    with c2:
        options = ["all", *SERVICE_CATEGORIES]
        category = st.selectbox(
            t(language, "category"),
            options,
            format_func=lambda value: t(language, "all_categories") if value == "all" else category_label(value, language),
            key="service_category",
        )
    results = filter_services(store.services, term, category)
    if not results:
        st.info(t(language, "no_results"))
        return
    for service in results:
        render_service_card(service, language)
        if st.button(t(language, "view_details"), key=f"service_open_{service.id}"):
            _navigate("service", service_id=service.id)


def render_service(store: AppStore) -> None:
    language = store.language.code
    service = store.get_service(_query_get("service_id") or "")
    if service is None:
        _navigate("services")
        return

    if st.button(t(language, "back_to_services"), key="service_back"):
        _navigate("services")
    st.header(get_localized_text(service.name, service.name_ar, language))
    st.markdown(status_badge_html(service.status, language), unsafe_allow_html=True)
    st.write(get_localized_text(service.description, service.description_ar, language))
    if not service.is_available:
        st.warning(t(language, "service_unavailable"))

    c1, c2, c3 = st.columns(3)
    c1.metric(t(language, "fees"), fees_text(service.fees, language))
    c2.metric(t(language, "estimated_time"), service.estimated_time or "-")
    c3.metric(t(language, "ministry"), get_localized_text(service.ministry, service.ministry_ar, language))

    if service.required_documents:
        st.subheader(t(language, "required_documents"))
        for item in service.required_documents:
            st.write(f"- {item}")

    if st.button(
        t(language, "apply_now"),
        key="service_apply",
        type="primary",
        disabled=not service.is_available,
    ):
        _navigate("apply", service_id=service.id)


def _get_wizard(store: AppStore, service_id: str) -> ApplicationWizard | None:
    key = f"wizard_{service_id}"
    wizard = st.session_state.get(key)
    if wizard is None:
        service = store.get_service(service_id)
        if service is None:
            return None
        wizard = ApplicationWizard(service, store.user)
        st.session_state[key] = wizard
    return wizard


def _render_personal_step(wizard: ApplicationWizard, language: str) -> None:
    info = wizard.draft.personal_info
    with st.form("wizard_personal"):
        full_name = st.text_input(t(language, "full_name"), value=info.full_name)
        national_id = st.text_input(t(language, "national_id"), value=info.national_id)
        phone = st.text_input(t(language, "phone"), value=info.phone)
        email = st.text_input(t(language, "email"), value=info.email)
        address = st.text_area(t(language, "address"), value=info.address)
        saved = st.form_submit_button(t(language, "save"))
    if saved:
        wizard.update_personal_info(
            full_name=full_name,
            national_id=national_id,
            phone=phone,
            email=email,
            address=address,
        )


def _render_documents_step(wizard: ApplicationWizard, language: str) -> None:
    if wizard.service.required_documents:
        st.caption(f"{t(language, 'required_documents')}: {', '.join(wizard.service.required_documents)}")
    uploads = st.file_uploader(
        t(language, "upload_documents"),
        accept_multiple_files=True,
        key=f"uploads_{wizard.service.id}",
    )
    if uploads and st.button(t(language, "save"), key="attach_documents"):
        known = {item.name for item in wizard.draft.documents}
        for upload in uploads:
            if upload.name not in known:
                wizard.attach_document(upload.name, upload.size, upload.type)
        st.rerun()

    if wizard.draft.documents:
        st.markdown(f"**{t(language, 'attached_documents')}**")
        for idx, item in enumerate(wizard.draft.documents):
            c1, c2 = st.columns([4, 1])
            c1.write(item.name)
            if c2.button(t(language, "remove"), key=f"remove_doc_{idx}"):
                wizard.remove_document(idx)
                st.rerun()

    additional = st.text_area(
        t(language, "additional_info"),
        value=wizard.draft.additional_info,
        key=f"additional_{wizard.service.id}",
    )
    wizard.set_additional_info(additional)


def _render_payment_step(wizard: ApplicationWizard, language: str) -> None:
    st.metric(t(language, "fees"), fees_text(wizard.service.fees, language))
    method = st.radio(
        t(language, "payment_method"),
        WIZARD_PAYMENT_METHODS,
        index=WIZARD_PAYMENT_METHODS.index(wizard.draft.payment_method),
        format_func=lambda value: t(language, value),
        key=f"payment_{wizard.service.id}",
    )
    wizard.set_payment_method(method)


def _render_review_step(wizard: ApplicationWizard, language: str) -> None:
    info = wizard.draft.personal_info
    service = wizard.service
    st.markdown(f"**{get_localized_text(service.name, service.name_ar, language)}**")
    st.write(f"{t(language, 'full_name')}: {info.full_name or '-'}")
    st.write(f"{t(language, 'national_id')}: {info.national_id or '-'}")
    st.write(f"{t(language, 'phone')}: {info.phone or '-'}")
    st.write(f"{t(language, 'email')}: {info.email or '-'}")
    st.write(f"{t(language, 'attached_documents')}: {len(wizard.draft.documents)}")
    st.write(f"{t(language, 'payment_method')}: {t(language, wizard.draft.payment_method)}")
    st.write(f"{t(language, 'fees')}: {fees_text(service.fees, language)}")
    accepted = st.checkbox(
        t(language, "accept_terms"),
        value=wizard.draft.accepted_terms,
        key=f"terms_{service.id}",
    )
    wizard.accept_terms(accepted)


def render_apply(store: AppStore) -> None:
    language = store.language.code
    service_id = _query_get("service_id") or ""
    if store.get_service(service_id) is None:
        _navigate("services")
        return
    user = _require_user(store, "apply")
    if user is None:
        return
    try:
        wizard = _get_wizard(store, service_id)
    except ServiceUnavailableError:
        st.session_state.pop(f"wizard_{service_id}", None)
        _navigate("services")
        return

    st.header(get_localized_text(wizard.service.name, wizard.service.name_ar, language))
    labels = [get_localized_text(step.name, step.name_ar, language) for step in STEPS]
    render_progress(wizard.step, wizard.total_steps, labels, language)
    st.subheader(wizard.step_title(language))

    if wizard.step == PERSONAL_INFO:
        _render_personal_step(wizard, language)
    elif wizard.step == DOCUMENTS:
        _render_documents_step(wizard, language)
    elif wizard.step == PAYMENT:
        _render_payment_step(wizard, language)
    else:
        _render_review_step(wizard, language)

    c1, _, c3 = st.columns([1, 3, 1])
    with c1:
        if st.button(t(language, "back"), key="wizard_back", disabled=not wizard.can_go_previous()):
            wizard.previous()
            st.rerun()
    with c3:
        if wizard.can_go_next():
            if st.button(t(language, "next"), key="wizard_next", type="primary"):
                wizard.next()
                st.rerun()
        elif st.button(t(language, "submit"), key="wizard_submit", type="primary", disabled=wizard.is_submitted):
            store.set_loading(True)
            try:
                with st.spinner(t(language, "submitting")):
                    result = wizard.submit(
                        store,
                        delay_seconds=settings.submit_delay_seconds,
                        completion_days=settings.estimated_completion_days,
                    )
            except WizardError as exc:
                st.error(str(exc))
                return
            finally:
                store.set_loading(False)
            record_action(
                user.id,
                "application_submitted",
                {"tracking_number": result.application.tracking_number, "service_id": service_id},
            )
            st.session_state.pop(f"wizard_{service_id}", None)
            _flash(f"{t(language, 'submission_success')} {result.application.tracking_number}")
            _navigate("applications")


def render_ministries(store: AppStore) -> None:
    language = store.language.code
    st.header(t(language, "ministries"))
    grid = st.columns(2)
    for idx, ministry in enumerate(store.ministries):
        with grid[idx % 2]:
            with st.container(border=True):
                st.markdown(f"**{get_localized_text(ministry.name, ministry.name_ar, language)}**")
                st.markdown(status_badge_html(ministry.status, language), unsafe_allow_html=True)
                st.caption(get_localized_text(ministry.description, ministry.description_ar, language))
                st.caption(f"{t(language, 'services')}: {len(ministry.services)}")
                if st.button(t(language, "view_details"), key=f"ministry_open_{ministry.id}"):
                    _navigate("ministry", ministry_id=ministry.id)


def render_ministry(store: AppStore) -> None:
    language = store.language.code
    ministry = store.get_ministry(_query_get("ministry_id") or "")
    if ministry is None:
        _navigate("ministries")
        return
    st.header(get_localized_text(ministry.name, ministry.name_ar, language))
    st.write(get_localized_text(ministry.description, ministry.description_ar, language))
    with st.expander(t(language, "contact"), expanded=True):
        contact = ministry.contact
        st.write(f"{t(language, 'phone')}: {contact.phone or '-'}")
        st.write(f"{t(language, 'email')}: {contact.email or '-'}")
        if contact.website:
            st.markdown(f"[{contact.website}]({contact.website})")
        st.write(get_localized_text(contact.address, contact.address_ar, language) or "-")

    st.subheader(t(language, "services"))
    for service in store.services_for_ministry(ministry):
        render_service_card(service, language)
        if st.button(t(language, "view_details"), key=f"ministry_service_{service.id}"):
            _navigate("service", service_id=service.id)


def render_login(store: AppStore) -> None:
    language = store.language.code
    if store.is_authenticated:
        _navigate(_query_get("next") or "dashboard", service_id=_query_get("service_id"))
        return

    st.header(t(language, "login_title"))
    st.caption(t(language, "login_hint"))
    with st.form("login_form"):
        email = st.text_input(t(language, "email"))
        password = st.text_input(t(language, "password"), type="password")
        submitted = st.form_submit_button(t(language, "login"))

    if submitted:
        errors = validate_login_form(email, password, language)
        if errors:
            _show_errors(errors)
            return
        store.set_loading(True)
        with st.spinner(t(language, "logging_in")):
            time.sleep(settings.login_delay_seconds)
            with db_session() as db:
                user = authenticate_user(db, email, password, fallback_user=demo_user())
        if user is None:
            store.set_loading(False)
            st.error(t(language, "invalid_credentials"))
            return
        store.login(user)
        record_action(user.id, "login", {"email": email.strip().lower()})
        target = _query_get("next")
        _navigate(target if target in PAGES else "dashboard", service_id=_query_get("service_id"))

    st.caption(t(language, "no_account"))
    if st.button(t(language, "register"), key="login_to_register"):
        _navigate("register")


def render_register(store: AppStore) -> None:
    language = store.language.code
    st.header(t(language, "register_title"))
    with st.form("register_form"):
        c1, c2 = st.columns(2)
        with c1:
            first_name = st.text_input(t(language, "first_name"))
            first_name_ar = st.text_input(t(language, "first_name_ar"))
            email = st.text_input(t(language, "email"))
            national_id = st.text_input(t(language, "national_id"))
            password = st.text_input(t(language, "password"), type="password")
        with c2:
            last_name = st.text_input(t(language, "last_name"))
            last_name_ar = st.text_input(t(language, "last_name_ar"))
            phone = st.text_input(t(language, "phone"))
            date_of_birth = st.date_input(
                t(language, "date_of_birth"),
                value=None,
                min_value=date(1900, 1, 1),
                max_value=date.today(),
            )
            confirm_password = st.text_input(t(language, "confirm_password"), type="password")
        gender = st.radio(t(language, "gender"), ["male", "female"], format_func=lambda value: t(language, value))
        c3, c4, c5 = st.columns(3)
        street = c3.text_input(t(language, "street"))
        city = c4.text_input(t(language, "city"))
        district = c5.text_input(t(language, "district"))
        accept_terms = st.checkbox(t(language, "accept_terms"))
        submitted = st.form_submit_button(t(language, "register"))

    if not submitted:
        return
    form = {
        "first_name": first_name,
        "last_name": last_name,
        "first_name_ar": first_name_ar,
        "last_name_ar": last_name_ar,
        "email": email,
        "phone": phone,
        "national_id": national_id,
        "date_of_birth": date_of_birth.isoformat() if date_of_birth else "",
        "gender": gender,
        "street": street,
        "city": city,
        "district": district,
        "password": password,
        "confirm_password": confirm_password,
        "accept_terms": accept_terms,
    }
    errors = validate_registration_form(form, language)
    if errors:
        _show_errors(errors)
        return
    try:
        with db_session() as db:
            user = register_account(db, form, language)
    except ValueError as exc:
        st.error(str(exc))
        return
    record_action(user.id, "registered", {"email": user.email})
    _flash(t(language, "registered"))
    _navigate("login")


def render_dashboard(store: AppStore) -> None:
    language = store.language.code
    user = _require_user(store, "dashboard")
    if user is None:
        return
    _ensure_dashboard_data(store)
    _render_flash()

    st.header(f"{t(language, 'welcome')}, {get_localized_text(user.first_name, user.first_name_ar, language)}")
    stats = store.dashboard_stats
    cols = st.columns(6)
    values = [
        ("total_applications", stats.total_applications),
        ("pending_applications", stats.pending_applications),
        ("completed_applications", stats.completed_applications),
        ("total_payments", format_currency(stats.total_payments, locale=language)),
        ("unread_notifications", stats.unread_notifications),
        ("services_used", stats.services_used),
    ]
    for col, (key, value) in zip(cols, values):
        with col:
            render_stat(t(language, key), value)

    left, right = st.columns(2)
    with left:
        st.subheader(t(language, "recent_applications"))
        for application in sort_by_date(store.applications, "submission_date")[:3]:
            render_application_card(application, resolve_service_name(application.service_id, store.services, language), language)
        if st.button(t(language, "view_all"), key="dashboard_applications"):
            _navigate("applications")
    with right:
        st.subheader(t(language, "recent_notifications"))
        for notification in store.notifications[:3]:
            render_notification_card(notification, language)
        if st.button(t(language, "view_all"), key="dashboard_notifications"):
            _navigate("notifications")


def applications_frame(store: AppStore, language: str, applications: list) -> pd.DataFrame:
    rows = [
        {
            t(language, "tracking_number"): item.tracking_number,
            t(language, "services"): resolve_service_name(item.service_id, store.services, language),
            t(language, "status"): get_status_text(item.status, language),
            t(language, "submitted_on"): format_date(item.submission_date, language),
            t(language, "estimated_completion"): format_date(item.estimated_completion_date, language),
            t(language, "fees"): fees_text(item.fees, language),
            t(language, "progress"): f"{item.current_step}/{item.total_steps}",
        }
        for item in applications
    ]
    return pd.DataFrame(rows)


def render_applications(store: AppStore) -> None:
    language = store.language.code
    user = _require_user(store, "applications")
    if user is None:
        return
    _ensure_dashboard_data(store)
    _render_flash()

    st.header(t(language, "applications"))
    statuses = ["all", *sorted({item.status for item in store.applications})]
    status = st.selectbox(
        t(language, "status"),
        statuses,
        format_func=lambda value: t(language, "all_statuses") if value == "all" else get_status_text(value, language),
        key="applications_status",
    )
    applications = sort_by_date(filter_applications(store.applications, status), "submission_date")
    if not applications:
        st.info(t(language, "no_applications"))
        return

    st.dataframe(applications_frame(store, language, applications), use_container_width=True, hide_index=True)

    for application in applications:
        service = store.get_service(application.service_id)
        with st.expander(f"{application.tracking_number} - {resolve_service_name(application.service_id, store.services, language)}"):
            render_application_card(application, resolve_service_name(application.service_id, store.services, language), language)
            if application.notes:
                st.caption(application.notes)
            c1, c2 = st.columns(2)
            with c1:
                downloaded_pdf = st.download_button(
                    label=t(language, "download_receipt"),
                    data=build_application_receipt(application, service, user),
                    file_name=f"{application.tracking_number}.pdf",
                    mime="application/pdf",
                    key=f"receipt_{application.id}",
                    use_container_width=True,
                )
            with c2:
                downloaded_json = st.download_button(
                    label=t(language, "download_json"),
                    data=build_json_summary(application_summary(application, service, user)),
                    file_name=f"{application.tracking_number}.json",
                    mime="application/json",
                    key=f"summary_{application.id}",
                    use_container_width=True,
                )
            if downloaded_pdf:
                record_action(user.id, "receipt_downloaded", {"tracking_number": application.tracking_number})
            if downloaded_json:
                record_action(user.id, "json_export_downloaded", {"tracking_number": application.tracking_number})


def render_notifications(store: AppStore) -> None:
    language = store.language.code
    user = _require_user(store, "notifications")
    if user is None:
        return
    _ensure_dashboard_data(store)

    st.header(t(language, "notifications"))
    c1, c2, c3 = st.columns([2, 2, 1])
    with c1:
        type_filter = st.selectbox(
            t(language, "type"),
            ["all", *NOTIFICATION_TYPES],
            format_func=lambda value: t(language, "all_types") if value == "all" else value,
            key="notifications_type",
        )
    with c2:
        read_filter = st.selectbox(
            t(language, "read_state"),
            ["all", "unread", "read"],
            format_func=lambda value: t(language, value),
            key="notifications_read",
        )
    with c3:
        if st.button(t(language, "mark_all_read"), key="mark_all_read", disabled=store.unread_count == 0):
            for notification in store.notifications:
                if not notification.is_read:
                    store.mark_notification_as_read(notification.id)
            st.rerun()

    notifications = filter_notifications(store.notifications, type_filter, read_filter)
    if not notifications:
        st.info(t(language, "no_notifications"))
        return
    for notification in notifications:
        render_notification_card(notification, language)
        b1, b2, _ = st.columns([1, 1, 3])
        if not notification.is_read and b1.button(t(language, "mark_as_read"), key=f"read_{notification.id}"):
            store.mark_notification_as_read(notification.id)
            st.rerun()
        target = URL_ROUTES.get(notification.action_url or "")
        if target and b2.button(t(language, "view_details"), key=f"open_{notification.id}"):
            store.mark_notification_as_read(notification.id)
            _navigate(target)


def render_profile(store: AppStore) -> None:
    language = store.language.code
    user = _require_user(store, "profile")
    if user is None:
        return
    _render_flash()

    st.header(t(language, "profile"))
    st.markdown(f"**{user.full_name}** / **{user.full_name_ar or '-'}**")
    st.caption(t(language, "verified") if user.is_verified else t(language, "not_verified"))
    if user.registration_date:
        st.caption(f"{t(language, 'member_since')}: {format_date(user.registration_date, language)}")
    st.write(f"{t(language, 'national_id')}: {user.national_id}")
    st.write(f"{t(language, 'date_of_birth')}: {format_date(user.date_of_birth, language)}")

    st.subheader(t(language, "edit_profile"))
    with st.form("profile_form"):
        c1, c2 = st.columns(2)
        first_name = c1.text_input(t(language, "first_name"), value=user.first_name)
        last_name = c2.text_input(t(language, "last_name"), value=user.last_name)
        email = c1.text_input(t(language, "email"), value=user.email)
        phone = c2.text_input(t(language, "phone"), value=user.phone)
        street = c1.text_input(t(language, "street"), value=user.address.street)
        city = c2.text_input(t(language, "city"), value=user.address.city)
        submitted = st.form_submit_button(t(language, "save"))

    if not submitted:
        return
    fields = {"first_name": first_name, "last_name": last_name, "email": email, "phone": phone}
    errors = validate_profile_form(fields, language)
    if errors:
        _show_errors(errors)
        return
    updated = replace(
        user,
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        email=email.strip().lower(),
        phone=phone.strip(),
        address=replace(user.address, street=street.strip(), city=city.strip()),
    )
    try:
        with db_session() as db:
            update_account_profile(db, updated)
    except ValueError:
        _show_errors({"email": message("profile_email_taken", language)})
        return
    store.set_user(updated)
    record_action(user.id, "profile_updated", {"fields": sorted(fields)})
    _flash(t(language, "profile_saved"))
    st.rerun()


RENDERERS = {
    "home": render_home,
    "services": render_services,
    "service": render_service,
    "apply": render_apply,
    "ministries": render_ministries,
    "ministry": render_ministry,
    "login": render_login,
    "register": render_register,
    "dashboard": render_dashboard,
    "applications": render_applications,
    "notifications": render_notifications,
    "profile": render_profile,
}


def main() -> None:
    bootstrap()
    store = get_store()
    page = _query_get("page", "home")
    if page not in PAGES:
        page = "home"
    inject_css(store.direction)
    render_sidebar(store, page)
    if page not in PROTECTED_PAGES:
        _render_flash()
    RENDERERS[page](store)


if __name__ == "__main__":
    main()
