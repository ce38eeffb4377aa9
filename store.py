"""Application state container.

State lives in an immutable ``AppState`` record. Every change goes through an
action record applied by :func:`reduce`, so one call to an ``AppStore`` method
produces exactly one new state and one round of subscriber notifications.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Optional, Sequence, Union

from sqlalchemy.exc import SQLAlchemyError

from config import DEFAULT_STORE_KEY
from domain import (
    ARABIC,
    ENGLISH,
    Application,
    DashboardStats,
    Language,
    LoggedIn,
    LoggedOut,
    Ministry,
    Notification,
    Service,
    SessionView,
    User,
)
from logic import compute_dashboard_stats, count_unread
from persistence import StateStorage, deserialize_session, serialize_session

logger = logging.getLogger(__name__)

APPLICATION_FIELDS = {item.name for item in fields(Application)}


@dataclass(frozen=True)
class AppState:
    user: Optional[User] = None
    language: Language = ENGLISH
    is_authenticated: bool = False
    is_loading: bool = False
    notifications: tuple[Notification, ...] = ()
    services: tuple[Service, ...] = ()
    applications: tuple[Application, ...] = ()
    ministries: tuple[Ministry, ...] = ()


@dataclass(frozen=True)
class SetUser:
    user: Optional[User]


@dataclass(frozen=True)
class SetLanguage:
    language: Language


@dataclass(frozen=True)
class SetAuthenticated:
    is_authenticated: bool


@dataclass(frozen=True)
class SetLoading:
    is_loading: bool


@dataclass(frozen=True)
class Login:
    user: User


@dataclass(frozen=True)
class Logout:
    pass


@dataclass(frozen=True)
class AddNotification:
    notification: Notification


@dataclass(frozen=True)
class MarkNotificationAsRead:
    notification_id: str


@dataclass(frozen=True)
class SetServices:
    services: tuple[Service, ...]


@dataclass(frozen=True)
class SetApplications:
    applications: tuple[Application, ...]


@dataclass(frozen=True)
class SetMinistries:
    ministries: tuple[Ministry, ...]


@dataclass(frozen=True)
class AddApplication:
    application: Application


@dataclass(frozen=True)
class UpdateApplication:
    application_id: str
    changes: dict[str, Any] = field(default_factory=dict)


Action = Union[
    SetUser,
    SetLanguage,
    SetAuthenticated,
    SetLoading,
    Login,
    Logout,
    AddNotification,
    MarkNotificationAsRead,
    SetServices,
    SetApplications,
    SetMinistries,
    AddApplication,
    UpdateApplication,
]


def _mark_read(state: AppState, action: MarkNotificationAsRead) -> AppState:
    if not any(item.id == action.notification_id for item in state.notifications):
        return state
    return replace(
        state,
        notifications=tuple(
            replace(item, is_read=True) if item.id == action.notification_id else item
            for item in state.notifications
        ),
    )


def _update_application(state: AppState, action: UpdateApplication) -> AppState:
    if not any(item.id == action.application_id for item in state.applications):
        return state
    changes = {key: value for key, value in action.changes.items() if key in APPLICATION_FIELDS and key != "id"}
    return replace(
        state,
        applications=tuple(
            replace(item, **changes) if item.id == action.application_id else item
            for item in state.applications
        ),
    )


_REDUCERS: dict[type, Callable[[AppState, Any], AppState]] = {
    SetUser: lambda state, action: replace(state, user=action.user),
    SetLanguage: lambda state, action: replace(state, language=action.language),
    SetAuthenticated: lambda state, action: replace(state, is_authenticated=action.is_authenticated),
    SetLoading: lambda state, action: replace(state, is_loading=action.is_loading),
    Login: lambda state, action: replace(state, user=action.user, is_authenticated=True, is_loading=False),
    Logout: lambda state, action: replace(
        state, user=None, is_authenticated=False, notifications=(), applications=()
    ),
    AddNotification: lambda state, action: replace(
        state, notifications=(action.notification,) + state.notifications
    ),
    MarkNotificationAsRead: _mark_read,
    SetServices: lambda state, action: replace(state, services=tuple(action.services)),
    SetApplications: lambda state, action: replace(state, applications=tuple(action.applications)),
    SetMinistries: lambda state, action: replace(state, ministries=tuple(action.ministries)),
    AddApplication: lambda state, action: replace(
        state, applications=(action.application,) + state.applications
    ),
    UpdateApplication: _update_application,
}


def reduce(state: AppState, action: Action) -> AppState:
    handler = _REDUCERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unsupported store action: {type(action).__name__}")
    return handler(state, action)


def _persisted_fields_changed(before: AppState, after: AppState) -> bool:
    return (
        before.user != after.user
        or before.language != after.language
        or before.is_authenticated != after.is_authenticated
    )


Listener = Callable[[AppState], None]


class AppStore:
    def __init__(
        self,
        storage: StateStorage | None = None,
        storage_key: str = DEFAULT_STORE_KEY,
        initial_state: AppState | None = None,
    ):
        self._state = initial_state or AppState()
        self._listeners: list[Listener] = []
        self._storage = storage
        self._storage_key = storage_key
        if storage is not None:
            self._hydrate()

    # -- plumbing -----------------------------------------------------------

    def _hydrate(self) -> None:
        try:
            payload = self._storage.load(self._storage_key)
        except SQLAlchemyError:
            logger.exception("Could not read persisted state for %s", self._storage_key)
            return
        if not payload:
            return
        user, language, is_authenticated = deserialize_session(payload)
        self._state = replace(self._state, user=user, language=language, is_authenticated=is_authenticated)
        logger.info("Restored session state for %s (authenticated=%s)", self._storage_key, is_authenticated)

    def _persist(self) -> None:
        if self._storage is None:
            return
        payload = serialize_session(self._state.user, self._state.language, self._state.is_authenticated)
        try:
            self._storage.save(self._storage_key, payload)
        except SQLAlchemyError:
            logger.exception("Could not persist session state for %s", self._storage_key)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> AppState:
        previous = self._state
        current = reduce(previous, action)
        if current is previous:
            return current
        self._state = current
        if _persisted_fields_changed(previous, current):
            self._persist()
        for listener in list(self._listeners):
            listener(current)
        return current

    # -- actions ------------------------------------------------------------

    def set_user(self, user: User | None) -> None:
        self.dispatch(SetUser(user))

    def set_language(self, language: Language) -> None:
        self.dispatch(SetLanguage(language))

    def toggle_language(self) -> Language:
        self.set_language(ARABIC if self._state.language.code == "en" else ENGLISH)
        return self._state.language

    def set_authenticated(self, is_authenticated: bool) -> None:
        self.dispatch(SetAuthenticated(bool(is_authenticated)))

    def set_loading(self, is_loading: bool) -> None:
        self.dispatch(SetLoading(bool(is_loading)))

    def login(self, user: User) -> None:
        self.dispatch(Login(user))
        logger.info("User %s logged in", user.id)

    def logout(self) -> None:
        user_id = self._state.user.id if self._state.user else None
        self.dispatch(Logout())
        logger.info("User %s logged out", user_id)

    def add_notification(self, notification: Notification) -> None:
        self.dispatch(AddNotification(notification))

    def mark_notification_as_read(self, notification_id: str) -> bool:
        found = any(item.id == notification_id for item in self._state.notifications)
        if found:
            self.dispatch(MarkNotificationAsRead(notification_id))
        return found

    def set_services(self, services: Sequence[Service]) -> None:
        self.dispatch(SetServices(tuple(services)))

    def set_applications(self, applications: Sequence[Application]) -> None:
        self.dispatch(SetApplications(tuple(applications)))

    def set_ministries(self, ministries: Sequence[Ministry]) -> None:
        self.dispatch(SetMinistries(tuple(ministries)))

    def add_application(self, application: Application) -> None:
        self.dispatch(AddApplication(application))

    def update_application(self, application_id: str, changes: dict[str, Any]) -> bool:
        found = any(item.id == application_id for item in self._state.applications)
        if not found:
            return False
        ignored = sorted(key for key in changes if key not in APPLICATION_FIELDS or key == "id")
        if ignored:
            logger.warning("Ignoring unknown application fields: %s", ", ".join(ignored))
        self.dispatch(UpdateApplication(application_id, dict(changes)))
        return True

    # -- selectors ----------------------------------------------------------

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def user(self) -> User | None:
        return self._state.user

    @property
    def language(self) -> Language:
        return self._state.language

    @property
    def direction(self) -> str:
        return self._state.language.direction

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def session(self) -> SessionView:
        if self._state.is_authenticated and self._state.user is not None:
            return LoggedIn(self._state.user)
        return LoggedOut()

    @property
    def notifications(self) -> list[Notification]:
        return list(self._state.notifications)

    @property
    def services(self) -> list[Service]:
        return list(self._state.services)

    @property
    def applications(self) -> list[Application]:
        return list(self._state.applications)

    @property
    def ministries(self) -> list[Ministry]:
        return list(self._state.ministries)

    @property
    def unread_count(self) -> int:
        return count_unread(self._state.notifications)

    @property
    def dashboard_stats(self) -> DashboardStats:
        return compute_dashboard_stats(self._state.applications, self._state.notifications)

    def get_service(self, service_id: str) -> Service | None:
        return next((item for item in self._state.services if item.id == service_id), None)

    def get_ministry(self, ministry_id: str) -> Ministry | None:
        return next((item for item in self._state.ministries if item.id == ministry_id), None)

    def services_for_ministry(self, ministry: Ministry) -> list[Service]:
        wanted = set(ministry.services)
        return [item for item in self._state.services if item.id in wanted]
