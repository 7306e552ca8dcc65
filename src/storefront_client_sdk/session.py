from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from pydantic import ValidationError as ModelValidationError

from .auth_store import TOKEN_KEY, USER_KEY, AuthStore
from .models import UserIdentity
from .navigation import Navigator, Route

logger = logging.getLogger(__name__)

_SENTINEL_VALUES = {"undefined", "null"}


class SessionStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"


@dataclass(frozen=True)
class SessionChange:
    logged_in: bool
    reason: str


SessionListener = Callable[[SessionChange], None]


def usable_value(value: str | None) -> bool:
    """Persisted strings of "undefined"/"null" count as absent."""
    if value is None:
        return False
    stripped = value.strip()
    return bool(stripped) and stripped not in _SENTINEL_VALUES


class SessionStore:
    """Single source of truth for the credential and the minimal user identity.

    Every writer goes through these methods so subscribers (cart counter,
    gated views) hear about login and logout transitions. The store never
    talks to the network.
    """

    def __init__(self, store: AuthStore, navigator: Navigator | None = None) -> None:
        self.store = store
        self.navigator = navigator
        self.status = SessionStatus.PENDING
        self.token: str | None = None
        self.user: UserIdentity | None = None
        self._listeners: list[SessionListener] = []

    @property
    def is_ready(self) -> bool:
        return self.status is SessionStatus.READY

    @property
    def is_logged_in(self) -> bool:
        return self.token is not None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def initialize(self) -> None:
        raw_token = self.store.get(TOKEN_KEY)
        if not usable_value(raw_token):
            self.store.remove(TOKEN_KEY)
            self.store.remove(USER_KEY)
            self.token = None
            self.user = None
        else:
            self.token = raw_token
            self.user = self._load_identity()
        self.status = SessionStatus.READY
        logger.info("session_initialized", extra={"logged_in": self.is_logged_in})
        self._notify(SessionChange(logged_in=self.is_logged_in, reason="initialized"))

    def login(self, token: str, user: UserIdentity | None = None) -> None:
        if not usable_value(token):
            raise ValueError("login requires a non-empty credential")
        self.store.set(TOKEN_KEY, token)
        self.token = token
        if user is not None:
            self.user = user
            self.store.set(USER_KEY, user.model_dump_json(exclude_none=True))
        self.status = SessionStatus.READY
        logger.info("session_login", extra={"username": user.username if user else None})
        self._notify(SessionChange(logged_in=True, reason="login"))

    def update_identity(self, user: UserIdentity) -> None:
        if self.token is None:
            # Identity is only ever held alongside a credential.
            return
        self.user = user
        self.store.set(USER_KEY, user.model_dump_json(exclude_none=True))

    def logout(self) -> None:
        changed = self._clear()
        if not changed:
            self.store.remove(TOKEN_KEY)
            self.store.remove(USER_KEY)
        else:
            logger.info("session_logout")
            self._notify(SessionChange(logged_in=False, reason="logout"))
        if self.navigator is not None:
            self.navigator.push(Route.LOGIN)

    def expire(self) -> bool:
        """Drop a credential the server rejected. Returns False when nothing was held."""
        changed = self._clear()
        if changed:
            logger.warning("session_expired")
            self._notify(SessionChange(logged_in=False, reason="expired"))
        return changed

    def _clear(self) -> bool:
        self.status = SessionStatus.READY
        if self.token is None and self.user is None:
            return False
        self.store.remove(TOKEN_KEY)
        self.store.remove(USER_KEY)
        self.token = None
        self.user = None
        return True

    def _load_identity(self) -> UserIdentity | None:
        raw_user = self.store.get(USER_KEY)
        if not usable_value(raw_user):
            return None
        try:
            return UserIdentity.model_validate_json(raw_user)
        except ModelValidationError:
            # A corrupt identity cache never forces a logout.
            logger.warning("session_identity_corrupt")
            self.store.remove(USER_KEY)
            return None

    def _notify(self, change: SessionChange) -> None:
        for listener in list(self._listeners):
            listener(change)
