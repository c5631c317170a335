# core/identity/base.py
"""
Identity collaborator.

An ``IdentityProvider`` behaves like a BaaS auth client: it is stateful
per session context (one instance per signed-in caller), holds the current
session and notifies its listeners on every sign-in / sign-out.
"""
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from core.constants import AUTH_SIGNED_IN, AUTH_SIGNED_OUT
from core.store.base import Subscription

logger = logging.getLogger("taskhub.identity")

AuthListener = Callable[[str, Optional["AuthSession"]], None]


@dataclass(frozen=True)
class AuthSession:
    uid: str
    email: str
    display_name: str = ""
    photo_url: str = ""
    access_token: str = ""


def session_from_claims(payload: dict, token: str = "") -> AuthSession:
    """Build a session from verified access-token claims."""
    metadata = payload.get("user_metadata") or {}
    return AuthSession(
        uid=payload["sub"],
        email=payload.get("email") or "",
        display_name=metadata.get("display_name") or metadata.get("full_name") or "",
        photo_url=metadata.get("avatar_url") or "",
        access_token=token,
    )


class IdentityProvider(ABC):
    def __init__(self):
        self.current_session: Optional[AuthSession] = None
        self._listeners: Dict[int, AuthListener] = {}
        self._listeners_lock = threading.Lock()
        self._next_listener = 0

    # -- state-change stream ------------------------------------------

    def on_auth_state_change(self, callback: AuthListener) -> Subscription:
        with self._listeners_lock:
            self._next_listener += 1
            listener_id = self._next_listener
            self._listeners[listener_id] = callback
        return Subscription(lambda: self._remove_listener(listener_id))

    def _remove_listener(self, listener_id: int) -> None:
        with self._listeners_lock:
            self._listeners.pop(listener_id, None)

    def _emit(self, event: str, session: Optional[AuthSession]) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners.values())
        for callback in listeners:
            callback(event, session)

    def _signed_in(self, session: AuthSession) -> AuthSession:
        self.current_session = session
        logger.info("Signed in %s", session.email)
        self._emit(AUTH_SIGNED_IN, session)
        return session

    def _signed_out(self) -> None:
        previous = self.current_session
        self.current_session = None
        if previous is not None:
            logger.info("Signed out %s", previous.email)
        self._emit(AUTH_SIGNED_OUT, None)

    # -- operations ---------------------------------------------------

    @abstractmethod
    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        ...

    @abstractmethod
    def sign_up(self, email: str, password: str, display_name: str = "") -> AuthSession:
        ...

    @abstractmethod
    def sign_in_with_google(self, id_token: str) -> AuthSession:
        ...

    @abstractmethod
    def sign_out(self, access_token: str = "") -> None:
        ...

    @abstractmethod
    def create_account(self, email: str, password: str, display_name: str = "") -> AuthSession:
        """Create an account for someone else; the caller's session is untouched."""

    @abstractmethod
    def update_email(self, uid: str, email: str) -> None:
        ...

    @abstractmethod
    def update_password(self, uid: str, password: str) -> None:
        ...
