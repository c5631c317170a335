# core/identity/supabase.py
# Identity backend backed by Supabase Auth

import logging
from contextlib import contextmanager

from supabase import AuthError

from core.errors import IdentityError
from core.store.base import Subscription

from .base import AuthSession, IdentityProvider

logger = logging.getLogger("taskhub.identity")


@contextmanager
def _auth_call(action: str):
    """Surface Supabase auth errors with the provider's own message."""
    try:
        yield
    except AuthError as e:
        logger.warning(f"Supabase auth {action} failed: {e}")
        raise IdentityError(getattr(e, "message", str(e)), getattr(e, "code", None) or "identity_error") from e


def _to_session(session) -> AuthSession:
    user = session.user
    metadata = user.user_metadata or {}
    return AuthSession(
        uid=user.id,
        email=user.email or "",
        display_name=metadata.get("display_name") or metadata.get("full_name") or "",
        photo_url=metadata.get("avatar_url") or "",
        access_token=session.access_token,
    )


def _to_account(user) -> AuthSession:
    metadata = user.user_metadata or {}
    return AuthSession(
        uid=user.id,
        email=user.email or "",
        display_name=metadata.get("display_name") or "",
        photo_url=metadata.get("avatar_url") or "",
    )


class SupabaseIdentityProvider(IdentityProvider):
    """
    ``client`` is a per-context anon-key client (it keeps the signed-in
    session); ``admin_client`` uses the service-role key for account
    administration.
    """

    def __init__(self, client, admin_client):
        super().__init__()
        self.client = client
        self.admin_client = admin_client

    def on_auth_state_change(self, callback) -> Subscription:
        def forward(event, session):
            self.current_session = _to_session(session) if session else None
            callback(event, self.current_session)

        handle = self.client.auth.on_auth_state_change(forward)
        return Subscription(handle.unsubscribe)

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        with _auth_call("sign-in"):
            response = self.client.auth.sign_in_with_password({"email": email, "password": password})
        return _to_session(response.session)

    def sign_up(self, email: str, password: str, display_name: str = "") -> AuthSession:
        with _auth_call("sign-up"):
            response = self.client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"display_name": display_name}},
            })
        if response.session is None:
            raise IdentityError("Check your email to confirm your account", "email_confirmation_required")
        return _to_session(response.session)

    def sign_in_with_google(self, id_token: str) -> AuthSession:
        with _auth_call("google sign-in"):
            response = self.client.auth.sign_in_with_id_token({"provider": "google", "token": id_token})
        return _to_session(response.session)

    def sign_out(self, access_token: str = "") -> None:
        with _auth_call("sign-out"):
            if access_token:
                self.admin_client.auth.admin.sign_out(access_token)
            self.client.auth.sign_out()
        self.current_session = None

    def create_account(self, email: str, password: str, display_name: str = "") -> AuthSession:
        with _auth_call("create account"):
            response = self.admin_client.auth.admin.create_user({
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": {"display_name": display_name},
            })
        return _to_account(response.user)

    def update_email(self, uid: str, email: str) -> None:
        with _auth_call("update email"):
            self.admin_client.auth.admin.update_user_by_id(uid, {"email": email})

    def update_password(self, uid: str, password: str) -> None:
        with _auth_call("update password"):
            self.admin_client.auth.admin.update_user_by_id(uid, {"password": password})
