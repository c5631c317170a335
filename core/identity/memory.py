# core/identity/memory.py
# In-process identity backend for development and tests.
# Issues Supabase-shaped HS256 access tokens so the same JWT
# authentication class verifies both backends.

import threading
import uuid
from dataclasses import dataclass
from datetime import timedelta
from typing import Dict, Optional

import jwt
from django.contrib.auth.hashers import check_password, make_password
from django.utils import timezone
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token

from core.errors import IdentityError

from .base import AuthSession, IdentityProvider

MIN_PASSWORD_LENGTH = 6
TOKEN_AUDIENCE = "authenticated"


@dataclass
class Account:
    uid: str
    email: str
    password_hash: Optional[str]
    display_name: str = ""
    photo_url: str = ""
    provider: str = "email"


class InMemoryAccounts:
    """Account directory shared by every provider instance in the process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._by_email: Dict[str, Account] = {}

    def find(self, email: str) -> Optional[Account]:
        with self._lock:
            return self._by_email.get(email.lower())

    def find_by_uid(self, uid: str) -> Optional[Account]:
        with self._lock:
            for account in self._by_email.values():
                if account.uid == uid:
                    return account
        return None

    def create(self, email: str, password: Optional[str], display_name="", photo_url="", provider="email") -> Account:
        with self._lock:
            if email.lower() in self._by_email:
                raise IdentityError("User already registered", "user_already_exists")
            account = Account(
                uid=uuid.uuid4().hex,
                email=email,
                password_hash=make_password(password) if password else None,
                display_name=display_name,
                photo_url=photo_url,
                provider=provider,
            )
            self._by_email[email.lower()] = account
            return account

    def change_email(self, uid: str, email: str) -> Account:
        with self._lock:
            if email.lower() in self._by_email and self._by_email[email.lower()].uid != uid:
                raise IdentityError(
                    "A user with this email address has already been registered",
                    "email_exists",
                )
            for key, account in list(self._by_email.items()):
                if account.uid == uid:
                    del self._by_email[key]
                    account.email = email
                    self._by_email[email.lower()] = account
                    return account
        raise IdentityError("User not found", "user_not_found")

    def clear(self) -> None:
        with self._lock:
            self._by_email.clear()


def _check_password_strength(password: str) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise IdentityError(
            f"Password should be at least {MIN_PASSWORD_LENGTH} characters.",
            "weak_password",
        )


class InMemoryIdentityProvider(IdentityProvider):
    def __init__(self, accounts: InMemoryAccounts, jwt_secret: str, token_lifetime_minutes: int = 60,
                 google_client_id: Optional[str] = None):
        super().__init__()
        self.accounts = accounts
        self.jwt_secret = jwt_secret
        self.token_lifetime = timedelta(minutes=token_lifetime_minutes)
        self.google_client_id = google_client_id

    def _mint_token(self, account: Account) -> str:
        issued = timezone.now()
        payload = {
            "sub": account.uid,
            "email": account.email,
            "aud": TOKEN_AUDIENCE,
            "role": "authenticated",
            "iat": int(issued.timestamp()),
            "exp": int((issued + self.token_lifetime).timestamp()),
            "user_metadata": {
                "display_name": account.display_name,
                "avatar_url": account.photo_url,
            },
            "app_metadata": {"provider": account.provider},
        }
        return jwt.encode(payload, self.jwt_secret, algorithm="HS256")

    def _session_for(self, account: Account, with_token=True) -> AuthSession:
        return AuthSession(
            uid=account.uid,
            email=account.email,
            display_name=account.display_name,
            photo_url=account.photo_url,
            access_token=self._mint_token(account) if with_token else "",
        )

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        account = self.accounts.find(email or "")
        if account is None or not account.password_hash or not check_password(password, account.password_hash):
            raise IdentityError("Invalid login credentials", "invalid_credentials")
        return self._signed_in(self._session_for(account))

    def sign_up(self, email: str, password: str, display_name: str = "") -> AuthSession:
        _check_password_strength(password)
        account = self.accounts.create(email, password, display_name=display_name)
        return self._signed_in(self._session_for(account))

    def sign_in_with_google(self, id_token: str) -> AuthSession:
        try:
            id_info = google_id_token.verify_oauth2_token(
                id_token, google_requests.Request(), self.google_client_id
            )
        except ValueError as e:
            raise IdentityError(f"Invalid token: {e}", "invalid_token") from e

        email = id_info.get("email")
        if not email:
            raise IdentityError("Email not found in token", "invalid_token")

        account = self.accounts.find(email)
        if account is None:
            account = self.accounts.create(
                email,
                None,
                display_name=id_info.get("name", ""),
                photo_url=id_info.get("picture", ""),
                provider="google",
            )
        return self._signed_in(self._session_for(account))

    def sign_out(self, access_token: str = "") -> None:
        self._signed_out()

    def create_account(self, email: str, password: str, display_name: str = "") -> AuthSession:
        _check_password_strength(password)
        account = self.accounts.create(email, password, display_name=display_name)
        return self._session_for(account, with_token=False)

    def update_email(self, uid: str, email: str) -> None:
        self.accounts.change_email(uid, email)

    def update_password(self, uid: str, password: str) -> None:
        _check_password_strength(password)
        account = self.accounts.find_by_uid(uid)
        if account is None:
            raise IdentityError("User not found", "user_not_found")
        account.password_hash = make_password(password)
