# core/supabase_auth.py
# Custom DRF authentication class to verify Supabase JWTs

import logging

import jwt
from django.conf import settings
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

from authx.session import SessionProvider
from core.backends import get_document_store
from core.constants import STATUS_DISABLED
from core.identity import session_from_claims

logger = logging.getLogger("taskhub")


class SessionUser:
    """
    ``request.user`` for a verified bearer token. Wraps the request's
    ``SessionProvider`` so views and permissions see session + profile.
    """

    is_authenticated = True
    is_anonymous = False
    is_active = True

    def __init__(self, session_provider):
        self.session_provider = session_provider

    @property
    def session(self):
        return self.session_provider.session

    @property
    def profile(self):
        return self.session_provider.profile or {}

    @property
    def uid(self):
        return self.session.uid

    # DRF throttles and logging expect pk/id
    pk = id = uid

    @property
    def email(self):
        return self.session.email

    @property
    def role(self):
        return self.profile.get("role")

    @property
    def display_name(self):
        return self.profile.get("display_name") or self.email

    def __str__(self):
        return self.email


class SupabaseJWTAuthentication(BaseAuthentication):
    """
    Custom authentication class that validates Supabase JWTs.

    This authenticator:
    1. Extracts the JWT from the Authorization header
    2. Verifies the token signature using the Supabase JWT secret
    3. Adopts the session and loads the caller's existing profile
    """

    keyword = "Bearer"

    def authenticate(self, request):
        auth_header = request.headers.get("Authorization", "")

        if not auth_header.startswith(f"{self.keyword} "):
            return None  # anonymous; the route guard decides

        token = auth_header.split(" ", 1)[1].strip()

        try:
            # Supabase uses HS256 by default
            payload = jwt.decode(
                token,
                settings.SUPABASE_JWT_SECRET,
                algorithms=["HS256"],
                audience="authenticated",
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationFailed("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid Supabase token: {e}")
            raise AuthenticationFailed("Invalid token")

        if not payload.get("sub"):
            raise AuthenticationFailed("Invalid token: missing user ID")

        provider = SessionProvider(get_document_store())
        if provider.adopt(session_from_claims(payload, token)) is None:
            raise AuthenticationFailed("User profile not found")

        if provider.profile.get("status") == STATUS_DISABLED:
            raise AuthenticationFailed("This account has been disabled")

        return (SessionUser(provider), payload)

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'
