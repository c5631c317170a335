# core/testing.py
# Shared fixtures for API tests against the in-memory backends.

from django.conf import settings
from rest_framework.test import APIClient

from authx.session import SessionProvider
from core.backends import get_document_store, get_identity_provider, reset_backends

DEFAULT_PASSWORD = "secret123"


class BackendTestMixin:
    """Fresh store + identity accounts per test, and helpers to sign people in."""

    def setUp(self):
        super().setUp()
        reset_backends()
        self.store = get_document_store()
        self.client = APIClient()

    def tearDown(self):
        reset_backends()
        super().tearDown()

    def sign_up(self, email, display_name="", password=DEFAULT_PASSWORD):
        """Create an account and its profile; returns (access_token, profile)."""
        with SessionProvider(self.store, get_identity_provider()) as provider:
            provider.signup(email, password, display_name)
            return provider.session.access_token, provider.profile

    def sign_up_admin(self, display_name="Admin"):
        return self.sign_up(settings.TASKHUB_ADMIN_EMAIL, display_name)

    def login_as(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
