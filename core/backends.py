# core/backends.py
# Wiring for the backend-as-a-service collaborators (document store + identity)

import logging

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from supabase import create_client

from core.identity import InMemoryAccounts, InMemoryIdentityProvider, SupabaseIdentityProvider
from core.store import InMemoryDocumentStore, SupabaseDocumentStore

logger = logging.getLogger("taskhub")

BACKEND_MEMORY = "memory"
BACKEND_SUPABASE = "supabase"

_supabase_client = None
_document_store = None
_accounts = None


def _backend() -> str:
    backend = getattr(settings, "TASKHUB_BACKEND", BACKEND_MEMORY)
    if backend not in (BACKEND_MEMORY, BACKEND_SUPABASE):
        raise ImproperlyConfigured(f"Unknown TASKHUB_BACKEND: {backend!r}")
    return backend


def get_supabase_client():
    """
    Get the Supabase client instance (singleton pattern).
    Uses service_role key for admin access.
    """
    global _supabase_client

    if _supabase_client is None:
        url = settings.SUPABASE_URL
        key = settings.SUPABASE_SERVICE_ROLE_KEY
        if not url or not key:
            raise ImproperlyConfigured("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        _supabase_client = create_client(url, key)
        logger.info("Supabase client initialized")

    return _supabase_client


def create_session_client():
    """A fresh anon-key client; each one carries its own auth session."""
    url = settings.SUPABASE_URL
    key = settings.SUPABASE_ANON_KEY
    if not url or not key:
        raise ImproperlyConfigured("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
    return create_client(url, key)


def get_document_store():
    """Process-wide document store."""
    global _document_store

    if _document_store is None:
        if _backend() == BACKEND_SUPABASE:
            _document_store = SupabaseDocumentStore(get_supabase_client())
        else:
            _document_store = InMemoryDocumentStore()
        logger.info(f"Document store initialized ({_backend()})")

    return _document_store


def get_identity_provider():
    """
    A new identity provider per session context; providers keep the
    signed-in session, so they are never shared between callers.
    """
    global _accounts

    if _backend() == BACKEND_SUPABASE:
        return SupabaseIdentityProvider(create_session_client(), get_supabase_client())

    if _accounts is None:
        _accounts = InMemoryAccounts()
    return InMemoryIdentityProvider(
        _accounts,
        jwt_secret=settings.SUPABASE_JWT_SECRET,
        token_lifetime_minutes=settings.TASKHUB_TOKEN_LIFETIME_MINUTES,
        google_client_id=settings.GOOGLE_CLIENT_ID,
    )


def reset_backends():
    """Drop cached collaborators (tests, settings changes)."""
    global _supabase_client, _document_store, _accounts
    _supabase_client = None
    _document_store = None
    _accounts = None
