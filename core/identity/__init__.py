from .base import AuthSession, IdentityProvider, session_from_claims
from .memory import InMemoryAccounts, InMemoryIdentityProvider
from .supabase import SupabaseIdentityProvider

__all__ = [
    "AuthSession",
    "IdentityProvider",
    "session_from_claims",
    "InMemoryAccounts",
    "InMemoryIdentityProvider",
    "SupabaseIdentityProvider",
]
