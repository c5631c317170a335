from .base import (
    OP_ARRAY_CONTAINS,
    OP_EQUALS,
    DocumentStore,
    Filter,
    Query,
    Subscription,
    merge_changes,
)
from .memory import InMemoryDocumentStore
from .supabase import SupabaseDocumentStore

__all__ = [
    "OP_ARRAY_CONTAINS",
    "OP_EQUALS",
    "DocumentStore",
    "Filter",
    "Query",
    "Subscription",
    "merge_changes",
    "InMemoryDocumentStore",
    "SupabaseDocumentStore",
]
