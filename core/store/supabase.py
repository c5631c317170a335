# core/store/supabase.py
# Document store backed by Supabase (PostgREST tables)

import logging
import uuid
from contextlib import contextmanager
from typing import Optional

from core.errors import DocumentNotFound, StoreError

from .base import OP_EQUALS, DocumentStore, Query, Snapshot, merge_changes

logger = logging.getLogger("taskhub.store")


@contextmanager
def _remote_call(action: str, collection: str):
    """Translate any client/transport failure into StoreError."""
    try:
        yield
    except StoreError:
        raise
    except Exception as e:
        logger.error(f"Supabase {action} on '{collection}' failed: {e}")
        raise StoreError(f"{action} on {collection} failed: {e}") from e


class SupabaseDocumentStore(DocumentStore):
    """
    Each collection is a table with a text ``id`` primary key; array fields
    (``members``, ``assigned_to``) are ``text[]`` and nested settings are
    ``jsonb``.

    The sync supabase client has no realtime channel, so listeners are
    refreshed after writes made through this store instance.
    """

    def __init__(self, client):
        super().__init__()
        self.client = client

    def add(self, collection: str, data: dict) -> dict:
        return self._write(collection, uuid.uuid4().hex, data, upsert=False)

    def set(self, collection: str, doc_id: str, data: dict) -> dict:
        return self._write(collection, doc_id, data, upsert=True)

    def _write(self, collection: str, doc_id: str, data: dict, upsert: bool) -> dict:
        row = dict(data, id=doc_id)
        with _remote_call("insert", collection):
            table = self.client.table(collection)
            result = (table.upsert(row) if upsert else table.insert(row)).execute()
        self._notify(collection)
        return result.data[0] if result.data else row

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        with _remote_call("select", collection):
            result = (
                self.client.table(collection)
                .select("*")
                .eq("id", doc_id)
                .limit(1)
                .execute()
            )
        return result.data[0] if result.data else None

    def update(self, collection: str, doc_id: str, changes: dict) -> dict:
        if any("." in key for key in changes):
            # PostgREST cannot patch inside a jsonb column: merge locally
            current = self.get(collection, doc_id)
            if current is None:
                raise DocumentNotFound(collection, doc_id)
            merged = merge_changes(current, changes)
            changes = {key.split(".")[0]: merged[key.split(".")[0]] for key in changes}

        with _remote_call("update", collection):
            result = (
                self.client.table(collection)
                .update(changes)
                .eq("id", doc_id)
                .execute()
            )
        if not result.data:
            raise DocumentNotFound(collection, doc_id)
        self._notify(collection)
        return result.data[0]

    def delete(self, collection: str, doc_id: str) -> None:
        with _remote_call("delete", collection):
            self.client.table(collection).delete().eq("id", doc_id).execute()
        self._notify(collection)

    def query(self, query: Query) -> Snapshot:
        with _remote_call("select", query.collection):
            builder = self.client.table(query.collection).select("*")
            for f in query.filters:
                if f.op == OP_EQUALS:
                    builder = builder.eq(f.field, f.value)
                else:
                    builder = builder.contains(f.field, [f.value])
            if query.order_field:
                builder = builder.order(query.order_field, desc=False)
            result = builder.execute()
        return list(result.data or [])
