# core/store/memory.py
# In-process document store used for local development and tests

import copy
import threading
import uuid
from typing import Optional

from core.errors import DocumentNotFound

from .base import DocumentStore, Query, Snapshot, merge_changes


class InMemoryDocumentStore(DocumentStore):
    """
    Thread-safe dict-of-dicts store. Documents are deep-copied in and out
    so callers never share mutable state with the store.
    """

    def __init__(self):
        super().__init__()
        self._lock = threading.RLock()
        self._collections = {}

    def _collection(self, name: str) -> dict:
        return self._collections.setdefault(name, {})

    def add(self, collection: str, data: dict) -> dict:
        return self.set(collection, uuid.uuid4().hex, data)

    def set(self, collection: str, doc_id: str, data: dict) -> dict:
        doc = copy.deepcopy(data)
        doc["id"] = doc_id
        with self._lock:
            self._collection(collection)[doc_id] = doc
        self._notify(collection)
        return copy.deepcopy(doc)

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        with self._lock:
            doc = self._collection(collection).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    def update(self, collection: str, doc_id: str, changes: dict) -> dict:
        with self._lock:
            docs = self._collection(collection)
            if doc_id not in docs:
                raise DocumentNotFound(collection, doc_id)
            doc = merge_changes(docs[doc_id], changes)
            doc["id"] = doc_id
            docs[doc_id] = doc
        self._notify(collection)
        return copy.deepcopy(doc)

    def delete(self, collection: str, doc_id: str) -> None:
        with self._lock:
            removed = self._collection(collection).pop(doc_id, None)
        if removed is not None:
            self._notify(collection)

    def query(self, query: Query) -> Snapshot:
        with self._lock:
            docs = copy.deepcopy(list(self._collection(query.collection).values()))
        return query.apply(docs)

    def clear(self) -> None:
        with self._lock:
            self._collections.clear()
