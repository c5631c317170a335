# core/store/base.py
"""
Document-store collaborator.

The application owns no authoritative state: profiles, projects, tasks and
chat messages live in a remote document store. This module defines the
contract every backend honours:

- per-collection create / read / update / delete
- queries with equality and array-membership filters plus an ascending
  sort on a single field
- subscribe-for-changes, returning an explicit ``Subscription`` handle

Snapshots handed to listeners are lists of plain dicts, each carrying its
document id under ``id``.
"""
import copy
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

logger = logging.getLogger("taskhub.store")

OP_EQUALS = "=="
OP_ARRAY_CONTAINS = "array-contains"
SUPPORTED_OPS = (OP_EQUALS, OP_ARRAY_CONTAINS)

Snapshot = List[Dict[str, Any]]
Listener = Callable[[Snapshot], None]


class Filter(NamedTuple):
    field: str
    op: str
    value: Any

    def matches(self, doc: dict) -> bool:
        current = doc.get(self.field)
        if self.op == OP_EQUALS:
            return current == self.value
        # array-contains
        return isinstance(current, (list, tuple)) and self.value in current


class Query:
    """Immutable query over one collection."""

    def __init__(self, collection: str, filters: Tuple[Filter, ...] = (), order_field: Optional[str] = None):
        self.collection = collection
        self.filters = tuple(filters)
        self.order_field = order_field

    def where(self, field: str, op: str, value: Any) -> "Query":
        if op not in SUPPORTED_OPS:
            raise ValueError(f"Unsupported query operator: {op}")
        return Query(self.collection, self.filters + (Filter(field, op, value),), self.order_field)

    def order_by(self, field: str) -> "Query":
        return Query(self.collection, self.filters, field)

    def matches(self, doc: dict) -> bool:
        return all(f.matches(doc) for f in self.filters)

    def apply(self, docs) -> Snapshot:
        """Evaluate the query client-side over an iterable of documents."""
        result = [doc for doc in docs if self.matches(doc)]
        if self.order_field:
            field = self.order_field
            # Missing values sort first, like the hosted store does for nulls
            result.sort(key=lambda d: (d.get(field) is not None, d.get(field)))
        return result

    def __repr__(self):
        parts = [self.collection]
        parts += [f"{f.field} {f.op} {f.value!r}" for f in self.filters]
        if self.order_field:
            parts.append(f"order by {self.order_field}")
        return f"<Query {' / '.join(parts)}>"


class Subscription:
    """
    Handle for a live listener. ``unsubscribe`` releases it and may be
    called any number of times.
    """

    def __init__(self, cancel: Callable[[], None]):
        self._cancel = cancel
        self._active = True
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        with self._lock:
            if not self._active:
                return
            self._active = False
        self._cancel()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.unsubscribe()
        return False


def merge_changes(doc: dict, changes: dict) -> dict:
    """
    Apply ``changes`` on a copy of ``doc``. Dotted keys
    (``"settings.theme"``) update nested mappings in place of replacing them.
    """
    merged = copy.deepcopy(doc)
    for key, value in changes.items():
        target = merged
        *parents, leaf = key.split(".")
        for part in parents:
            child = target.get(part)
            if not isinstance(child, dict):
                child = {}
                target[part] = child
            target = child
        target[leaf] = copy.deepcopy(value)
    return merged


class ListenerHub:
    """Registry of live listeners, keyed by the collection they watch."""

    def __init__(self):
        self._lock = threading.Lock()
        self._listeners: Dict[int, Tuple[Query, Listener]] = {}
        self._next_id = 0

    def register(self, query: Query, callback: Listener) -> int:
        with self._lock:
            self._next_id += 1
            self._listeners[self._next_id] = (query, callback)
            return self._next_id

    def remove(self, listener_id: int) -> None:
        with self._lock:
            self._listeners.pop(listener_id, None)

    def listeners_for(self, collection: str):
        with self._lock:
            return [
                (listener_id, query, callback)
                for listener_id, (query, callback) in self._listeners.items()
                if query.collection == collection
            ]

    def __len__(self):
        with self._lock:
            return len(self._listeners)


class DocumentStore(ABC):
    """
    Base class for document-store backends.

    Subclasses implement the raw CRUD/query calls; change notification is
    shared: every write through the store re-runs the queries of the
    listeners watching that collection and hands them fresh snapshots.
    """

    def __init__(self):
        self._hub = ListenerHub()

    # -- CRUD ---------------------------------------------------------

    @abstractmethod
    def add(self, collection: str, data: dict) -> dict:
        """Create a document with a generated id and return it."""

    @abstractmethod
    def set(self, collection: str, doc_id: str, data: dict) -> dict:
        """Create or overwrite the document ``doc_id``."""

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        """Return the document or ``None`` when it does not exist."""

    @abstractmethod
    def update(self, collection: str, doc_id: str, changes: dict) -> dict:
        """Merge ``changes`` into an existing document; raises DocumentNotFound."""

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        """Remove the document. Deleting a missing document is not an error."""

    @abstractmethod
    def query(self, query: Query) -> Snapshot:
        """Run a one-shot query."""

    # -- realtime -----------------------------------------------------

    def subscribe(self, query: Query, callback: Listener) -> Subscription:
        """
        Attach ``callback`` to ``query``. The current snapshot is delivered
        immediately, then again after every write to the collection.
        """
        listener_id = self._hub.register(query, callback)
        subscription = Subscription(lambda: self._hub.remove(listener_id))
        logger.debug("Subscribed %r (listener %s)", query, listener_id)
        try:
            callback(self.query(query))
        except Exception:
            subscription.unsubscribe()
            raise
        return subscription

    def _notify(self, collection: str) -> None:
        for listener_id, query, callback in self._hub.listeners_for(collection):
            try:
                snapshot = self.query(query)
            except Exception as e:
                logger.error("Failed to refresh listener %s for %r: %s", listener_id, query, e)
                continue
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Listener %s for %r raised", listener_id, query)

    @property
    def listener_count(self) -> int:
        return len(self._hub)
