# core/live.py
"""
Live mirrors of remote collections.

A ``LiveCollection`` holds one subscription and keeps ``items`` equal to
the latest snapshot of its query. A ``Board`` groups the collections one
screen needs (e.g. tasks + projects + users for task management) under a
single open/close lifecycle, so every subscription acquired is released
deterministically:

    with TaskManagementBoard(store) as board:
        rows = board.filtered_tasks(project_id)
"""
import logging
import threading

logger = logging.getLogger("taskhub.live")


class LiveCollection:
    def __init__(self, store, query, on_change=None):
        self.store = store
        self.query = query
        self.items = []
        self._on_change = on_change
        self._subscription = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def open(self):
        if self._subscription is None:
            self._subscription = self.store.subscribe(self.query, self._receive)
        return self

    def _receive(self, snapshot):
        with self._lock:
            self.items = snapshot
        if self._on_change is not None:
            self._on_change(snapshot)

    def close(self):
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class Board:
    """
    Base class for screen-level state. Subclasses declare their live
    collections with ``watch`` in ``__init__`` and derive view state from
    them; ``on_change`` (if given) fires with the board after any
    collection refreshes.
    """

    def __init__(self, store, on_change=None):
        self.store = store
        self._live = []
        self._on_change = on_change

    def watch(self, query) -> LiveCollection:
        live = LiveCollection(self.store, query, on_change=self._collection_changed)
        self._live.append(live)
        return live

    def _collection_changed(self, snapshot):
        if self._on_change is not None:
            self._on_change(self)

    def open(self):
        try:
            for live in self._live:
                live.open()
        except Exception:
            self.close()
            raise
        logger.debug("%s opened with %d subscriptions", type(self).__name__, len(self._live))
        return self

    def close(self):
        for live in self._live:
            live.close()

    @property
    def is_open(self) -> bool:
        return bool(self._live) and all(live.is_open for live in self._live)

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
