# users/boards.py

from core.constants import COLLECTION_USERS
from core.live import Board
from core.store import Query


class UserManagementBoard(Board):
    """Admin user table: a live mirror of every profile."""

    def __init__(self, store, on_change=None):
        super().__init__(store, on_change=on_change)
        self.users = self.watch(Query(COLLECTION_USERS))

    def rows(self):
        return sorted(self.users.items, key=lambda u: (u.get("display_name") or "").lower())
