# projects/boards.py

from core.constants import COLLECTION_PROJECTS, COLLECTION_USERS
from core.live import Board
from core.store import Query


class ProjectManagementBoard(Board):
    """Admin project table plus the profile list used by the member picker."""

    def __init__(self, store, on_change=None):
        super().__init__(store, on_change=on_change)
        self.projects = self.watch(Query(COLLECTION_PROJECTS))
        self.users = self.watch(Query(COLLECTION_USERS))

    def member_options(self):
        return [
            {"uid": u["id"], "display_name": u.get("display_name", ""), "email": u.get("email", "")}
            for u in self.users.items
        ]
