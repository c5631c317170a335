# tasks/boards.py

from core.constants import COLLECTION_PROJECTS, COLLECTION_TASKS, COLLECTION_USERS
from core.live import Board
from core.store import Query

ALL_PROJECTS = "all"


class TaskManagementBoard(Board):
    """Admin task table with the project and profile selectors it needs."""

    def __init__(self, store, on_change=None):
        super().__init__(store, on_change=on_change)
        self.tasks = self.watch(Query(COLLECTION_TASKS))
        self.projects = self.watch(Query(COLLECTION_PROJECTS))
        self.users = self.watch(Query(COLLECTION_USERS))

    def filtered(self, project_id=ALL_PROJECTS):
        if not project_id or project_id == ALL_PROJECTS:
            return list(self.tasks.items)
        return [t for t in self.tasks.items if t.get("project_id") == project_id]

    def project_names(self):
        return {p["id"]: p.get("name", "") for p in self.projects.items}

    def project_options(self):
        return [{"id": p["id"], "name": p.get("name", "")} for p in self.projects.items]

    def user_options(self):
        return [
            {"uid": u["id"], "display_name": u.get("display_name", ""), "email": u.get("email", "")}
            for u in self.users.items
        ]
