# ux/services/dashboard.py

from core.constants import (
    COLLECTION_PROJECTS,
    COLLECTION_TASKS,
    TASK_COMPLETED,
    TASK_IN_PROGRESS,
    TASK_TODO,
)
from core.live import Board
from core.store import Query

RECENT_TASKS = 5
UNKNOWN_PROJECT = "Unknown Project"


def status_counts(tasks):
    return {
        "active": sum(1 for t in tasks if t.get("status") == TASK_TODO),
        "in_progress": sum(1 for t in tasks if t.get("status") == TASK_IN_PROGRESS),
        "completed": sum(1 for t in tasks if t.get("status") == TASK_COMPLETED),
    }


class UserDashboardBoard(Board):
    """A member's projects and the tasks assigned to them."""

    def __init__(self, store, uid, on_change=None):
        super().__init__(store, on_change=on_change)
        self.uid = uid
        self.projects = self.watch(Query(COLLECTION_PROJECTS).where("members", "array-contains", uid))
        self.tasks = self.watch(Query(COLLECTION_TASKS).where("assigned_to", "array-contains", uid))

    def project_cards(self):
        cards = []
        for project in self.projects.items:
            mine = [t for t in self.tasks.items if t.get("project_id") == project["id"]]
            cards.append({
                "id": project["id"],
                "name": project.get("name", ""),
                "description": project.get("description", ""),
                "member_count": len(project.get("members") or []),
                "stats": status_counts(mine),
            })
        return cards

    def recent_activity(self, limit=RECENT_TASKS):
        names = {p["id"]: p.get("name", "") for p in self.projects.items}
        return [
            {
                "id": t["id"],
                "title": t.get("title", ""),
                "status": t.get("status"),
                "due_date": t.get("due_date"),
                "project_name": names.get(t.get("project_id")) or UNKNOWN_PROJECT,
            }
            for t in self.tasks.items[:limit]
        ]

    def summary(self):
        return {
            "projects": self.project_cards(),
            "stats": {"projects": len(self.projects.items), "tasks": len(self.tasks.items),
                      **status_counts(self.tasks.items)},
            "recent_activity": self.recent_activity(),
        }
