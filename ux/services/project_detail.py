# ux/services/project_detail.py
"""
One project as seen by one member: the project record (read once) and a
live view of that member's tasks in it.
"""
from core.constants import (
    COLLECTION_PROJECTS,
    COLLECTION_TASKS,
    TASK_COMPLETED,
    TASK_IN_PROGRESS,
    TASK_TODO,
)
from core.live import Board
from core.store import Query

from .dashboard import status_counts


class ProjectDetailBoard(Board):
    def __init__(self, store, project_id, uid, on_change=None):
        super().__init__(store, on_change=on_change)
        self.project_id = project_id
        self.uid = uid
        self.project = None
        self.tasks = self.watch(
            Query(COLLECTION_TASKS)
            .where("project_id", "==", project_id)
            .where("assigned_to", "array-contains", uid)
        )

    def open(self):
        # Not live: fetched once per board
        self.project = self.store.get(COLLECTION_PROJECTS, self.project_id)
        return super().open()

    def find_task(self, task_id):
        return next((t for t in self.tasks.items if t["id"] == task_id), None)

    def stats(self):
        counts = status_counts(self.tasks.items)
        return {
            "total": len(self.tasks.items),
            "todo": counts["active"],
            "in_progress": counts["in_progress"],
            "completed": counts["completed"],
        }

    def grouped(self):
        groups = {TASK_TODO: [], TASK_IN_PROGRESS: [], TASK_COMPLETED: []}
        for task in self.tasks.items:
            groups.setdefault(task.get("status"), []).append(task)
        return groups
