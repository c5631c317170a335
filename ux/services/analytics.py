# ux/services/analytics.py
"""
Admin analytics: completion rates per user and per project, computed from
live mirrors of tasks, profiles and projects.
"""
import math

from core.constants import (
    COLLECTION_PROJECTS,
    COLLECTION_TASKS,
    COLLECTION_USERS,
    TASK_COMPLETED,
    TASK_IN_PROGRESS,
    TASK_TODO,
)
from core.live import Board
from core.store import Query


def completion_rate(completed: int, total: int) -> int:
    """Whole percent, halves rounded up (1 of 8 -> 13); 0 when there are no tasks."""
    if total <= 0:
        return 0
    return int(math.floor(completed / total * 100 + 0.5))


def _row(row_id, name, tasks):
    completed = sum(1 for t in tasks if t.get("status") == TASK_COMPLETED)
    return {
        "id": row_id,
        "name": name,
        "completed": completed,
        "total": len(tasks),
        "rate": completion_rate(completed, len(tasks)),
    }


def user_task_stats(users, tasks):
    return [
        _row(
            u["id"],
            u.get("display_name") or u.get("email", ""),
            [t for t in tasks if u["id"] in (t.get("assigned_to") or [])],
        )
        for u in users
    ]


def project_task_stats(projects, tasks):
    return [
        _row(p["id"], p.get("name", ""), [t for t in tasks if t.get("project_id") == p["id"]])
        for p in projects
    ]


def overall_totals(users, projects, tasks):
    by_status = {TASK_TODO: 0, TASK_IN_PROGRESS: 0, TASK_COMPLETED: 0}
    for t in tasks:
        if t.get("status") in by_status:
            by_status[t["status"]] += 1

    return {
        "users": len(users),
        "projects": len(projects),
        "tasks": len(tasks),
        "todo": by_status[TASK_TODO],
        "in_progress": by_status[TASK_IN_PROGRESS],
        "completed": by_status[TASK_COMPLETED],
        "completion_rate": completion_rate(by_status[TASK_COMPLETED], len(tasks)),
    }


class AnalyticsBoard(Board):
    def __init__(self, store, on_change=None):
        super().__init__(store, on_change=on_change)
        self.tasks = self.watch(Query(COLLECTION_TASKS))
        self.users = self.watch(Query(COLLECTION_USERS))
        self.projects = self.watch(Query(COLLECTION_PROJECTS))

    def summary(self):
        tasks = self.tasks.items
        return {
            "totals": overall_totals(self.users.items, self.projects.items, tasks),
            "users": user_task_stats(self.users.items, tasks),
            "projects": project_task_stats(self.projects.items, tasks),
        }
