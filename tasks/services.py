# tasks/services.py
"""
Task writes: admin CRUD, bulk assignment and member status changes.

Status moves forward todo -> in-progress -> completed by convention only;
nothing here rejects a skipped or reversed move. Completing a task also
appends an audit record to ``completed_tasks``.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

from core.constants import (
    COLLECTION_COMPLETED_TASKS,
    COLLECTION_TASKS,
    COLLECTION_USERS,
    CREATED_BY_ADMIN,
    TASK_COMPLETED,
    TASK_TODO,
)
from core.datetime_utils import now, now_iso, parse_date
from core.store import Query

from .emails import send_reminder_email

logger = logging.getLogger("taskhub.tasks")

BULK_ASSIGN_MAX_WORKERS = 8


class BulkAssignFailed(Exception):
    """At least one update of a bulk assignment failed; others may have landed."""

    def __init__(self, failures, total):
        self.failures = failures  # {task_id: error}
        self.total = total
        super().__init__(f"{len(failures)} of {total} task updates failed")


def _due_date_value(due_date):
    return due_date.isoformat() if hasattr(due_date, "isoformat") else due_date


def create_task(store, title, description, project_id, assigned_to, priority, due_date):
    task = store.add(COLLECTION_TASKS, {
        "title": title,
        "description": description,
        "project_id": project_id,
        "assigned_to": list(assigned_to),
        "status": TASK_TODO,
        "priority": priority,
        "due_date": _due_date_value(due_date),
        "created_at": now_iso(),
        "created_by": CREATED_BY_ADMIN,
    })
    logger.info(f"Created task {task['id']} in project {project_id}")
    notify_assignees(task["id"], task["assigned_to"])
    return task


def update_task(store, task_id, title, description, project_id, assigned_to, priority, due_date):
    # Status is owned by the assignees; the edit form leaves it alone
    task = store.update(COLLECTION_TASKS, task_id, {
        "title": title,
        "description": description,
        "project_id": project_id,
        "assigned_to": list(assigned_to),
        "priority": priority,
        "due_date": _due_date_value(due_date),
        "updated_at": now_iso(),
    })
    logger.info(f"Updated task {task_id}")
    return task


def delete_task(store, task_id):
    store.delete(COLLECTION_TASKS, task_id)
    logger.info(f"Deleted task {task_id}")


def bulk_assign(store, task_ids, user_ids, max_workers=BULK_ASSIGN_MAX_WORKERS):
    """
    Replace the assignee list of every task in ``task_ids`` with
    ``user_ids``: one update per task, issued concurrently. Waits for all of
    them; raises BulkAssignFailed if any failed. Applied updates stay.
    """
    task_ids = list(task_ids)
    assignees = list(user_ids)
    stamp = now_iso()

    def assign(task_id):
        return store.update(COLLECTION_TASKS, task_id, {
            "assigned_to": list(assignees),
            "updated_at": stamp,
        })

    failures = {}
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(task_ids)))) as pool:
        futures = {task_id: pool.submit(assign, task_id) for task_id in task_ids}
        for task_id, future in futures.items():
            try:
                future.result()
            except Exception as e:
                failures[task_id] = e

    if failures:
        logger.error(f"Bulk assign failed for {len(failures)}/{len(task_ids)} tasks: {list(failures)}")
        raise BulkAssignFailed(failures, len(task_ids))

    logger.info(f"Assigned {len(task_ids)} tasks to {len(assignees)} users")
    for task_id in task_ids:
        notify_assignees(task_id, assignees)
    return len(task_ids)


def record_completion(store, task_id, user_id, project_id, completed_at=None):
    """Append-only audit entry; nothing reads these back."""
    return store.add(COLLECTION_COMPLETED_TASKS, {
        "task_id": task_id,
        "user_id": user_id,
        "project_id": project_id,
        "completed_at": completed_at or now_iso(),
        "notes": "",
    })


def change_task_status(store, task_id, new_status, user_id, project_id):
    stamp = now_iso()
    changes = {"status": new_status, "updated_at": stamp}

    if new_status == TASK_COMPLETED:
        changes["completed_at"] = stamp
        record_completion(store, task_id, user_id, project_id, completed_at=stamp)

    task = store.update(COLLECTION_TASKS, task_id, changes)
    logger.info(f"Task {task_id} marked as {new_status} by {user_id}")
    return task


# ---- notifications ----------------------------------------------------


def wants_email(profile, flag) -> bool:
    """Notification flags default to on when never saved."""
    if not profile or not profile.get("email"):
        return False
    return (profile.get("settings") or {}).get(flag, True) is not False


def notify_assignees(task_id, user_ids):
    if not user_ids:
        return
    from .tasks import send_assignment_emails_task

    try:
        send_assignment_emails_task.delay(task_id, list(user_ids))
    except Exception as e:
        # The write already landed; a broker outage only costs the e-mail
        logger.error(f"Could not queue assignment e-mails for task {task_id}: {e}")


def tasks_due_soon(tasks, days, today=None):
    """Unfinished tasks whose due date falls between today and today + days."""
    today = today or now().date()
    horizon = today + timedelta(days=days)
    due = []
    for task in tasks:
        if task.get("status") == TASK_COMPLETED:
            continue
        due_date = parse_date(task.get("due_date"))
        if due_date is not None and today <= due_date <= horizon:
            due.append(task)
    return due


def send_due_reminders(store, days=1, today=None):
    """E-mail each assignee (with reminders on) their unfinished tasks due soon."""

    due = tasks_due_soon(store.query(Query(COLLECTION_TASKS)), days, today=today)

    per_user = {}
    for task in due:
        for uid in task.get("assigned_to") or []:
            per_user.setdefault(uid, []).append(task)

    sent = 0
    for uid, user_tasks in per_user.items():
        profile = store.get(COLLECTION_USERS, uid)
        if not wants_email(profile, "task_reminders"):
            continue
        send_reminder_email(profile, user_tasks)
        sent += 1

    logger.info(f"Sent {sent} task reminder e-mails ({len(due)} tasks due within {days} days)")
    return sent
