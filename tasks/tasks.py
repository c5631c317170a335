# tasks/tasks.py

import logging

from celery import shared_task

from core.backends import get_document_store
from core.constants import COLLECTION_PROJECTS, COLLECTION_TASKS, COLLECTION_USERS
from core.exceptions import StoreError

from .emails import send_assignment_email
from .services import wants_email

logger = logging.getLogger("taskhub.tasks")


@shared_task
def send_assignment_emails_task(task_id: str, user_ids: list):
    """
    Async wrapper for assignment e-mails. Returns how many were sent.
    """
    store = get_document_store()
    try:
        task = store.get(COLLECTION_TASKS, task_id)
    except StoreError as e:
        logger.error(f"Could not load task {task_id} for e-mails: {e}")
        return 0
    if task is None:
        return 0

    project = store.get(COLLECTION_PROJECTS, task.get("project_id")) if task.get("project_id") else None

    sent = 0
    for uid in user_ids:
        profile = store.get(COLLECTION_USERS, uid)
        if not wants_email(profile, "email_notifications"):
            continue
        if send_assignment_email(profile, task, project):
            sent += 1
    return sent
