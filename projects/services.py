# projects/services.py

import logging

from core.constants import COLLECTION_PROJECTS, CREATED_BY_ADMIN
from core.datetime_utils import now_iso

logger = logging.getLogger("taskhub.projects")


def create_project(store, name, description, members):
    project = store.add(COLLECTION_PROJECTS, {
        "name": name,
        "description": description,
        "members": list(members),
        "created_by": CREATED_BY_ADMIN,
        "created_at": now_iso(),
    })
    logger.info(f"Created project {project['id']} ({name}) with {len(members)} members")
    return project


def update_project(store, project_id, name, description, members):
    project = store.update(COLLECTION_PROJECTS, project_id, {
        "name": name,
        "description": description,
        "members": list(members),
        "updated_at": now_iso(),
    })
    logger.info(f"Updated project {project_id}")
    return project


def delete_project(store, project_id):
    store.delete(COLLECTION_PROJECTS, project_id)
    logger.info(f"Deleted project {project_id}")
