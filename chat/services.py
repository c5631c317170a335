# chat/services.py
"""
Project rooms are queried server-side by ``project_id``. Direct rooms pull
the whole ``private_chats`` collection in timestamp order and keep only the
two participants' messages; fine at this data volume.
"""
import logging

from core.constants import COLLECTION_PRIVATE_CHATS, COLLECTION_PROJECT_CHATS
from core.datetime_utils import now_iso
from core.store import Query

logger = logging.getLogger("taskhub.chat")


def project_room_query(project_id) -> Query:
    return Query(COLLECTION_PROJECT_CHATS).where("project_id", "==", project_id).order_by("timestamp")


def direct_room_query() -> Query:
    return Query(COLLECTION_PRIVATE_CHATS).order_by("timestamp")


def is_between(message, user_a, user_b) -> bool:
    pair = (message.get("sender_id"), message.get("receiver_id"))
    return pair == (user_a, user_b) or pair == (user_b, user_a)


def filter_direct(messages, user_a, user_b):
    """Messages exchanged by ``user_a`` and ``user_b``, either direction, order kept."""
    return [m for m in messages if is_between(m, user_a, user_b)]


def _message(sender_id, sender_name, body, **target):
    return {
        "message": body,
        "sender_id": sender_id,
        "sender_name": sender_name,
        "timestamp": now_iso(),
        **target,
    }


def send_project_message(store, project_id, sender_id, sender_name, body):
    record = store.add(COLLECTION_PROJECT_CHATS, _message(sender_id, sender_name, body, project_id=project_id))
    logger.debug(f"{sender_id} posted to project room {project_id}")
    return record


def send_direct_message(store, receiver_id, sender_id, sender_name, body):
    record = store.add(COLLECTION_PRIVATE_CHATS, _message(sender_id, sender_name, body, receiver_id=receiver_id))
    logger.debug(f"{sender_id} messaged {receiver_id}")
    return record
