# users/services.py
"""
Profile records: first-sign-in creation, admin user management and
per-user settings. Each function is one remote write (or a short chain of
them); failures propagate to the caller.
"""
import logging

from django.conf import settings

from core.constants import (
    COLLECTION_USERS,
    ROLE_ADMIN,
    ROLE_USER,
    STATUS_ACTIVE,
    THEME_DARK,
    THEME_LIGHT,
)
from core.datetime_utils import now_iso

logger = logging.getLogger("taskhub.users")

DEFAULT_SETTINGS = {
    "theme": THEME_LIGHT,
    "email_notifications": True,
    "task_reminders": True,
}
SETTINGS_KEYS = tuple(DEFAULT_SETTINGS)


def role_for_email(email) -> str:
    """Only the configured admin address is promoted, and only at creation."""
    return ROLE_ADMIN if email and email == settings.TASKHUB_ADMIN_EMAIL else ROLE_USER


def default_display_name(session, display_name=None) -> str:
    if display_name:
        return display_name
    if session.display_name:
        return session.display_name
    if session.email and session.email.split("@")[0]:
        return session.email.split("@")[0]
    return "User"


def build_profile(session, display_name=None) -> dict:
    return {
        "uid": session.uid,
        "display_name": default_display_name(session, display_name),
        "email": session.email or "",
        "photo_url": session.photo_url or "",
        "role": role_for_email(session.email),
        "status": STATUS_ACTIVE,
        "created_at": now_iso(),
        "settings": {"theme": THEME_LIGHT},
    }


def ensure_profile(store, session, display_name=None) -> dict:
    """
    Return the profile for ``session``, creating it on first sign-in.
    An existing profile is returned untouched; role is never re-derived.
    """
    profile = store.get(COLLECTION_USERS, session.uid)
    if profile is not None:
        return profile

    profile = store.set(COLLECTION_USERS, session.uid, build_profile(session, display_name))
    logger.info(f"Created profile for {session.email} with role {profile['role']}")
    return profile


def effective_settings(profile) -> dict:
    merged = dict(DEFAULT_SETTINGS)
    merged.update((profile or {}).get("settings") or {})
    return merged


# ---- admin user management --------------------------------------------


def create_user(store, identity, display_name, email, password, role):
    """Create an identity account, then its profile with the chosen role."""
    account = identity.create_account(email, password, display_name=display_name)
    profile = store.set(COLLECTION_USERS, account.uid, {
        "uid": account.uid,
        "display_name": display_name,
        "email": email,
        "photo_url": "",
        "role": role,
        "status": STATUS_ACTIVE,
        "created_at": now_iso(),
        "settings": {"theme": THEME_LIGHT},
    })
    logger.info(f"Admin created user {email} ({role})")
    return profile


def update_user(store, uid, display_name, role, status):
    profile = store.update(COLLECTION_USERS, uid, {
        "display_name": display_name,
        "role": role,
        "status": status,
    })
    logger.info(f"Updated user {uid}: role={role} status={status}")
    return profile


def delete_user(store, uid):
    store.delete(COLLECTION_USERS, uid)
    logger.info(f"Deleted user profile {uid}")


# ---- self-service settings --------------------------------------------


def save_settings(store, identity, session, data):
    """
    Persist display name and the preferences present in ``data`` on the
    profile, then apply e-mail and password changes through the identity
    provider. Preferences left out of ``data`` keep their saved values.
    """
    changes = {"display_name": data["display_name"]}
    for key in SETTINGS_KEYS:
        if key in data:
            changes[f"settings.{key}"] = data[key]
    profile = store.update(COLLECTION_USERS, session.uid, changes)

    email = (data.get("email") or "").strip()
    if email and email != session.email:
        identity.update_email(session.uid, email)
        profile = store.update(COLLECTION_USERS, session.uid, {"email": email})

    new_password = data.get("new_password") or ""
    if new_password.strip():
        identity.update_password(session.uid, new_password)

    logger.info(f"Saved settings for {session.uid}")
    return profile


def toggle_theme(store, profile):
    current = effective_settings(profile)["theme"]
    new_theme = THEME_DARK if current == THEME_LIGHT else THEME_LIGHT
    store.update(COLLECTION_USERS, profile["id"], {"settings.theme": new_theme})
    return new_theme
