# tasks/emails.py
from django.conf import settings
from django.core.mail import send_mail


def _greeting_name(profile):
    return profile.get("display_name") or profile.get("email", "").split("@")[0] or "there"


def send_assignment_email(profile, task, project=None):
    """
    Tell an assignee they have a new (or re-assigned) task.
    """
    email = (profile or {}).get("email")
    if not email:
        # No email set, nothing to send
        return False

    project_name = (project or {}).get("name") or "Unknown Project"
    subject = f"New task: {task.get('title', '')}"

    message = (
        f"Hi {_greeting_name(profile)},\n\n"
        f"You have been assigned a task:\n"
        f"  {task.get('title', '')}\n"
        f"  Project: {project_name}\n"
        f"  Priority: {task.get('priority', '')}\n"
        f"  Due: {task.get('due_date') or 'no due date'}\n\n"
        f"Thank you,\n"
        f"TaskHub"
    )

    send_mail(
        subject=subject,
        message=message,
        from_email=getattr(settings, "DEFAULT_FROM_EMAIL", None),
        recipient_list=[email],
        fail_silently=True,
    )
    return True


def send_reminder_email(profile, tasks):
    """
    One digest per user listing their unfinished tasks that are due soon.
    """
    email = (profile or {}).get("email")
    if not email or not tasks:
        return False

    lines = "\n".join(
        f"  - {t.get('title', '')} (due {t.get('due_date')}, {t.get('status')})"
        for t in sorted(tasks, key=lambda t: t.get("due_date") or "")
    )
    subject = f"You have {len(tasks)} task(s) due soon"

    message = (
        f"Hi {_greeting_name(profile)},\n\n"
        f"These tasks are due soon:\n"
        f"{lines}\n\n"
        f"Thank you,\n"
        f"TaskHub"
    )

    send_mail(
        subject=subject,
        message=message,
        from_email=getattr(settings, "DEFAULT_FROM_EMAIL", None),
        recipient_list=[email],
        fail_silently=True,
    )
    return True
