from django.core.management.base import BaseCommand

from core.backends import get_document_store
from tasks.services import send_due_reminders


class Command(BaseCommand):
    help = "E-mails assignees about their unfinished tasks that are due soon"

    def add_arguments(self, parser):
        parser.add_argument("--days", type=int, default=1, help="Look-ahead window in days (default 1)")

    def handle(self, *args, **options):
        days = options["days"]
        self.stdout.write(f"Checking tasks due within {days} day(s)...")
        sent = send_due_reminders(get_document_store(), days=days)
        self.stdout.write(self.style.SUCCESS(f"Sent {sent} reminder e-mail(s)."))
