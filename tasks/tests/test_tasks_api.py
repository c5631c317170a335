from datetime import date, timedelta
from io import StringIO
from unittest.mock import patch

from django.core import mail
from django.core.management import call_command
from django.test import SimpleTestCase, TestCase
from rest_framework import status

from core.constants import COLLECTION_COMPLETED_TASKS, COLLECTION_TASKS, COLLECTION_USERS
from core.store import InMemoryDocumentStore, Query
from core.testing import BackendTestMixin
from projects.services import create_project
from tasks import services


class TaskManagementApiTestCase(BackendTestMixin, TestCase):
    def setUp(self):
        super().setUp()
        token, self.admin = self.sign_up_admin()
        _, self.amy = self.sign_up("amy@example.com", "Amy")
        _, self.bob = self.sign_up("bob@example.com", "Bob")
        self.project = create_project(self.store, "Website", "Relaunch", [self.amy["id"], self.bob["id"]])
        self.other_project = create_project(self.store, "Mobile", "App", [])
        self.login_as(token)

    def task_payload(self, **overrides):
        payload = {
            "title": "Design header",
            "description": "Use the new logo",
            "project_id": self.project["id"],
            "assigned_to": [self.amy["id"]],
            "due_date": "2030-05-01",
        }
        payload.update(overrides)
        return payload

    def test_create_task_defaults(self):
        res = self.client.post("/api/tasks/", self.task_payload(), format="json")

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["meta"]["message"], "Task created successfully")

        task = self.store.get(COLLECTION_TASKS, res.data["data"]["id"])
        self.assertEqual(task["status"], "todo")
        self.assertEqual(task["priority"], "medium")
        self.assertEqual(task["created_by"], "admin")
        self.assertEqual(task["due_date"], "2030-05-01")

    def test_create_task_emails_assignees(self):
        self.client.post("/api/tasks/", self.task_payload(), format="json")

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["amy@example.com"])
        self.assertIn("Design header", mail.outbox[0].subject)

    def test_assignees_can_opt_out_of_emails(self):
        self.store.update(COLLECTION_USERS, self.amy["id"], {"settings.email_notifications": False})

        self.client.post("/api/tasks/", self.task_payload(), format="json")

        self.assertEqual(len(mail.outbox), 0)

    def test_list_filters_by_project(self):
        self.client.post("/api/tasks/", self.task_payload(), format="json")
        self.client.post(
            "/api/tasks/", self.task_payload(title="Splash", project_id=self.other_project["id"]), format="json"
        )

        everything = self.client.get("/api/tasks/").data["data"]
        only_web = self.client.get(f"/api/tasks/?project={self.project['id']}").data["data"]

        self.assertEqual(len(everything["tasks"]), 2)
        self.assertEqual([t["title"] for t in only_web["tasks"]], ["Design header"])
        self.assertEqual(only_web["tasks"][0]["project_name"], "Website")
        self.assertEqual(len(everything["projects"]), 2)
        self.assertEqual(len(everything["users"]), 3)

    def test_update_keeps_status(self):
        task_id = self.client.post("/api/tasks/", self.task_payload(), format="json").data["data"]["id"]
        self.store.update(COLLECTION_TASKS, task_id, {"status": "in-progress"})

        res = self.client.patch(
            f"/api/tasks/{task_id}/", self.task_payload(title="Design footer", priority="high"), format="json"
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        task = self.store.get(COLLECTION_TASKS, task_id)
        self.assertEqual((task["title"], task["priority"], task["status"]), ("Design footer", "high", "in-progress"))
        self.assertTrue(task["updated_at"])

    def test_delete_requires_confirmation(self):
        task_id = self.client.post("/api/tasks/", self.task_payload(), format="json").data["data"]["id"]

        self.assertEqual(self.client.delete(f"/api/tasks/{task_id}/").status_code, 428)
        self.assertEqual(self.client.delete(f"/api/tasks/{task_id}/?confirm=1").status_code, 200)
        self.assertIsNone(self.store.get(COLLECTION_TASKS, task_id))

    def test_bulk_assign_replaces_assignees_with_one_update_per_task(self):
        ids = [
            self.client.post("/api/tasks/", self.task_payload(title=f"T{i}"), format="json").data["data"]["id"]
            for i in range(3)
        ]

        with patch.object(self.store, "update", wraps=self.store.update) as spy:
            res = self.client.post(
                "/api/tasks/bulk-assign/",
                {"task_ids": ids, "user_ids": [self.bob["id"], self.amy["id"]]},
                format="json",
            )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["meta"]["message"], "3 tasks assigned successfully")
        self.assertEqual(spy.call_count, 3)
        for task_id in ids:
            self.assertEqual(
                self.store.get(COLLECTION_TASKS, task_id)["assigned_to"], [self.bob["id"], self.amy["id"]]
            )

    def test_bulk_assign_reports_single_failure_without_rollback(self):
        task_id = self.client.post("/api/tasks/", self.task_payload(), format="json").data["data"]["id"]

        res = self.client.post(
            "/api/tasks/bulk-assign/",
            {"task_ids": [task_id, "missing"], "user_ids": [self.bob["id"]]},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(res.data["errors"]["detail"], "Failed to assign tasks")
        self.assertEqual(self.store.get(COLLECTION_TASKS, task_id)["assigned_to"], [self.bob["id"]])

    def test_bulk_assign_needs_a_selection(self):
        res = self.client.post("/api/tasks/bulk-assign/", {"task_ids": [], "user_ids": []}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)


class StatusChangeTestCase(SimpleTestCase):
    def setUp(self):
        self.store = InMemoryDocumentStore()
        self.task = self.store.add(COLLECTION_TASKS, {"title": "x", "status": "todo", "project_id": "p1"})

    def audit_records(self):
        return self.store.query(Query(COLLECTION_COMPLETED_TASKS))

    def test_in_progress_writes_no_audit_record(self):
        task = services.change_task_status(self.store, self.task["id"], "in-progress", "u1", "p1")

        self.assertEqual(task["status"], "in-progress")
        self.assertNotIn("completed_at", task)
        self.assertEqual(self.audit_records(), [])

    def test_completed_writes_exactly_one_audit_record(self):
        task = services.change_task_status(self.store, self.task["id"], "completed", "u1", "p1")

        records = self.audit_records()
        self.assertEqual(len(records), 1)
        self.assertEqual(
            {k: records[0][k] for k in ("task_id", "user_id", "project_id", "notes")},
            {"task_id": self.task["id"], "user_id": "u1", "project_id": "p1", "notes": ""},
        )
        self.assertEqual(records[0]["completed_at"], task["completed_at"])

    def test_transitions_are_not_validated(self):
        services.change_task_status(self.store, self.task["id"], "completed", "u1", "p1")
        task = services.change_task_status(self.store, self.task["id"], "in-progress", "u1", "p1")

        self.assertEqual(task["status"], "in-progress")


class ReminderTestCase(BackendTestMixin, TestCase):
    def setUp(self):
        super().setUp()
        _, self.amy = self.sign_up("amy@example.com", "Amy")
        self.today = date(2030, 1, 10)

    def add_task(self, title, due, status_="todo"):
        return self.store.add(COLLECTION_TASKS, {
            "title": title,
            "status": status_,
            "assigned_to": [self.amy["id"]],
            "due_date": due.isoformat(),
        })

    def test_tasks_due_soon_skips_completed_and_far_off(self):
        tasks = [
            self.add_task("soon", self.today + timedelta(days=1)),
            self.add_task("done", self.today, status_="completed"),
            self.add_task("later", self.today + timedelta(days=9)),
            self.add_task("overdue", self.today - timedelta(days=1)),
        ]

        due = services.tasks_due_soon(tasks, days=2, today=self.today)

        self.assertEqual([t["title"] for t in due], ["soon"])

    def test_send_due_reminders_respects_preference(self):
        self.add_task("soon", self.today)
        self.assertEqual(services.send_due_reminders(self.store, days=1, today=self.today), 1)
        self.assertEqual(mail.outbox[0].to, ["amy@example.com"])

        self.store.update(COLLECTION_USERS, self.amy["id"], {"settings.task_reminders": False})
        self.assertEqual(services.send_due_reminders(self.store, days=1, today=self.today), 0)

    def test_management_command(self):
        self.store.add(COLLECTION_TASKS, {
            "title": "tomorrow",
            "status": "in-progress",
            "assigned_to": [self.amy["id"]],
            "due_date": (date.today() + timedelta(days=1)).isoformat(),
        })
        out = StringIO()

        call_command("send_task_reminders", "--days", "2", stdout=out)

        self.assertIn("Sent 1 reminder", out.getvalue())
        self.assertEqual(len(mail.outbox), 1)
