from django.test import SimpleTestCase, TestCase
from rest_framework import status

from core.constants import COLLECTION_COMPLETED_TASKS, COLLECTION_TASKS
from core.store import Query
from core.testing import BackendTestMixin
from projects.services import create_project
from ux.services.analytics import completion_rate, project_task_stats, user_task_stats


class CompletionRateTestCase(SimpleTestCase):
    def test_zero_tasks_is_zero(self):
        self.assertEqual(completion_rate(0, 0), 0)

    def test_rounds_half_up(self):
        self.assertEqual(completion_rate(1, 8), 13)  # 12.5
        self.assertEqual(completion_rate(3, 8), 38)  # 37.5
        self.assertEqual(completion_rate(1, 3), 33)
        self.assertEqual(completion_rate(2, 3), 67)
        self.assertEqual(completion_rate(4, 4), 100)

    def test_per_user_and_per_project_rows(self):
        users = [{"id": "u1", "display_name": "Ann"}, {"id": "u2", "display_name": "Bob"}]
        projects = [{"id": "p1", "name": "Web"}, {"id": "p2", "name": "Empty"}]
        tasks = [
            {"id": "t1", "project_id": "p1", "assigned_to": ["u1"], "status": "completed"},
            {"id": "t2", "project_id": "p1", "assigned_to": ["u1", "u2"], "status": "todo"},
            {"id": "t3", "project_id": "p1", "assigned_to": ["u1"], "status": "in-progress"},
        ]

        self.assertEqual(user_task_stats(users, tasks), [
            {"id": "u1", "name": "Ann", "completed": 1, "total": 3, "rate": 33},
            {"id": "u2", "name": "Bob", "completed": 0, "total": 1, "rate": 0},
        ])
        self.assertEqual(project_task_stats(projects, tasks), [
            {"id": "p1", "name": "Web", "completed": 1, "total": 3, "rate": 33},
            {"id": "p2", "name": "Empty", "completed": 0, "total": 0, "rate": 0},
        ])


class UxApiTestCase(BackendTestMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.admin_token, self.admin = self.sign_up_admin()
        self.amy_token, self.amy = self.sign_up("amy@example.com", "Amy")
        self.project = create_project(self.store, "Website", "Relaunch", [self.amy["id"]])

    def add_task(self, title, status_="todo", project_id=None, assigned_to=None):
        return self.store.add(COLLECTION_TASKS, {
            "title": title,
            "status": status_,
            "priority": "medium",
            "project_id": project_id or self.project["id"],
            "assigned_to": assigned_to if assigned_to is not None else [self.amy["id"]],
        })

    def test_analytics_totals(self):
        for i in range(7):
            self.add_task(f"open {i}")
        self.add_task("finished", "completed")
        self.login_as(self.admin_token)

        res = self.client.get("/api/ux/analytics/")

        data = res.data["data"]
        self.assertEqual(data["totals"]["tasks"], 8)
        self.assertEqual(data["totals"]["completion_rate"], 13)
        amy_row = next(row for row in data["users"] if row["id"] == self.amy["id"])
        self.assertEqual(amy_row["rate"], 13)
        self.assertEqual(data["projects"][0]["rate"], 13)

    def test_user_dashboard_counts(self):
        self.add_task("a")
        self.add_task("b", "in-progress")
        self.add_task("c", "completed")
        self.add_task("orphan", project_id="gone")
        self.add_task("not mine", assigned_to=[self.admin["id"]])
        self.login_as(self.amy_token)

        res = self.client.get("/api/ux/me/dashboard/")

        data = res.data["data"]
        self.assertEqual(len(data["projects"]), 1)
        self.assertEqual(data["projects"][0]["stats"], {"active": 1, "in_progress": 1, "completed": 1})
        self.assertEqual(data["stats"]["tasks"], 4)
        self.assertEqual(len(data["recent_activity"]), 4)
        orphan = next(t for t in data["recent_activity"] if t["title"] == "orphan")
        self.assertEqual(orphan["project_name"], "Unknown Project")

    def test_recent_activity_is_capped_at_five(self):
        for i in range(7):
            self.add_task(f"t{i}")
        self.login_as(self.amy_token)

        res = self.client.get("/api/ux/me/dashboard/")

        self.assertEqual(len(res.data["data"]["recent_activity"]), 5)

    def test_project_detail_groups_my_tasks(self):
        self.add_task("a")
        self.add_task("b", "completed")
        self.add_task("someone else's", assigned_to=[self.admin["id"]])
        self.login_as(self.amy_token)

        res = self.client.get(f"/api/ux/projects/{self.project['id']}/")

        data = res.data["data"]
        self.assertEqual(data["project"]["name"], "Website")
        self.assertEqual(data["stats"], {"total": 2, "todo": 1, "in_progress": 0, "completed": 1})
        self.assertEqual([t["title"] for t in data["tasks"]["todo"]], ["a"])
        self.assertEqual(data["tasks"]["in-progress"], [])

    def test_missing_project_is_null(self):
        self.login_as(self.amy_token)

        res = self.client.get("/api/ux/projects/nope/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIsNone(res.data["data"]["project"])

    def test_status_change_flow(self):
        task = self.add_task("a")
        self.login_as(self.amy_token)
        url = f"/api/ux/projects/{self.project['id']}/tasks/{task['id']}/status/"

        res = self.client.post(url, {"status": "in-progress"}, format="json")
        self.assertEqual(res.data["meta"]["message"], "Task marked as in-progress")
        self.assertEqual(self.store.query(Query(COLLECTION_COMPLETED_TASKS)), [])

        res = self.client.post(url, {"status": "completed"}, format="json")
        self.assertEqual(res.data["data"]["status"], "completed")
        audit = self.store.query(Query(COLLECTION_COMPLETED_TASKS))
        self.assertEqual(len(audit), 1)
        self.assertEqual(audit[0]["user_id"], self.amy["id"])

    def test_status_change_requires_visible_task(self):
        task = self.add_task("admin only", assigned_to=[self.admin["id"]])
        self.login_as(self.amy_token)

        res = self.client.post(
            f"/api/ux/projects/{self.project['id']}/tasks/{task['id']}/status/",
            {"status": "completed"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_status_change_rejects_todo(self):
        task = self.add_task("a")
        self.login_as(self.amy_token)

        res = self.client.post(
            f"/api/ux/projects/{self.project['id']}/tasks/{task['id']}/status/", {"status": "todo"}, format="json"
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
