from django.test import SimpleTestCase

from core.exceptions import DocumentNotFound
from core.live import Board, LiveCollection
from core.store import InMemoryDocumentStore, Query


class InMemoryStoreTestCase(SimpleTestCase):
    def setUp(self):
        self.store = InMemoryDocumentStore()

    def test_add_assigns_id_and_get_returns_copy(self):
        doc = self.store.add("tasks", {"title": "Write report"})
        self.assertTrue(doc["id"])

        fetched = self.store.get("tasks", doc["id"])
        self.assertEqual(fetched["title"], "Write report")

        fetched["title"] = "mutated"
        self.assertEqual(self.store.get("tasks", doc["id"])["title"], "Write report")

    def test_get_missing_returns_none(self):
        self.assertIsNone(self.store.get("tasks", "nope"))

    def test_update_merges_dotted_keys(self):
        self.store.set("users", "u1", {"display_name": "Ann", "settings": {"theme": "light", "task_reminders": False}})
        updated = self.store.update("users", "u1", {"settings.theme": "dark"})

        self.assertEqual(updated["settings"], {"theme": "dark", "task_reminders": False})

    def test_update_missing_document_raises(self):
        with self.assertRaises(DocumentNotFound):
            self.store.update("tasks", "missing", {"status": "todo"})

    def test_delete_removes_document(self):
        doc = self.store.add("projects", {"name": "Alpha"})
        self.store.delete("projects", doc["id"])
        self.assertIsNone(self.store.get("projects", doc["id"]))

    def test_query_filters_and_orders(self):
        self.store.add("project_chats", {"project_id": "p1", "timestamp": "2024-01-01T10:00:02.000000+00:00"})
        self.store.add("project_chats", {"project_id": "p2", "timestamp": "2024-01-01T10:00:01.000000+00:00"})
        self.store.add("project_chats", {"project_id": "p1", "timestamp": "2024-01-01T10:00:00.000000+00:00"})

        rows = self.store.query(Query("project_chats").where("project_id", "==", "p1").order_by("timestamp"))

        self.assertEqual(len(rows), 2)
        self.assertLess(rows[0]["timestamp"], rows[1]["timestamp"])

    def test_order_keeps_falsy_values_after_missing_ones(self):
        for title, position in [("c", 2), ("a", 0), ("b", 1)]:
            self.store.add("tasks", {"title": title, "position": position})
        self.store.add("tasks", {"title": "unranked"})
        self.store.add("tasks", {"title": "also unranked"})

        rows = self.store.query(Query("tasks").order_by("position"))

        self.assertEqual([r["title"] for r in rows][2:], ["a", "b", "c"])
        self.assertEqual({r["title"] for r in rows[:2]}, {"unranked", "also unranked"})

    def test_array_contains_filter(self):
        self.store.add("tasks", {"title": "a", "assigned_to": ["u1", "u2"]})
        self.store.add("tasks", {"title": "b", "assigned_to": ["u2"]})
        self.store.add("tasks", {"title": "c"})

        rows = self.store.query(Query("tasks").where("assigned_to", "array-contains", "u1"))
        self.assertEqual([r["title"] for r in rows], ["a"])

    def test_unsupported_operator_rejected(self):
        with self.assertRaises(ValueError):
            Query("tasks").where("priority", ">", "low")


class SubscriptionTestCase(SimpleTestCase):
    def setUp(self):
        self.store = InMemoryDocumentStore()
        self.snapshots = []

    def test_subscribe_delivers_initial_and_later_snapshots(self):
        self.store.add("tasks", {"title": "first"})
        sub = self.store.subscribe(Query("tasks"), self.snapshots.append)

        self.store.add("tasks", {"title": "second"})

        self.assertEqual([len(s) for s in self.snapshots], [1, 2])
        sub.unsubscribe()

    def test_writes_to_other_collections_do_not_notify(self):
        sub = self.store.subscribe(Query("tasks"), self.snapshots.append)
        self.store.add("projects", {"name": "Alpha"})

        self.assertEqual(len(self.snapshots), 1)
        sub.unsubscribe()

    def test_unsubscribe_is_idempotent_and_stops_delivery(self):
        sub = self.store.subscribe(Query("tasks"), self.snapshots.append)
        sub.unsubscribe()
        sub.unsubscribe()

        self.store.add("tasks", {"title": "late"})

        self.assertFalse(sub.active)
        self.assertEqual(len(self.snapshots), 1)
        self.assertEqual(self.store.listener_count, 0)

    def test_live_collection_mirrors_query(self):
        with LiveCollection(self.store, Query("tasks").where("status", "==", "todo")) as live:
            self.store.add("tasks", {"status": "todo"})
            self.store.add("tasks", {"status": "completed"})
            self.assertEqual(len(live.items), 1)

        self.assertFalse(live.is_open)

    def test_board_releases_every_subscription(self):
        board = Board(self.store)
        board.watch(Query("tasks"))
        board.watch(Query("projects"))

        with board:
            self.assertTrue(board.is_open)
            self.assertEqual(self.store.listener_count, 2)

        self.assertEqual(self.store.listener_count, 0)

    def test_board_on_change_fires_after_refresh(self):
        changes = []
        board = Board(self.store, on_change=changes.append)
        board.watch(Query("tasks"))

        with board:
            self.store.add("tasks", {"title": "x"})

        # initial snapshot + one refresh
        self.assertEqual(len(changes), 2)
        self.assertIs(changes[0], board)
