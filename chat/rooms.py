# chat/rooms.py

from core.live import Board

from .services import direct_room_query, filter_direct, project_room_query


class ProjectChatRoom(Board):
    def __init__(self, store, project_id, on_change=None):
        super().__init__(store, on_change=on_change)
        self.project_id = project_id
        self.feed = self.watch(project_room_query(project_id))

    def messages(self):
        return list(self.feed.items)


class DirectChatRoom(Board):
    """Conversation between ``user_id`` and ``other_id``."""

    def __init__(self, store, user_id, other_id, on_change=None):
        super().__init__(store, on_change=on_change)
        self.user_id = user_id
        self.other_id = other_id
        self.feed = self.watch(direct_room_query())

    def messages(self):
        return filter_direct(self.feed.items, self.user_id, self.other_id)
