# chat/views.py - project rooms, direct messages and their event streams

import json
import logging
import queue

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.http import StreamingHttpResponse
from rest_framework import status
from rest_framework.renderers import BaseRenderer
from rest_framework.views import APIView

from core.backends import get_document_store
from core.exceptions import ActionFailed, StoreError
from core.permissions import RouteGuard
from core.responses import success_response

from . import services
from .rooms import DirectChatRoom, ProjectChatRoom
from .serializers import MessageSerializer, SendMessageSerializer
from .throttles import ChatSendThrottle

logger = logging.getLogger("taskhub.chat")


class EventStreamRenderer(BaseRenderer):
    media_type = "text/event-stream"
    format = "event-stream"
    charset = "utf-8"

    def render(self, data, accepted_media_type=None, renderer_context=None):
        # Only error envelopes reach here; streams bypass rendering
        if isinstance(data, (str, bytes)):
            return data
        return _event(data)


def _event(payload) -> str:
    return f"data: {json.dumps(payload, cls=DjangoJSONEncoder)}\n\n"


def stream_room(make_room):
    """
    Yield one SSE event per room snapshot, with comment heartbeats while
    idle. The room's subscriptions are released when the client goes away.
    """
    updates = queue.Queue()
    room = make_room(lambda board: updates.put(board.messages()))
    heartbeat = settings.TASKHUB_CHAT_HEARTBEAT_SECONDS

    # Opening delivers the current snapshot through the queue
    room.open()
    try:
        while True:
            try:
                snapshot = updates.get(timeout=heartbeat)
            except queue.Empty:
                yield ": keep-alive\n\n"
                continue
            yield _event(MessageSerializer(snapshot, many=True).data)
    finally:
        room.close()


def _stream_response(make_room):
    response = StreamingHttpResponse(stream_room(make_room), content_type="text/event-stream")
    response["Cache-Control"] = "no-cache"
    response["X-Accel-Buffering"] = "no"
    return response


class ProjectMessagesView(APIView):
    """
    GET  /api/chat/projects/<project_id>/messages/
    POST /api/chat/projects/<project_id>/messages/   {message}

    The admin-wide room is project id "general".
    """
    permission_classes = [RouteGuard]
    throttle_classes = [ChatSendThrottle]
    throttle_scope = "chat-send"

    def get(self, request, project_id):
        with ProjectChatRoom(get_document_store(), project_id) as room:
            data = MessageSerializer(room.messages(), many=True).data
        return success_response(data)

    def post(self, request, project_id):
        serializer = SendMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            record = services.send_project_message(
                get_document_store(),
                project_id,
                request.user.uid,
                request.user.display_name,
                serializer.validated_data["message"],
            )
        except StoreError as e:
            logger.error(f"Failed to send message to project {project_id}: {e}")
            raise ActionFailed("Failed to send message")

        return success_response(MessageSerializer(record).data, status=status.HTTP_201_CREATED)


class DirectMessagesView(APIView):
    """
    GET  /api/chat/direct/<receiver_id>/messages/
    POST /api/chat/direct/<receiver_id>/messages/    {message}
    """
    permission_classes = [RouteGuard]
    throttle_classes = [ChatSendThrottle]
    throttle_scope = "chat-send"

    def get(self, request, receiver_id):
        with DirectChatRoom(get_document_store(), request.user.uid, receiver_id) as room:
            data = MessageSerializer(room.messages(), many=True).data
        return success_response(data)

    def post(self, request, receiver_id):
        serializer = SendMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            record = services.send_direct_message(
                get_document_store(),
                receiver_id,
                request.user.uid,
                request.user.display_name,
                serializer.validated_data["message"],
            )
        except StoreError as e:
            logger.error(f"Failed to send direct message to {receiver_id}: {e}")
            raise ActionFailed("Failed to send message")

        return success_response(MessageSerializer(record).data, status=status.HTTP_201_CREATED)


class ProjectStreamView(APIView):
    """GET /api/chat/projects/<project_id>/stream/ (text/event-stream)"""
    permission_classes = [RouteGuard]
    renderer_classes = [EventStreamRenderer]

    def get(self, request, project_id):
        store = get_document_store()
        return _stream_response(lambda on_change: ProjectChatRoom(store, project_id, on_change=on_change))


class DirectStreamView(APIView):
    """GET /api/chat/direct/<receiver_id>/stream/ (text/event-stream)"""
    permission_classes = [RouteGuard]
    renderer_classes = [EventStreamRenderer]

    def get(self, request, receiver_id):
        store, uid = get_document_store(), request.user.uid
        return _stream_response(lambda on_change: DirectChatRoom(store, uid, receiver_id, on_change=on_change))
