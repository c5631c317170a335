# ux/views/project_detail.py

import logging

from rest_framework.exceptions import NotFound
from rest_framework.views import APIView

from core.backends import get_document_store
from core.exceptions import ActionFailed, StoreError
from core.permissions import RouteGuard
from core.responses import success_response
from projects.serializers import ProjectSerializer
from tasks.serializers import StatusChangeSerializer, TaskSerializer
from tasks.services import change_task_status

from ux.services.project_detail import ProjectDetailBoard

logger = logging.getLogger("taskhub.tasks")


class ProjectDetailView(APIView):
    """
    GET /api/ux/projects/<project_id>/

    The caller's tasks in one project, grouped by status. ``project`` is
    null when the record does not exist.
    """
    permission_classes = [RouteGuard]

    def get(self, request, project_id):
        with ProjectDetailBoard(get_document_store(), project_id, request.user.uid) as board:
            project = board.project
            data = {
                "project": ProjectSerializer(project).data if project else None,
                "stats": board.stats(),
                "tasks": {
                    group: TaskSerializer(tasks, many=True).data
                    for group, tasks in board.grouped().items()
                },
            }
        return success_response(data)


class TaskStatusView(APIView):
    """
    POST /api/ux/projects/<project_id>/tasks/<task_id>/status/
    Body: {"status": "in-progress" | "completed"}
    """
    permission_classes = [RouteGuard]

    def post(self, request, project_id, task_id):
        serializer = StatusChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data["status"]

        store = get_document_store()
        with ProjectDetailBoard(store, project_id, request.user.uid) as board:
            if board.find_task(task_id) is None:
                raise NotFound("Task not found")

        try:
            task = change_task_status(store, task_id, new_status, request.user.uid, project_id)
        except StoreError as e:
            logger.error(f"Failed to update task {task_id} status: {e}")
            raise ActionFailed("Failed to update task status")

        return success_response(TaskSerializer(task).data, message=f"Task marked as {new_status}")
