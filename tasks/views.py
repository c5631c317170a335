import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action

from core.backends import get_document_store
from core.exceptions import ActionFailed, ConfirmationRequired, StoreError
from core.permissions import AdminRoute
from core.responses import is_confirmed, success_response

from . import services
from .boards import ALL_PROJECTS, TaskManagementBoard
from .serializers import BulkAssignSerializer, TaskInputSerializer, TaskSerializer

logger = logging.getLogger("taskhub.tasks")


class TaskManagementViewSet(viewsets.ViewSet):
    """
    Admin API: Manage Tasks.

    GET    /api/tasks/?project=<id|all>
    POST   /api/tasks/
    PATCH  /api/tasks/{id}/
    DELETE /api/tasks/{id}/?confirm=true
    POST   /api/tasks/bulk-assign/             {task_ids, user_ids}
    """
    permission_classes = [AdminRoute]

    def list(self, request):
        project_filter = request.query_params.get("project", ALL_PROJECTS)

        with TaskManagementBoard(get_document_store()) as board:
            context = {"project_names": board.project_names()}
            data = {
                "filter": project_filter,
                "tasks": TaskSerializer(board.filtered(project_filter), many=True, context=context).data,
                "projects": board.project_options(),
                "users": board.user_options(),
            }
        return success_response(data)

    def create(self, request):
        serializer = TaskInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            task = services.create_task(get_document_store(), **serializer.validated_data)
        except StoreError as e:
            logger.error(f"Failed to create task: {e}")
            raise ActionFailed("Failed to create task")

        return success_response(
            TaskSerializer(task).data,
            message="Task created successfully",
            status=status.HTTP_201_CREATED,
        )

    def partial_update(self, request, pk=None):
        serializer = TaskInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            task = services.update_task(get_document_store(), pk, **serializer.validated_data)
        except StoreError as e:
            logger.error(f"Failed to update task {pk}: {e}")
            raise ActionFailed("Failed to update task")

        return success_response(TaskSerializer(task).data, message="Task updated successfully")

    def destroy(self, request, pk=None):
        if not is_confirmed(request):
            raise ConfirmationRequired("Are you sure you want to delete this task? Repeat with confirm=true.")

        try:
            services.delete_task(get_document_store(), pk)
        except StoreError as e:
            logger.error(f"Failed to delete task {pk}: {e}")
            raise ActionFailed("Failed to delete task")

        return success_response(message="Task deleted successfully")

    @action(detail=False, methods=["post"], url_path="bulk-assign")
    def bulk_assign(self, request):
        serializer = BulkAssignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            count = services.bulk_assign(
                get_document_store(),
                serializer.validated_data["task_ids"],
                serializer.validated_data["user_ids"],
            )
        except services.BulkAssignFailed:
            raise ActionFailed("Failed to assign tasks")

        return success_response({"assigned": count}, message=f"{count} tasks assigned successfully")
