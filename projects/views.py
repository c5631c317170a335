import logging

from rest_framework import status, viewsets

from core.backends import get_document_store
from core.exceptions import ActionFailed, ConfirmationRequired, StoreError
from core.permissions import AdminRoute
from core.responses import is_confirmed, success_response

from . import services
from .boards import ProjectManagementBoard
from .serializers import ProjectInputSerializer, ProjectSerializer

logger = logging.getLogger("taskhub.projects")


class ProjectManagementViewSet(viewsets.ViewSet):
    """
    Admin API: Manage Projects.

    GET    /api/projects/                      projects + member picker options
    POST   /api/projects/
    PATCH  /api/projects/{id}/
    DELETE /api/projects/{id}/?confirm=true
    """
    permission_classes = [AdminRoute]

    def list(self, request):
        with ProjectManagementBoard(get_document_store()) as board:
            data = {
                "projects": ProjectSerializer(board.projects.items, many=True).data,
                "users": board.member_options(),
            }
        return success_response(data)

    def create(self, request):
        serializer = ProjectInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            project = services.create_project(get_document_store(), **serializer.validated_data)
        except StoreError as e:
            logger.error(f"Failed to create project: {e}")
            raise ActionFailed("Failed to create project")

        return success_response(
            ProjectSerializer(project).data,
            message="Project created successfully",
            status=status.HTTP_201_CREATED,
        )

    def partial_update(self, request, pk=None):
        serializer = ProjectInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            project = services.update_project(get_document_store(), pk, **serializer.validated_data)
        except StoreError as e:
            logger.error(f"Failed to update project {pk}: {e}")
            raise ActionFailed("Failed to update project")

        return success_response(ProjectSerializer(project).data, message="Project updated successfully")

    def destroy(self, request, pk=None):
        if not is_confirmed(request):
            raise ConfirmationRequired("Are you sure you want to delete this project? Repeat with confirm=true.")

        try:
            services.delete_project(get_document_store(), pk)
        except StoreError as e:
            logger.error(f"Failed to delete project {pk}: {e}")
            raise ActionFailed("Failed to delete project")

        return success_response(message="Project deleted successfully")
