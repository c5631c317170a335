# users/views.py - admin user management + self-service settings

import logging

from rest_framework import status, viewsets
from rest_framework.views import APIView

from core.backends import get_document_store
from core.exceptions import ActionFailed, ConfirmationRequired, StoreError
from core.permissions import AdminRoute, RouteGuard
from core.responses import is_confirmed, success_response
from users import services
from users.boards import UserManagementBoard
from users.serializers import (
    CreateUserSerializer,
    ProfileSerializer,
    SettingsSerializer,
    UpdateUserSerializer,
)

logger = logging.getLogger("taskhub.users")


class UserManagementViewSet(viewsets.ViewSet):
    """
    Admin-only user table.

    GET    /api/users/
    POST   /api/users/
    PATCH  /api/users/{uid}/
    DELETE /api/users/{uid}/?confirm=true
    """
    permission_classes = [AdminRoute]

    def list(self, request):
        with UserManagementBoard(get_document_store()) as board:
            data = ProfileSerializer(board.rows(), many=True).data
        return success_response(data)

    def create(self, request):
        serializer = CreateUserSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        identity = request.user.session_provider.identity
        try:
            profile = services.create_user(get_document_store(), identity, **serializer.validated_data)
        except StoreError as e:
            logger.error(f"Failed to create user: {e}")
            raise ActionFailed("Failed to create user")

        return success_response(
            ProfileSerializer(profile).data,
            message="User created successfully",
            status=status.HTTP_201_CREATED,
        )

    def partial_update(self, request, pk=None):
        serializer = UpdateUserSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            profile = services.update_user(get_document_store(), pk, **serializer.validated_data)
        except StoreError as e:
            logger.error(f"Failed to update user {pk}: {e}")
            raise ActionFailed("Failed to update user")

        return success_response(ProfileSerializer(profile).data, message="User updated successfully")

    def destroy(self, request, pk=None):
        if not is_confirmed(request):
            raise ConfirmationRequired("Are you sure you want to delete this user? Repeat with confirm=true.")

        try:
            services.delete_user(get_document_store(), pk)
        except StoreError as e:
            logger.error(f"Failed to delete user {pk}: {e}")
            raise ActionFailed("Failed to delete user")

        return success_response(message="User deleted successfully")


class MySettingsView(APIView):
    """
    GET /api/users/me/settings/
    PUT /api/users/me/settings/
    Body: {display_name, email?, new_password?, email_notifications, task_reminders, theme}
    """
    permission_classes = [RouteGuard]

    def get(self, request):
        profile = request.user.profile
        return success_response({
            "display_name": profile.get("display_name", ""),
            "email": request.user.email,
            "role": profile.get("role"),
            "settings": services.effective_settings(profile),
        })

    def put(self, request):
        serializer = SettingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        provider = request.user.session_provider
        try:
            profile = services.save_settings(
                get_document_store(), provider.identity, provider.session, serializer.validated_data
            )
        except StoreError as e:
            logger.error(f"Failed to update settings: {e}")
            raise ActionFailed("Failed to update settings")

        return success_response(ProfileSerializer(profile).data, message="Settings updated successfully")


class ThemeToggleView(APIView):
    """POST /api/users/me/theme/toggle/ flips light <-> dark."""
    permission_classes = [RouteGuard]

    def post(self, request):
        try:
            theme = services.toggle_theme(get_document_store(), request.user.profile)
        except StoreError as e:
            logger.error(f"Failed to toggle theme: {e}")
            raise ActionFailed("Failed to update theme")

        return success_response({"theme": theme})
