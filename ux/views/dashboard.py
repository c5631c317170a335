# ux/views/dashboard.py

from rest_framework.views import APIView

from core.backends import get_document_store
from core.permissions import UserRoute
from core.responses import success_response

from ux.services.dashboard import UserDashboardBoard


class UserDashboardView(APIView):
    """GET /api/ux/me/dashboard/ (user role)"""
    permission_classes = [UserRoute]

    def get(self, request):
        with UserDashboardBoard(get_document_store(), request.user.uid) as board:
            data = board.summary()
        return success_response(data)
