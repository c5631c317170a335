# ux/views/analytics.py

from rest_framework.views import APIView

from core.backends import get_document_store
from core.permissions import AdminRoute
from core.responses import success_response

from ux.services.analytics import AnalyticsBoard


class AnalyticsView(APIView):
    """GET /api/ux/analytics/ (admin)"""
    permission_classes = [AdminRoute]

    def get(self, request):
        with AnalyticsBoard(get_document_store()) as board:
            data = board.summary()
        return success_response(data)
