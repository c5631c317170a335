# core/views.py

import time
import uuid

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core.backends import get_document_store
from core.constants import COLLECTION_USERS
from core.exceptions import StoreError


class HealthCheckView(APIView):
    """
    Lightweight health endpoint for uptime checks.
    - Checks document-store connectivity
    - Returns env, backend and simple latency
    """
    permission_classes = [AllowAny]
    authentication_classes = []  # public endpoint

    def get(self, request, *args, **kwargs):
        start = time.time()

        store_ok = True
        try:
            get_document_store().get(COLLECTION_USERS, str(uuid.UUID(int=0)))
        except (StoreError, ImproperlyConfigured):
            store_ok = False

        duration_ms = int((time.time() - start) * 1000)

        return Response(
            {
                "status": "ok" if store_ok else "degraded",
                "store": store_ok,
                "backend": settings.TASKHUB_BACKEND,
                "env": getattr(settings, "ENV", "unknown"),
                "latency_ms": duration_ms,
            }
        )
