# core/responses.py

from rest_framework import status as http_status
from rest_framework.response import Response


def success_response(data=None, message=None, status=http_status.HTTP_200_OK):
    """
    Envelope for successful actions. ``message`` is the user-facing
    confirmation ("Task created successfully").
    """
    meta = {"success": True}
    if message:
        meta["message"] = message
    return Response({"meta": meta, "data": data}, status=status)


def is_confirmed(request) -> bool:
    """Destructive actions must be confirmed explicitly (?confirm=true)."""
    value = request.query_params.get("confirm")
    if value is None and hasattr(request, "data") and isinstance(request.data, dict):
        value = request.data.get("confirm")
    return str(value).lower() in ("1", "true", "yes")
