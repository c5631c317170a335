# ux/views/routes.py

from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from core.constants import ROLE_CHOICES
from core.permissions import decision_for_request
from core.responses import success_response


class RouteResolveView(APIView):
    """
    GET /api/ux/routes/resolve/?role=<admin|user>

    What the client should do for a protected screen: render it, keep
    showing a loader, or redirect (login or the caller's own dashboard).
    """
    permission_classes = [AllowAny]

    def get(self, request):
        role = request.query_params.get("role") or None
        if role not in dict(ROLE_CHOICES):
            role = None

        decision = decision_for_request(request, role)
        return success_response({
            "action": decision.action,
            "redirect_to": decision.redirect_to,
            "allowed": decision.allowed,
        })
