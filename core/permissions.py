# core/permissions.py
"""
Route guard.

``resolve_route`` is a pure function of (session, profile, loading,
required_role). The DRF permission classes below apply it to every API
route and turn a redirect into a ``RouteRedirect`` error that carries the
target path, so a client can navigate there.
"""
from dataclasses import dataclass
from typing import Optional

from rest_framework import status
from rest_framework.permissions import BasePermission

from core.constants import (
    ADMIN_DASHBOARD_PATH,
    LOGIN_PATH,
    ROLE_ADMIN,
    ROLE_USER,
    USER_DASHBOARD_PATH,
)
from core.exceptions import RouteRedirect

ACTION_LOADING = "loading"
ACTION_REDIRECT = "redirect"
ACTION_RENDER = "render"


@dataclass(frozen=True)
class RouteDecision:
    action: str
    redirect_to: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.action == ACTION_RENDER


def dashboard_for(role: Optional[str]) -> str:
    return ADMIN_DASHBOARD_PATH if role == ROLE_ADMIN else USER_DASHBOARD_PATH


def resolve_route(session, profile, loading: bool, required_role: Optional[str] = None) -> RouteDecision:
    if loading:
        return RouteDecision(ACTION_LOADING)

    if session is None or profile is None:
        return RouteDecision(ACTION_REDIRECT, LOGIN_PATH)

    role = profile.get("role")
    if required_role and role != required_role:
        return RouteDecision(ACTION_REDIRECT, dashboard_for(role))

    return RouteDecision(ACTION_RENDER)


def decision_for_request(request, required_role: Optional[str] = None) -> RouteDecision:
    provider = getattr(request.user, "session_provider", None)
    if provider is None:
        return resolve_route(None, None, False, required_role)
    return resolve_route(provider.session, provider.profile, provider.loading, required_role)


# ---- Permission classes -----------------------------------------------


class RouteGuard(BasePermission):
    """Any signed-in profile; subclasses pin a role."""

    required_role = None

    def has_permission(self, request, view):
        decision = decision_for_request(request, self.required_role)

        if decision.allowed:
            return True

        if decision.action == ACTION_LOADING:
            raise RouteRedirect(LOGIN_PATH, status.HTTP_503_SERVICE_UNAVAILABLE, "Session is still loading")

        code = status.HTTP_401_UNAUTHORIZED if decision.redirect_to == LOGIN_PATH else status.HTTP_403_FORBIDDEN
        raise RouteRedirect(decision.redirect_to, code)


class AdminRoute(RouteGuard):
    required_role = ROLE_ADMIN


class UserRoute(RouteGuard):
    required_role = ROLE_USER
