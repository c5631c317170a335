from django.test import SimpleTestCase, TestCase
from rest_framework import status

from core.constants import ADMIN_DASHBOARD_PATH, LOGIN_PATH, USER_DASHBOARD_PATH
from core.identity import AuthSession
from core.permissions import resolve_route
from core.testing import BackendTestMixin


class ResolveRouteTestCase(SimpleTestCase):
    def setUp(self):
        self.session = AuthSession(uid="u1", email="u1@example.com")

    def test_loading_shows_loader(self):
        decision = resolve_route(None, None, True, "admin")
        self.assertEqual(decision.action, "loading")
        self.assertFalse(decision.allowed)

    def test_signed_out_goes_to_login(self):
        decision = resolve_route(None, None, False, "user")
        self.assertEqual(decision.redirect_to, LOGIN_PATH)

    def test_session_without_profile_goes_to_login(self):
        decision = resolve_route(self.session, None, False)
        self.assertEqual(decision.redirect_to, LOGIN_PATH)

    def test_user_on_admin_route_goes_to_user_dashboard(self):
        decision = resolve_route(self.session, {"role": "user"}, False, "admin")
        self.assertEqual(decision.redirect_to, USER_DASHBOARD_PATH)

    def test_admin_on_user_route_goes_to_admin_dashboard(self):
        decision = resolve_route(self.session, {"role": "admin"}, False, "user")
        self.assertEqual(decision.redirect_to, ADMIN_DASHBOARD_PATH)

    def test_matching_role_renders(self):
        self.assertTrue(resolve_route(self.session, {"role": "admin"}, False, "admin").allowed)
        self.assertTrue(resolve_route(self.session, {"role": "user"}, False).allowed)


class RouteGuardApiTestCase(BackendTestMixin, TestCase):
    def test_anonymous_request_is_sent_to_login(self):
        res = self.client.get("/api/users/")

        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(res.data["success"])
        self.assertEqual(res.data["errors"]["redirect_to"], LOGIN_PATH)

    def test_user_on_admin_route_is_redirected(self):
        token, _ = self.sign_up("member@example.com", "Member")
        self.login_as(token)

        res = self.client.get("/api/tasks/")

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(res.data["errors"]["redirect_to"], USER_DASHBOARD_PATH)

    def test_admin_on_user_route_is_redirected(self):
        token, _ = self.sign_up_admin()
        self.login_as(token)

        res = self.client.get("/api/ux/me/dashboard/")

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(res.data["errors"]["redirect_to"], ADMIN_DASHBOARD_PATH)

    def test_resolve_endpoint_reports_decision(self):
        res = self.client.get("/api/ux/routes/resolve/?role=admin")
        self.assertEqual(res.data["data"], {"action": "redirect", "redirect_to": LOGIN_PATH, "allowed": False})

        token, _ = self.sign_up("member@example.com")
        self.login_as(token)

        res = self.client.get("/api/ux/routes/resolve/?role=user")
        self.assertTrue(res.data["data"]["allowed"])

    def test_garbage_token_is_rejected(self):
        self.login_as("not-a-jwt")
        res = self.client.get("/api/auth/me/")

        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(res.data["errors"]["detail"], "Invalid token")

    def test_health_is_public(self):
        res = self.client.get("/api/health/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "ok")
