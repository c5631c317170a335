from unittest.mock import patch

from django.conf import settings
from django.test import TestCase
from rest_framework import status

from authx.session import SessionProvider
from core.backends import get_identity_provider
from core.constants import ADMIN_DASHBOARD_PATH, COLLECTION_USERS, LOGIN_PATH, USER_DASHBOARD_PATH
from core.testing import DEFAULT_PASSWORD, BackendTestMixin


class SignupLoginApiTestCase(BackendTestMixin, TestCase):
    def test_signup_creates_user_profile(self):
        res = self.client.post(
            "/api/auth/signup/",
            {"email": "ann@example.com", "password": DEFAULT_PASSWORD, "display_name": "Ann"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        data = res.data["data"]
        self.assertTrue(data["access"])
        self.assertEqual(data["profile"]["role"], "user")
        self.assertEqual(data["profile"]["display_name"], "Ann")
        self.assertEqual(data["redirect_to"], USER_DASHBOARD_PATH)

        stored = self.store.get(COLLECTION_USERS, data["profile"]["uid"])
        self.assertEqual(stored["status"], "active")
        self.assertEqual(stored["settings"], {"theme": "light"})

    def test_admin_email_gets_admin_role(self):
        res = self.client.post(
            "/api/auth/signup/",
            {"email": settings.TASKHUB_ADMIN_EMAIL, "password": DEFAULT_PASSWORD, "display_name": "Boss"},
            format="json",
        )

        self.assertEqual(res.data["data"]["profile"]["role"], "admin")
        self.assertEqual(res.data["data"]["redirect_to"], ADMIN_DASHBOARD_PATH)

    def test_duplicate_signup_shows_provider_message(self):
        self.sign_up("ann@example.com")

        res = self.client.post(
            "/api/auth/signup/",
            {"email": "ann@example.com", "password": DEFAULT_PASSWORD, "display_name": "Ann"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["errors"]["detail"], "User already registered")

    def test_weak_password_rejected(self):
        res = self.client.post(
            "/api/auth/signup/",
            {"email": "ann@example.com", "password": "123", "display_name": "Ann"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["errors"]["code"], "weak_password")

    def test_login_with_wrong_password(self):
        self.sign_up("ann@example.com")

        res = self.client.post(
            "/api/auth/login/", {"email": "ann@example.com", "password": "wrong-pass"}, format="json"
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["errors"]["detail"], "Invalid login credentials")

    def test_login_returns_existing_profile(self):
        _, profile = self.sign_up("ann@example.com", "Ann")

        res = self.client.post(
            "/api/auth/login/", {"email": "ann@example.com", "password": DEFAULT_PASSWORD}, format="json"
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["data"]["profile"]["uid"], profile["id"])
        self.assertEqual(res.data["meta"]["message"], "Logged in successfully")

    def test_disabled_account_cannot_log_in(self):
        _, profile = self.sign_up("ann@example.com")
        self.store.update(COLLECTION_USERS, profile["id"], {"status": "disabled"})

        res = self.client.post(
            "/api/auth/login/", {"email": "ann@example.com", "password": DEFAULT_PASSWORD}, format="json"
        )

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_disabled_account_token_is_rejected(self):
        token, profile = self.sign_up("ann@example.com")
        self.store.update(COLLECTION_USERS, profile["id"], {"status": "disabled"})
        self.login_as(token)

        res = self.client.get("/api/auth/me/")

        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_deleted_profile_is_not_recreated_by_token(self):
        token, profile = self.sign_up("ann@example.com", "Ann")
        admin_token, _ = self.sign_up_admin()
        self.login_as(admin_token)
        res = self.client.delete(f"/api/users/{profile['id']}/?confirm=true")
        self.assertEqual(res.status_code, status.HTTP_200_OK)

        self.login_as(token)
        res = self.client.get("/api/auth/me/")

        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(res.data["errors"]["detail"], "User profile not found")
        self.assertIsNone(self.store.get(COLLECTION_USERS, profile["id"]))

    def test_me_and_logout(self):
        token, profile = self.sign_up("ann@example.com", "Ann")
        self.login_as(token)

        res = self.client.get("/api/auth/me/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["data"]["uid"], profile["id"])

        res = self.client.post("/api/auth/logout/")
        self.assertEqual(res.data["data"]["redirect_to"], LOGIN_PATH)


class GoogleLoginApiTestCase(BackendTestMixin, TestCase):
    @patch("core.identity.memory.google_id_token.verify_oauth2_token")
    def test_google_login_creates_profile_from_token(self, mock_verify):
        mock_verify.return_value = {
            "email": "gina@example.com",
            "name": "Gina G",
            "picture": "https://example.com/gina.png",
        }

        res = self.client.post("/api/auth/google/", {"id_token": "google-token"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        profile = res.data["data"]["profile"]
        self.assertEqual(profile["display_name"], "Gina G")
        self.assertEqual(profile["photo_url"], "https://example.com/gina.png")
        self.assertEqual(profile["role"], "user")

    @patch("core.identity.memory.google_id_token.verify_oauth2_token")
    def test_invalid_google_token(self, mock_verify):
        mock_verify.side_effect = ValueError("Wrong recipient")

        res = self.client.post("/api/auth/google/", {"id_token": "bad"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("Invalid token", res.data["errors"]["detail"])


class SessionProviderTestCase(BackendTestMixin, TestCase):
    def test_lifecycle_subscribes_and_releases(self):
        identity = get_identity_provider()
        provider = SessionProvider(self.store, identity)
        self.assertTrue(provider.loading)

        with provider:
            provider.signup("ann@example.com", DEFAULT_PASSWORD, "Ann")
            self.assertFalse(provider.loading)
            self.assertEqual(provider.profile["display_name"], "Ann")

            provider.logout()
            self.assertIsNone(provider.session)
            self.assertIsNone(provider.profile)

        # No listener left behind: later sign-ins do not touch this provider
        identity.sign_in_with_password("ann@example.com", DEFAULT_PASSWORD)
        self.assertIsNone(provider.session)

    def test_existing_profile_role_is_not_rederived(self):
        _, profile = self.sign_up("ann@example.com")
        self.store.update(COLLECTION_USERS, profile["id"], {"role": "admin"})

        with SessionProvider(self.store, get_identity_provider()) as provider:
            provider.login("ann@example.com", DEFAULT_PASSWORD)
            self.assertEqual(provider.profile["role"], "admin")

    def test_display_name_falls_back_to_email_local_part(self):
        with SessionProvider(self.store, get_identity_provider()) as provider:
            provider.signup("zed@example.com", DEFAULT_PASSWORD, "")
            self.assertEqual(provider.profile["display_name"], "zed")
