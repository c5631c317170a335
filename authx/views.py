import logging

from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from core.backends import get_document_store, get_identity_provider
from core.constants import LOGIN_PATH, STATUS_DISABLED
from core.permissions import RouteGuard, dashboard_for
from core.responses import success_response
from users.serializers import ProfileSerializer

from .serializers import GoogleLoginSerializer, LoginSerializer, SignupSerializer
from .session import SessionProvider

logger = logging.getLogger("taskhub.auth")


def _signed_in_payload(provider):
    profile = provider.profile
    if profile.get("status") == STATUS_DISABLED:
        provider.logout()
        raise PermissionDenied("This account has been disabled")

    return {
        "access": provider.session.access_token,
        "profile": ProfileSerializer(profile).data,
        "redirect_to": dashboard_for(profile.get("role")),
    }


def _open_session():
    return SessionProvider(get_document_store(), get_identity_provider())


class SignupView(APIView):
    # allow unauthenticated
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        with _open_session() as provider:
            provider.signup(data["email"], data["password"], data["display_name"])
            payload = _signed_in_payload(provider)

        return success_response(payload, message="Account created successfully", status=status.HTTP_201_CREATED)


class LoginView(APIView):
    # allow unauthenticated
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        with _open_session() as provider:
            provider.login(data["email"], data["password"])
            payload = _signed_in_payload(provider)

        return success_response(payload, message="Logged in successfully")


class GoogleLoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = GoogleLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with _open_session() as provider:
            provider.login_with_google(serializer.validated_data["id_token"])
            payload = _signed_in_payload(provider)

        return success_response(payload, message="Logged in with Google")


class LogoutView(APIView):
    permission_classes = [RouteGuard]

    def post(self, request):
        request.user.session_provider.logout()
        return success_response({"redirect_to": LOGIN_PATH}, message="Logged out")


class MeView(APIView):
    permission_classes = [RouteGuard]

    def get(self, request):
        provider = request.user.session_provider
        return success_response({
            "uid": provider.session.uid,
            "email": provider.session.email,
            "profile": ProfileSerializer(provider.profile).data,
            "redirect_to": dashboard_for(provider.profile.get("role")),
        })
