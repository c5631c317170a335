from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework import status
import logging

from core.errors import DocumentNotFound, IdentityError, StoreError  # noqa: F401

logger = logging.getLogger("taskhub")


# ---- API errors -------------------------------------------------------


class ActionFailed(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Action failed."
    default_code = "action_failed"


class ConfirmationRequired(APIException):
    status_code = status.HTTP_428_PRECONDITION_REQUIRED
    default_detail = "Confirmation required. Repeat the request with confirm=true."
    default_code = "confirmation_required"


class RouteRedirect(APIException):
    """Route guard outcome: the caller belongs somewhere else."""

    default_code = "redirect"

    def __init__(self, redirect_to, status_code, detail=None):
        self.redirect_to = redirect_to
        self.status_code = status_code
        super().__init__(detail or f"Redirect to {redirect_to}")


def custom_exception_handler(exc, context):
    """
    Wrap DRF + collaborator exceptions into a consistent response format.

    Success responses (2xx) are not touched.
    Only errors come through here.
    """
    # Deferred: api_settings loads this module while rest_framework.views is importing
    from rest_framework.views import exception_handler as drf_exception_handler

    if isinstance(exc, IdentityError):
        return Response(
            {
                "success": False,
                "status_code": status.HTTP_400_BAD_REQUEST,
                "errors": {"detail": exc.message, "code": exc.code},
            },
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, StoreError):
        logger.error("Unhandled store error: %s", exc)
        return Response(
            {
                "success": False,
                "status_code": status.HTTP_502_BAD_GATEWAY,
                "errors": {"detail": "Request failed. Please try again."},
            },
            status=status.HTTP_502_BAD_GATEWAY,
        )

    response = drf_exception_handler(exc, context)

    # If DRF handled it, wrap it
    if response is not None:
        errors = response.data
        if isinstance(exc, RouteRedirect):
            errors = {"detail": str(exc.detail), "redirect_to": exc.redirect_to}
        return Response(
            {
                "success": False,
                "status_code": response.status_code,
                "errors": errors,
            },
            status=response.status_code,
            headers={
                name: response[name]
                for name in ("WWW-Authenticate", "Retry-After")
                if response.has_header(name)
            },
        )

    # Unhandled exceptions -> 500
    logger.exception("Unhandled API exception", exc_info=exc)

    return Response(
        {
            "success": False,
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "errors": {"detail": "Internal server error."},
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
