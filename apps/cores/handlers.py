import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import (
    NotAuthenticated,
    NotFound,
    StoreError,
    Unauthorized,
    ValidationFailed,
    WorkflowError,
)

logger = logging.getLogger(__name__)


def _first_message(detail):
    """
    Flatten DRF error details ({"field": ["msg"]} / ["msg"] / "msg")
    into one human readable line.
    """
    if isinstance(detail, dict):
        for field, value in detail.items():
            message = _first_message(value)
            if field in ("non_field_errors", "detail"):
                return message
            return f"{field}: {message}"
        return ""
    if isinstance(detail, (list, tuple)):
        # many=True serializers report {} for the rows that passed
        for item in detail:
            message = _first_message(item)
            if message:
                return message
        return ""
    return str(detail)


def _translate(exc):
    """Map framework and database errors onto the workflow taxonomy."""
    if isinstance(exc, WorkflowError):
        return exc

    if isinstance(exc, (drf_exceptions.NotAuthenticated, drf_exceptions.AuthenticationFailed)):
        return NotAuthenticated(_first_message(exc.detail))

    if isinstance(exc, drf_exceptions.PermissionDenied):
        return Unauthorized(_first_message(exc.detail))

    if isinstance(exc, DjangoPermissionDenied):
        return Unauthorized(str(exc) or None)

    if isinstance(exc, drf_exceptions.NotFound):
        return NotFound(_first_message(exc.detail))

    if isinstance(exc, Http404):
        return NotFound()

    if isinstance(exc, drf_exceptions.ValidationError):
        return ValidationFailed(_first_message(exc.detail))

    if isinstance(exc, DjangoValidationError):
        return ValidationFailed(" ".join(exc.messages))

    if isinstance(exc, DatabaseError):
        return StoreError()

    return None


def workflow_exception_handler(exc, context):
    """
    Operation boundary for every API view.

    Every failure leaves here as {"success": false, "error": ..., "code": ...}
    so no call path ends in an unformatted server error.
    """
    error = _translate(exc)
    view = context.get("view")
    view_name = view.__class__.__name__ if view else "unknown"

    if error is None:
        # Not one of ours (method not allowed, throttled, ...). Let DRF
        # build the response and wrap its payload.
        response = exception_handler(exc, context)
        if response is None:
            logger.exception("Unhandled error in %s", view_name)
            return Response(
                {"success": False, "error": "Unknown error", "code": "error"},
                status=500,
            )
        response.data = {
            "success": False,
            "error": _first_message(response.data),
            "code": getattr(exc, "default_code", "error"),
        }
        return response

    if isinstance(error, StoreError):
        logger.error("Store failure in %s: %s", view_name, exc, exc_info=exc)
    else:
        logger.warning("%s rejected (%s): %s", view_name, error.default_code, error.detail)

    payload = {
        "success": False,
        "error": str(error.detail),
        "code": error.default_code,
    }
    if error.retryable:
        payload["retryable"] = True
    return Response(payload, status=error.status_code)
