"""DRF exception handler rendering every failure as ``{"message": ...}``."""

from __future__ import annotations

from typing import Any

import structlog
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied  # type: ignore
from django.db import DatabaseError  # type: ignore
from django.http import Http404  # type: ignore
from rest_framework import exceptions as drf_exceptions  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    UnexpectedError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

NO_TOKEN_MESSAGE = "Authentication failed! No token provided."
INVALID_TOKEN_MESSAGE = "Authentication failed! Invalid token."


def _first_message(detail: Any) -> str:
    """Pick a single human readable message out of a DRF error detail."""

    if isinstance(detail, dict):
        for field, value in detail.items():
            message = _first_message(value)
            if field in ("non_field_errors", "detail"):
                return message
            return f"{field}: {message}"
        return ValidationError.default_detail
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ValidationError.default_detail
    return str(detail)


def _field_errors(detail: Any) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for field, value in detail.items():
        if isinstance(value, (list, tuple)):
            errors[field] = [_first_message(item) for item in value]
        else:
            errors[field] = [_first_message(value)]
    return errors


def _translate(exc: Exception) -> Exception:
    """Map framework exceptions onto the project taxonomy."""

    if isinstance(exc, DomainError):
        return exc
    if isinstance(exc, Http404):
        return NotFoundError()
    if isinstance(exc, DjangoPermissionDenied):
        return AuthorizationError()
    if isinstance(exc, drf_exceptions.NotAuthenticated):
        return AuthenticationError(NO_TOKEN_MESSAGE)
    if isinstance(exc, drf_exceptions.AuthenticationFailed):
        # simplejwt's InvalidToken is an AuthenticationFailed subclass
        return AuthenticationError(INVALID_TOKEN_MESSAGE)
    if isinstance(exc, drf_exceptions.PermissionDenied):
        return AuthorizationError(_first_message(exc.detail))
    if isinstance(exc, drf_exceptions.NotFound):
        return NotFoundError(_first_message(exc.detail))
    return exc


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response:
    view = context.get("view")
    exc = _translate(exc)

    if isinstance(exc, DatabaseError):
        logger.error(
            "persistence_failure",
            view=type(view).__name__ if view else None,
            error=str(exc),
            exc_info=exc,
        )
        exc = UnexpectedError()

    response = drf_exception_handler(exc, context)
    if response is None:
        logger.error(
            "unhandled_exception",
            view=type(view).__name__ if view else None,
            error=repr(exc),
            exc_info=exc,
        )
        return Response({"message": UnexpectedError.default_detail}, status=UnexpectedError.status_code)

    data: dict[str, Any] = {"message": _first_message(exc.detail)}
    if isinstance(exc, drf_exceptions.ValidationError) and isinstance(exc.detail, dict):
        data["errors"] = _field_errors(exc.detail)
    response.data = data
    return response
