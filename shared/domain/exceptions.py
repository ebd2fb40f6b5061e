"""
Error Taxonomy

Every failure surfaced to API clients is one of these kinds. They are DRF
``APIException`` subclasses so views and services can raise them directly and
the project exception handler renders them as ``{"message": ...}``.

- ValidationError: malformed or missing input (400)
- AuthenticationError: missing, invalid or expired credential (401)
- AuthorizationError: caller does not own the resource (403)
- NotFoundError: referenced entity is absent (404)
- StateConflictError: operation invalid for the entity's current state (409)
- UnexpectedError: persistence or internal failure (500)
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class DomainError(APIException):
    """Base class for all taxonomy errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    default_code = "error"

    @property
    def message(self) -> str:
        return str(self.detail)


class ValidationError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "validation_error"


class AuthenticationError(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication failed! Invalid token."
    default_code = "authentication_error"


class AuthorizationError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not allowed to perform this action."
    default_code = "authorization_error"


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found."
    default_code = "not_found"


class StateConflictError(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Operation is not allowed in the current state."
    default_code = "state_conflict"


class UnexpectedError(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Something went wrong, please try again later."
    default_code = "unexpected_error"
