"""
Domain-Specific Exceptions for the DynamoDB client

All exceptions extend DynamoDBClientError. They are grouped by where the
failure happens in the lifecycle of a call:

1. Caller input errors (raised before any request is built)
2. Transport errors (the HTTP round trip itself failed)
3. Service errors (the round trip succeeded but the service refused the call
   or answered with something we cannot interpret)
4. Pagination errors (the configured round ceiling was reached)
"""

from typing import Any, Dict, Optional

from .base import DynamoDBClientError


# =============================================================================
# Caller Input Errors
# =============================================================================

class ValidationError(DynamoDBClientError):
    """Raised when caller-supplied arguments are malformed.

    Used for:
    - Primary key names that are not declared in the field list
    - Unknown attribute types, key roles, update actions or comparison operators
    - Undefined, too short, too long or badly formed table names
    - Missing credentials for request signing
    """

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        self.errors = errors or {}
        context = {'validation_errors': self.errors} if self.errors else None
        super().__init__(message, original_error, context)


# =============================================================================
# Transport Errors
# =============================================================================

class TransportError(DynamoDBClientError):
    """Raised when the HTTP round trip fails.

    Used for:
    - Connection refused, DNS failures, TLS errors
    - Read/connect timeouts enforced by the transport
    - Non-success HTTP statuses without a service error document
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
        operation: Optional[str] = None,
    ):
        self.status_code = status_code
        context = {'status_code': status_code} if status_code is not None else None
        super().__init__(message, original_error, context, operation)


# =============================================================================
# Service Errors
# =============================================================================

class ServiceError(DynamoDBClientError):
    """Raised when the service answers with an error or an unexpected body.

    Attributes:
        code: Service error code (the part of ``__type`` after ``#``), if any
        status_code: HTTP status of the response, if known
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.code = code
        self.status_code = status_code
        context = {}
        if code:
            context['code'] = code
        if status_code is not None:
            context['status_code'] = status_code
        super().__init__(message, original_error, context, operation)


class ConflictError(ServiceError):
    """Conditional check failed, or the table is busy being created/updated/deleted."""


class NotFoundError(ServiceError):
    """The requested table does not exist (or is not yet visible)."""


class RetryableError(ServiceError):
    """Throttling or transient service failure; the call may be repeated later."""


# =============================================================================
# Pagination Errors
# =============================================================================

class PaginationLimitError(DynamoDBClientError):
    """Raised when a paginated operation or poll exceeds its round ceiling.

    Attributes:
        rounds: Number of round trips made before giving up
    """

    def __init__(self, message: str, rounds: int, operation: Optional[str] = None):
        self.rounds = rounds
        super().__init__(message, context={'rounds': rounds}, operation=operation)
