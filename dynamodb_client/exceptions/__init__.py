# Base exception class
from .base import DynamoDBClientError

from .domain_exceptions import (
    ConflictError,
    NotFoundError,
    PaginationLimitError,
    RetryableError,
    ServiceError,
    TransportError,
    ValidationError,
)

__all__ = [
    # Base exception
    "DynamoDBClientError",

    # Domain exceptions (alphabetically ordered)
    "ConflictError",
    "NotFoundError",
    "PaginationLimitError",
    "RetryableError",
    "ServiceError",
    "TransportError",
    "ValidationError",
]
