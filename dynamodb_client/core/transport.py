"""
HTTP transport

Sends an OperationRequest and returns the response body. The transport owns
connection pooling and timeouts. It never retries: a failed round trip is
reported to the caller as TransportError or a mapped ServiceError.
"""

import json
import logging
import threading
from typing import Optional, Protocol

import requests
from requests.adapters import HTTPAdapter

from ..config import DynamoDBConfig
from ..exceptions import (
    ConflictError,
    NotFoundError,
    RetryableError,
    ServiceError,
    TransportError,
)
from ..models import OperationRequest

logger = logging.getLogger(__name__)

_CONFLICT_CODES = {
    'ConditionalCheckFailedException',
    'ResourceInUseException',
    'TableAlreadyExistsException',
}
_NOT_FOUND_CODES = {
    'ResourceNotFoundException',
    'TableNotFoundException',
}
_RETRYABLE_CODES = {
    'ProvisionedThroughputExceededException',
    'RequestLimitExceeded',
    'ThrottlingException',
    'InternalServerError',
    'InternalFailure',
    'ServiceUnavailable',
    'ServiceUnavailableException',
}
_VALIDATION_CODES = {
    'ValidationException',
    'SerializationException',
}


def map_service_error(
    code: str,
    message: str,
    operation: str,
    table_name: Optional[str] = None,
    status_code: Optional[int] = None,
) -> ServiceError:
    """Map a service error document to a ServiceError subclass.

    Args:
        code: Error code (``__type`` with the namespace stripped)
        message: Error message from the service
        operation: The operation that failed (e.g. "PutItem")
        table_name: Table the call targeted, for context
        status_code: HTTP status of the response

    Returns:
        ConflictError, NotFoundError, RetryableError or a plain ServiceError
    """
    context = f"{operation} on {table_name}" if table_name else operation
    full_message = f"{context}: {message}"

    if code in _CONFLICT_CODES:
        return ConflictError(f"Conflict - {full_message}", code, status_code, operation)
    if code in _NOT_FOUND_CODES:
        return NotFoundError(f"Not found - {full_message}", code, status_code, operation)
    if code in _RETRYABLE_CODES:
        return RetryableError(f"Throttled or unavailable - {full_message}", code, status_code, operation)
    if code in _VALIDATION_CODES:
        return ServiceError(f"Rejected by service - {full_message}", code, status_code, operation)

    logger.warning(f"Unknown DynamoDB error code '{code}' mapped to ServiceError")
    return ServiceError(f"DynamoDB operation failed - {full_message}", code, status_code, operation)


def parse_error_body(body: str) -> Optional[tuple]:
    """Extract ``(code, message)`` from a service error document, if the body is one."""
    try:
        data = json.loads(body)
    except (TypeError, ValueError):
        return None
    if not isinstance(data, dict) or '__type' not in data:
        return None
    code = str(data['__type']).rsplit('#', 1)[-1]
    message = data.get('message') or data.get('Message') or ''
    return code, message


class Transport(Protocol):
    """Anything that can carry an OperationRequest and return the body text."""

    def request(self, request: OperationRequest) -> str:
        ...


class HttpTransport:
    """requests-based transport with a pooled session."""

    def __init__(self, config: DynamoDBConfig, session: Optional[requests.Session] = None):
        self.config = config
        self._session = session
        self._lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        """Lazy initialization of the HTTP session, shared by all threads."""
        with self._lock:
            if self._session is None:
                session = requests.Session()
                adapter = HTTPAdapter(
                    pool_connections=self.config.max_pool_connections,
                    pool_maxsize=self.config.max_pool_connections
                )
                session.mount('http://', adapter)
                session.mount('https://', adapter)
                self._session = session
            return self._session

    def request(self, request: OperationRequest) -> str:
        """POST a signed request and return the response body.

        Raises:
            TransportError: Connection failure, timeout, or a non-success
                status without a service error document
            ServiceError: Non-success status with a service error document
        """
        try:
            response = self.session.request(
                request.method,
                request.url,
                data=request.body.encode('utf-8'),
                headers=dict(request.headers),
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error(f"{request.operation} request to {request.url} failed: {e}")
            raise TransportError(f"Request failed: {e}", original_error=e, operation=request.operation) from e

        body = response.text
        if response.status_code >= 400:
            parsed = parse_error_body(body)
            if parsed is None:
                raise TransportError(
                    f"Unexpected HTTP status {response.status_code}",
                    status_code=response.status_code,
                    operation=request.operation,
                )
            code, message = parsed
            raise map_service_error(
                code, message, request.operation,
                table_name=request.table_name, status_code=response.status_code,
            )

        logger.debug(f"{request.operation} -> HTTP {response.status_code} ({len(body)} bytes)")
        return body

    def close(self) -> None:
        with self._lock:
            if self._session is not None:
                self._session.close()
                self._session = None
