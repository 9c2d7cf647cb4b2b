from .config import DynamoDBConfig, RetryPolicy
from .exceptions import (
    ConflictError,
    DynamoDBClientError,
    NotFoundError,
    PaginationLimitError,
    RetryableError,
    ServiceError,
    TransportError,
    ValidationError,
)
from .models import (
    # Enums
    AttributeType,
    ComparisonOperator,
    KeyType,
    TableStatus,
    UpdateAction,
    # Models
    AttributeDefinition,
    AttributeValue,
    KeySchemaElement,
    OperationRequest,
    ScanCondition,
)
from .core import (
    AttributeCodec,
    DynamoDBClient,
    HttpTransport,
    PageState,
    PaginationEngine,
    RequestBuilder,
    RequestSigner,
    Transport,
    create_client,
)

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "DynamoDBConfig",
    "RetryPolicy",

    # Exceptions
    "ConflictError",
    "DynamoDBClientError",
    "NotFoundError",
    "PaginationLimitError",
    "RetryableError",
    "ServiceError",
    "TransportError",
    "ValidationError",

    # Enums
    "AttributeType",
    "ComparisonOperator",
    "KeyType",
    "TableStatus",
    "UpdateAction",

    # Models
    "AttributeDefinition",
    "AttributeValue",
    "KeySchemaElement",
    "OperationRequest",
    "ScanCondition",

    # Core
    "AttributeCodec",
    "DynamoDBClient",
    "HttpTransport",
    "PageState",
    "PaginationEngine",
    "RequestBuilder",
    "RequestSigner",
    "Transport",
    "create_client",
]
