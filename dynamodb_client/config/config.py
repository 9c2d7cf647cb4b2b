import os
from typing import Optional
from urllib.parse import urlsplit

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file if it exists
load_dotenv()

SUPPORTED_SIGNING_ALGORITHMS = ('AWS4-HMAC-SHA256',)


def _optional_int_env(name: str) -> Optional[int]:
    value = os.getenv(name)
    return int(value) if value else None


class RetryPolicy(BaseModel):
    """How many round trips a paginated call may take and how long to pause between them.

    ``max_rounds=None`` keeps the loop unbounded: it ends only when the
    operation's completion predicate is satisfied.
    """

    max_rounds: Optional[int] = Field(default=None, ge=1)
    delay_seconds: float = Field(default=0.0, ge=0.0)
    backoff_factor: float = Field(default=1.0, ge=1.0)
    max_delay_seconds: float = Field(default=30.0, ge=0.0)

    def delay_for(self, rounds_done: int) -> float:
        """Pause to take after ``rounds_done`` completed rounds."""
        if self.delay_seconds <= 0:
            return 0.0
        delay = self.delay_seconds * (self.backoff_factor ** max(rounds_done - 1, 0))
        return min(delay, self.max_delay_seconds)

    model_config = ConfigDict(frozen=True)


class DynamoDBConfig(BaseModel):
    """Configuration for DynamoDB connection, request signing and pagination."""

    aws_access_key_id: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_ACCESS_KEY_ID"),
        description="AWS access key ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_SECRET_ACCESS_KEY"),
        description="AWS secret access key"
    )

    aws_session_token: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_SESSION_TOKEN"),
        description="Session token for temporary credentials"
    )

    profile_name: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_PROFILE"),
        description="Named profile used to resolve credentials when no keys are given"
    )

    region_name: str = Field(
        default_factory=lambda: os.getenv("AWS_REGION", "us-east-1"),
        description="AWS region name"
    )

    # Endpoint and wire protocol
    endpoint_url: Optional[str] = Field(
        default_factory=lambda: os.getenv("DYNAMODB_ENDPOINT_URL"),
        description="DynamoDB endpoint URL (for local development)"
    )

    service_name: str = Field(
        default="dynamodb",
        description="Service name used in the signing scope"
    )

    api_version: str = Field(
        default="20120810",
        description="API version used in the X-Amz-Target header"
    )

    signing_algorithm: str = Field(
        default="AWS4-HMAC-SHA256",
        description="Request signing algorithm"
    )

    # Connection settings
    max_pool_connections: int = Field(
        default=50,
        description="Maximum number of connections in the connection pool"
    )

    timeout_seconds: float = Field(
        default=30.0,
        description="Request timeout in seconds"
    )

    # Pagination settings
    max_pages: Optional[int] = Field(
        default_factory=lambda: _optional_int_env("DYNAMODB_MAX_PAGES"),
        description="Round-trip ceiling for list/scan/batch-get (None = unbounded)"
    )

    page_delay_seconds: float = Field(
        default=0.0,
        description="Pause between pagination rounds"
    )

    # Table status polling
    wait_max_attempts: Optional[int] = Field(
        default_factory=lambda: _optional_int_env("DYNAMODB_WAIT_MAX_ATTEMPTS"),
        description="Describe-table attempts before giving up (None = unbounded)"
    )

    wait_delay_seconds: float = Field(
        default=1.0,
        description="Initial pause between describe-table polls"
    )

    wait_backoff_factor: float = Field(
        default=1.0,
        description="Multiplier applied to the poll pause after each attempt"
    )

    wait_max_delay_seconds: float = Field(
        default=20.0,
        description="Upper bound for the poll pause"
    )

    # Logging settings
    enable_debug_logging: bool = Field(
        default_factory=lambda: os.getenv("DYNAMODB_DEBUG_LOGGING", "false").lower() == "true",
        description="Enable debug logging for DynamoDB operations"
    )

    @field_validator('region_name')
    @classmethod
    def validate_region(cls, v):
        """Validate AWS region name."""
        if not v:
            raise ValueError("AWS region name is required")
        return v

    @field_validator('signing_algorithm')
    @classmethod
    def validate_signing_algorithm(cls, v):
        """Only SigV4 is implemented by the signer."""
        if v not in SUPPORTED_SIGNING_ALGORITHMS:
            raise ValueError(f"Signing algorithm must be one of: {list(SUPPORTED_SIGNING_ALGORITHMS)}")
        return v

    @field_validator('endpoint_url')
    @classmethod
    def validate_endpoint_url(cls, v):
        """Endpoint must be an absolute http(s) URL."""
        if v is None:
            return v
        parts = urlsplit(v)
        if parts.scheme not in ('http', 'https') or not parts.netloc:
            raise ValueError(f"Invalid endpoint URL: {v}")
        return v

    @field_validator('max_pages', 'wait_max_attempts')
    @classmethod
    def validate_ceiling(cls, v):
        if v is not None and v < 1:
            raise ValueError("Round ceilings must be at least 1")
        return v

    def get_endpoint_url(self) -> str:
        """Get the URL requests are POSTed to.

        Returns:
            The configured endpoint, or the regional public endpoint
        """
        if self.endpoint_url:
            return self.endpoint_url.rstrip('/') + '/'
        return f"https://{self.service_name}.{self.region_name}.amazonaws.com/"

    def get_host(self) -> str:
        """Host header value (host plus explicit port, if any)."""
        return urlsplit(self.get_endpoint_url()).netloc

    def get_target(self, operation: str) -> str:
        """X-Amz-Target header value for an operation, e.g. ``DynamoDB_20120810.Scan``."""
        return f"DynamoDB_{self.api_version}.{operation}"

    @property
    def credential_scope(self) -> str:
        """Scope string without the date component: ``region/service/aws4_request``."""
        return f"{self.region_name}/{self.service_name}/aws4_request"

    def pagination_policy(self) -> RetryPolicy:
        """Retry policy for list-tables, scan and batch-get loops."""
        return RetryPolicy(max_rounds=self.max_pages, delay_seconds=self.page_delay_seconds)

    def wait_policy(self) -> RetryPolicy:
        """Retry policy for the table status poll."""
        return RetryPolicy(
            max_rounds=self.wait_max_attempts,
            delay_seconds=self.wait_delay_seconds,
            backoff_factor=self.wait_backoff_factor,
            max_delay_seconds=self.wait_max_delay_seconds,
        )

    @classmethod
    def from_env(cls) -> 'DynamoDBConfig':
        """Create configuration from environment variables.

        Returns:
            DynamoDBConfig instance
        """
        return cls()

    @classmethod
    def for_local_development(cls) -> 'DynamoDBConfig':
        """Create configuration for DynamoDB Local.

        Returns:
            DynamoDBConfig instance configured for local development
        """
        return cls(
            aws_access_key_id="local",
            aws_secret_access_key="local",
            region_name="us-east-1",
            endpoint_url="http://localhost:8000",
            wait_delay_seconds=0.5,
            enable_debug_logging=True
        )

    model_config = ConfigDict(
        validate_assignment=True,
        use_enum_values=True
    )
