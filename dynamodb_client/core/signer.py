"""
Request signing

Wraps botocore's SigV4 implementation. Credentials come from the
configuration when keys are given explicitly, otherwise from a boto3 session
(profile, environment, instance metadata...).
"""

import logging
import threading
from typing import Dict, Mapping, Optional

import boto3
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from ..config import DynamoDBConfig
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


class RequestSigner:
    """Computes the Authorization header for a fully populated request."""

    def __init__(self, config: DynamoDBConfig, credentials: Optional[Credentials] = None):
        """Initialize the signer.

        Args:
            config: DynamoDB configuration (keys, region, service name)
            credentials: Pre-resolved credentials; resolved lazily when omitted
        """
        self.config = config
        self._credentials = credentials
        self._lock = threading.Lock()

    @property
    def credentials(self) -> Credentials:
        """Lazily resolve credentials, once per signer."""
        with self._lock:
            if self._credentials is None:
                self._credentials = self._resolve_credentials()
        return self._credentials

    def _resolve_credentials(self) -> Credentials:
        if self.config.aws_access_key_id and self.config.aws_secret_access_key:
            return Credentials(
                self.config.aws_access_key_id,
                self.config.aws_secret_access_key,
                self.config.aws_session_token,
            )

        session = boto3.Session(
            profile_name=self.config.profile_name,
            region_name=self.config.region_name
        )
        resolved = session.get_credentials()
        if resolved is None:
            raise ValidationError(
                "No AWS credentials configured: set aws_access_key_id/aws_secret_access_key "
                "or make credentials available to boto3"
            )
        logger.debug(f"Resolved credentials via boto3 ({resolved.method})")
        return resolved

    def sign_headers(self, method: str, url: str, headers: Mapping[str, str], body: str) -> Dict[str, str]:
        """Sign a request.

        Args:
            method: HTTP method
            url: Full request URL
            headers: Headers to sign (Host, X-Amz-Target, Content-Type, ...)
            body: Request body

        Returns:
            The complete header set after signing, including Authorization
            and any date/token headers the algorithm adds
        """
        request = AWSRequest(method=method, url=url, data=body, headers=dict(headers))
        SigV4Auth(self.credentials, self.config.service_name, self.config.region_name).add_auth(request)
        return dict(request.headers.items())

    def sign(self, method: str, url: str, headers: Mapping[str, str], body: str) -> str:
        """Return only the Authorization header value for a request."""
        return self.sign_headers(method, url, headers, body)['Authorization']
