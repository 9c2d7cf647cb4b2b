"""
Test configuration and fixtures for the DynamoDB client.

Provides a scripted transport that replays canned JSON responses and records
every request it receives, plus a client wired to it with real SigV4 signing.
"""

import json
from typing import Any, Dict, List

import pytest

from dynamodb_client import DynamoDBClient, DynamoDBConfig, OperationRequest


class ScriptedTransport:
    """Transport double: returns the queued responses in order."""

    def __init__(self, responses: List[Any] = None):
        self.responses = list(responses or [])
        self.requests: List[OperationRequest] = []

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    def request(self, request: OperationRequest) -> str:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"No scripted response left for {request.operation}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response if isinstance(response, str) else json.dumps(response)

    @property
    def payloads(self) -> List[Dict[str, Any]]:
        return [json.loads(r.body) for r in self.requests]

    @property
    def operations(self) -> List[str]:
        return [r.operation for r in self.requests]


@pytest.fixture
def dynamodb_config():
    """DynamoDB configuration for testing."""
    return DynamoDBConfig(
        aws_access_key_id="AKIDEXAMPLE",
        aws_secret_access_key="wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",
        aws_session_token=None,
        profile_name=None,
        region_name="us-east-1",
        endpoint_url="http://localhost:8000",
        max_pages=None,
        wait_max_attempts=None,
        enable_debug_logging=False,
    )


@pytest.fixture
def transport():
    return ScriptedTransport()


@pytest.fixture
def sleeps():
    """Records requested pauses instead of sleeping."""
    return []


@pytest.fixture
def client(dynamodb_config, transport, sleeps):
    return DynamoDBClient(dynamodb_config, transport=transport, sleep=sleeps.append)
