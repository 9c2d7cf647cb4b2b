"""
Tests for SigV4 request signing (core/signer.py)
"""

import threading
from unittest.mock import Mock, patch

import pytest
from botocore.credentials import Credentials

from dynamodb_client.config import DynamoDBConfig
from dynamodb_client.core.signer import RequestSigner
from dynamodb_client.exceptions import ValidationError

URL = 'http://localhost:8000/'
HEADERS = {
    'Host': 'localhost:8000',
    'X-Amz-Target': 'DynamoDB_20120810.ListTables',
    'Content-Type': 'application/x-amz-json-1.0',
    'Content-Length': '2',
}


class TestRequestSigner:
    """RequestSigner"""

    def test_authorization_header(self, dynamodb_config):
        authorization = RequestSigner(dynamodb_config).sign('POST', URL, HEADERS, '{}')

        assert authorization.startswith('AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/')
        assert '/us-east-1/dynamodb/aws4_request' in authorization
        assert 'x-amz-target' in authorization
        assert 'Signature=' in authorization

    def test_signed_headers_keep_request_headers(self, dynamodb_config):
        headers = RequestSigner(dynamodb_config).sign_headers('POST', URL, HEADERS, '{}')

        assert headers['X-Amz-Target'] == 'DynamoDB_20120810.ListTables'
        assert headers['Content-Type'] == 'application/x-amz-json-1.0'
        assert 'Authorization' in headers
        assert 'X-Amz-Security-Token' not in headers

    def test_timestamp_header_is_signed(self, dynamodb_config):
        headers = RequestSigner(dynamodb_config).sign_headers('POST', URL, HEADERS, '{}')

        assert headers['X-Amz-Date'].endswith('Z')
        assert 'x-amz-date' in headers['Authorization']
        assert 'Date' not in headers

    def test_session_token_is_sent(self, dynamodb_config):
        config = dynamodb_config.model_copy(update={'aws_session_token': 'session-token'})

        headers = RequestSigner(config).sign_headers('POST', URL, HEADERS, '{}')

        assert headers['X-Amz-Security-Token'] == 'session-token'

    def test_body_is_part_of_signature(self, dynamodb_config):
        signer = RequestSigner(dynamodb_config, credentials=Credentials('AKID', 'secret'))

        first = signer.sign('POST', URL, HEADERS, '{}')
        other = signer.sign('POST', URL, HEADERS, '{"Limit":1}')

        assert first.startswith('AWS4-HMAC-SHA256 Credential=AKID/')
        assert first.split('Signature=')[1] != other.split('Signature=')[1]

    def test_credentials_from_boto3_session(self):
        config = DynamoDBConfig(aws_access_key_id=None, aws_secret_access_key=None, profile_name=None)
        resolved = Credentials('FROMSESSION', 'secret')

        with patch('boto3.Session') as mock_session_class:
            mock_session_class.return_value.get_credentials.return_value = resolved
            signer = RequestSigner(config)

            assert signer.credentials is resolved
            assert signer.credentials is resolved
            mock_session_class.assert_called_once_with(profile_name=None, region_name=config.region_name)

    def test_missing_credentials(self):
        config = DynamoDBConfig(aws_access_key_id=None, aws_secret_access_key=None, profile_name=None)

        with patch('boto3.Session') as mock_session_class:
            mock_session_class.return_value = Mock(get_credentials=Mock(return_value=None))

            with pytest.raises(ValidationError, match="No AWS credentials"):
                _ = RequestSigner(config).credentials

    def test_credentials_resolved_once_across_threads(self):
        config = DynamoDBConfig(aws_access_key_id=None, aws_secret_access_key=None, profile_name=None)
        resolved = Credentials('FROMSESSION', 'secret')
        seen = []

        with patch('boto3.Session') as mock_session_class:
            mock_session_class.return_value.get_credentials.return_value = resolved
            signer = RequestSigner(config)
            threads = [threading.Thread(target=lambda: seen.append(signer.credentials)) for _ in range(8)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

            mock_session_class.assert_called_once()
        assert seen == [resolved] * 8
