"""
Tests for payload construction and the signed envelope (core/request_builder.py)
"""

import json
import re
from decimal import Decimal

import pytest

from dynamodb_client.core.request_builder import (
    RequestBuilder,
    batch_get_item_payload,
    create_table_payload,
    delete_item_payload,
    describe_table_payload,
    dumps_payload,
    list_tables_payload,
    put_item_payload,
    scan_payload,
    update_item_payload,
)
from dynamodb_client.core.signer import RequestSigner
from dynamodb_client.exceptions import ValidationError
from dynamodb_client.models import ComparisonOperator, ScanCondition, UpdateAction


class TestCreateTablePayload:
    """CreateTable schema construction."""

    def test_flat_pairs_with_defaults(self):
        payload = create_table_payload('users', fields=['id', 'S', 'ts', 'N'], primary=['id', 'HASH', 'ts', 'RANGE'])

        assert payload == {
            'TableName': 'users',
            'AttributeDefinitions': [
                {'AttributeName': 'id', 'AttributeType': 'S'},
                {'AttributeName': 'ts', 'AttributeType': 'N'},
            ],
            'KeySchema': [
                {'AttributeName': 'id', 'KeyType': 'HASH'},
                {'AttributeName': 'ts', 'KeyType': 'RANGE'},
            ],
            'ProvisionedThroughput': {'ReadCapacityUnits': 5, 'WriteCapacityUnits': 5},
        }

    def test_type_and_role_default(self):
        payload = create_table_payload('users', fields=['id'], primary=['id'])

        assert payload['AttributeDefinitions'] == [{'AttributeName': 'id', 'AttributeType': 'S'}]
        assert payload['KeySchema'] == [{'AttributeName': 'id', 'KeyType': 'HASH'}]

    def test_tuple_and_mapping_forms(self):
        payload = create_table_payload('users', fields={'id': 'N'}, primary=[('id', 'HASH')])

        assert payload['AttributeDefinitions'] == [{'AttributeName': 'id', 'AttributeType': 'N'}]

    def test_explicit_capacity(self):
        payload = create_table_payload('users', ['id'], ['id'], read_capacity=10, write_capacity=2)

        assert payload['ProvisionedThroughput'] == {'ReadCapacityUnits': 10, 'WriteCapacityUnits': 2}

    def test_capacity_is_not_silently_defaulted(self):
        with pytest.raises(ValidationError, match="'read_capacity' must be a positive integer"):
            create_table_payload('users', ['id'], ['id'], read_capacity=0)
        with pytest.raises(ValidationError, match="'write_capacity'"):
            create_table_payload('users', ['id'], ['id'], write_capacity=-1)

    def test_primary_field_must_be_declared(self):
        with pytest.raises(ValidationError, match="Unknown field 'other'"):
            create_table_payload('users', fields=['id', 'S'], primary=['other'])

    def test_unknown_attribute_type(self):
        with pytest.raises(ValidationError, match="attribute type"):
            create_table_payload('users', fields=['id', 'ts'], primary=['id'])

    def test_unknown_key_role(self):
        with pytest.raises(ValidationError, match="key type"):
            create_table_payload('users', fields=['id'], primary=['id', 'SORT'])

    def test_primary_required(self):
        with pytest.raises(ValidationError):
            create_table_payload('users', fields=['id'], primary=[])


class TestTableNames:
    """Table names are validated before any payload is returned."""

    @pytest.mark.parametrize("name", [None, 'ab', 'x' * 256, 'bad name', 'bad/name'])
    def test_invalid_names(self, name):
        with pytest.raises(ValidationError):
            describe_table_payload(name)

    def test_valid_name(self):
        assert describe_table_payload('my-table_1.0') == {'TableName': 'my-table_1.0'}


class TestItemPayloads:
    """Put/Update/Delete payloads."""

    def test_put_item(self):
        payload = put_item_payload('users', {'id': 'u1', 'age': 42}, capacity=True)

        assert payload == {
            'TableName': 'users',
            'Item': {'id': {'S': 'u1'}, 'age': {'N': '42'}},
            'ReturnConsumedCapacity': 'TOTAL',
        }

    def test_put_item_capacity_defaults_to_none(self):
        assert put_item_payload('users', {'id': 'u1'})['ReturnConsumedCapacity'] == 'NONE'

    def test_put_item_requires_fields(self):
        with pytest.raises(ValidationError):
            put_item_payload('users', {})

    def test_update_item_default_action(self):
        payload = update_item_payload('users', item={'id': 'u1'}, fields={'age': 43, 'name': 'Ann'})

        assert payload['Key'] == {'id': {'S': 'u1'}}
        assert payload['AttributeUpdates'] == {
            'age': {'Action': 'PUT', 'Value': {'N': '43'}},
            'name': {'Action': 'PUT', 'Value': {'S': 'Ann'}},
        }

    def test_update_item_explicit_action(self):
        payload = update_item_payload('users', {'id': 'u1'}, {'visits': 1}, action=UpdateAction.ADD)
        assert payload['AttributeUpdates']['visits']['Action'] == 'ADD'

        payload = update_item_payload('users', {'id': 'u1'}, {'tags': ['x']}, action='DELETE')
        assert payload['AttributeUpdates']['tags'] == {'Action': 'DELETE', 'Value': {'SS': ['x']}}

    def test_update_item_unknown_action(self):
        with pytest.raises(ValidationError, match="update action"):
            update_item_payload('users', {'id': 'u1'}, {'a': 1}, action='REPLACE')

    def test_delete_item(self):
        assert delete_item_payload('users', {'id': 7}) == {
            'TableName': 'users',
            'Key': {'id': {'N': '7'}},
            'ReturnConsumedCapacity': 'NONE',
        }


class TestBatchGetPayload:
    """BatchGetItem request items."""

    def test_flat_pairs_become_one_key_each(self):
        payload = batch_get_item_payload({'users': ['id', 'u1', 'id', 'u2']})

        assert payload['RequestItems'] == {
            'users': {'Keys': [{'id': {'S': 'u1'}}, {'id': {'S': 'u2'}}]},
        }

    def test_key_mappings(self):
        payload = batch_get_item_payload({'events': [{'id': 'e1', 'ts': 10}]})

        assert payload['RequestItems']['events']['Keys'] == [{'id': {'S': 'e1'}, 'ts': {'N': '10'}}]

    def test_several_tables(self):
        payload = batch_get_item_payload({'users': ['id', 1], 'groups': ['gid', 'g']}, capacity=True)

        assert set(payload['RequestItems']) == {'users', 'groups'}
        assert payload['ReturnConsumedCapacity'] == 'TOTAL'

    def test_key_without_value(self):
        with pytest.raises(ValidationError, match="has no value"):
            batch_get_item_payload({'users': ['id']})

    def test_empty_items(self):
        with pytest.raises(ValidationError):
            batch_get_item_payload({})


class TestScanPayload:
    """Scan projection, limit and filter."""

    def test_minimal(self):
        assert scan_payload('users') == {'TableName': 'users', 'ReturnConsumedCapacity': 'NONE'}

    def test_projection_and_limit(self):
        payload = scan_payload('users', fields=['id', 'age'], limit=25)

        assert payload['AttributesToGet'] == ['id', 'age']
        assert payload['Limit'] == 25

    def test_filter_defaults_to_equality(self):
        payload = scan_payload('users', filter=[{'field': 'name', 'value': 'Ann'}])

        assert payload['ScanFilter'] == {
            'name': {'AttributeValueList': [{'S': 'Ann'}], 'ComparisonOperator': 'EQ'},
        }

    def test_filter_operators(self):
        payload = scan_payload('users', filter=[
            {'field': 'age', 'value': 18, 'compare': 'GE'},
            ScanCondition(field='email', compare=ComparisonOperator.NOT_NULL),
            {'field': 'score', 'value': [1, 10], 'compare': 'BETWEEN'},
        ])

        assert payload['ScanFilter'] == {
            'age': {'AttributeValueList': [{'N': '18'}], 'ComparisonOperator': 'GE'},
            'email': {'ComparisonOperator': 'NOT_NULL'},
            'score': {'AttributeValueList': [{'N': '1'}, {'N': '10'}], 'ComparisonOperator': 'BETWEEN'},
        }

    def test_between_needs_list(self):
        with pytest.raises(ValidationError, match="needs a list"):
            scan_payload('users', filter=[{'field': 'age', 'value': 5, 'compare': 'BETWEEN'}])

    def test_unknown_operator(self):
        with pytest.raises(ValidationError, match="comparison operator"):
            scan_payload('users', filter=[{'field': 'age', 'value': 5, 'compare': 'LIKE'}])


class TestEnvelope:
    """RequestBuilder.make_request headers and body."""

    def test_list_tables_payload(self):
        assert list_tables_payload() == {}
        assert list_tables_payload(start='a', limit=3) == {'ExclusiveStartTableName': 'a', 'Limit': 3}

    def test_decimal_serialization(self):
        assert dumps_payload({'N': Decimal('1.10')}) == '{"N":"1.10"}'

    def test_make_request(self, dynamodb_config):
        builder = RequestBuilder(dynamodb_config, RequestSigner(dynamodb_config))

        request = builder.make_request('DescribeTable', {'TableName': 'users'})

        assert request.operation == 'DescribeTable'
        assert request.url == 'http://localhost:8000/'
        assert request.method == 'POST'
        assert request.target == 'DynamoDB_20120810.DescribeTable'
        assert json.loads(request.body) == {'TableName': 'users'}
        assert request.headers['X-Amz-Target'] == 'DynamoDB_20120810.DescribeTable'
        assert request.headers['Content-Type'] == 'application/x-amz-json-1.0'
        assert request.headers['Content-Length'] == str(len(request.body))
        assert request.headers['Host'] == 'localhost:8000'
        assert re.fullmatch(r'\w{3}, \d{2} \w{3} \d{4} \d{2}:\d{2}:\d{2} GMT', request.headers['Date'])
        assert re.fullmatch(r'\d{8}T\d{6}Z', request.headers['X-Amz-Date'])
        assert 'x-amz-date' in request.headers['Authorization']
        assert request.table_name == 'users'
        assert request.headers['Authorization'].startswith('AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/')

    def test_table_name_only_for_single_table_operations(self, dynamodb_config):
        builder = RequestBuilder(dynamodb_config, RequestSigner(dynamodb_config))

        assert builder.make_request('ListTables', {}).table_name is None

    def test_request_headers_are_read_only(self, dynamodb_config):
        request = RequestBuilder(dynamodb_config, RequestSigner(dynamodb_config)).make_request('ListTables', {})

        with pytest.raises(TypeError):
            request.headers['Authorization'] = 'forged'
