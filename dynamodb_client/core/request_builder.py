"""
Request payload builder

One function per operation turns high-level arguments into the JSON payload
the service expects, passing every embedded value through the attribute
codec. RequestBuilder then wraps a payload in the common envelope (target,
date and content headers, signature) to produce an OperationRequest.

All argument checking happens here, before anything touches the network.
"""

import json
import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..config import DynamoDBConfig
from ..exceptions import ValidationError
from ..models import (
    AttributeDefinition,
    AttributeType,
    ComparisonOperator,
    KeySchemaElement,
    KeyType,
    OperationRequest,
    ReturnConsumedCapacity,
    ScanCondition,
    UpdateAction,
)
from ..utils import http_date, split_pairs, validate_table_name
from .codec import encode_item, to_attribute
from .signer import RequestSigner

logger = logging.getLogger(__name__)

DEFAULT_READ_CAPACITY = 5
DEFAULT_WRITE_CAPACITY = 5
CONTENT_TYPE = 'application/x-amz-json-1.0'

FilterSpec = Union[ScanCondition, Mapping[str, Any]]


def _coerce_enum(enum_cls, value, default, what: str):
    if value is None or value == '':
        return default
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ', '.join(m.value for m in enum_cls)
        raise ValidationError(f"Unknown {what} {value!r}; expected one of: {allowed}") from None


def _require_name(name: Any, what: str) -> None:
    if not isinstance(name, str) or not name:
        raise ValidationError(f"Attribute names in '{what}' must be non-empty strings, got {name!r}")


def _capacity(flag: bool) -> str:
    return (ReturnConsumedCapacity.TOTAL if flag else ReturnConsumedCapacity.NONE).value


def _capacity_units(value: Optional[int], default: int, what: str) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"'{what}' must be a positive integer, got {value!r}")
    return value


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping) or not value:
        raise ValidationError(f"'{what}' must be a non-empty mapping of attribute name to value")
    return value


# =============================================================================
# Table operations
# =============================================================================

def create_table_payload(
    table: str,
    fields: Any,
    primary: Any,
    read_capacity: Optional[int] = None,
    write_capacity: Optional[int] = None,
) -> Dict[str, Any]:
    """Build a CreateTable payload.

    Args:
        table: Table name
        fields: Attribute definitions as name/type pairs; type defaults to S
        primary: Key schema as name/role pairs; role defaults to HASH
        read_capacity: Read capacity units (default 5)
        write_capacity: Write capacity units (default 5)

    Raises:
        ValidationError: Bad table name, unknown type or role, a primary
            key name that is not declared in ``fields``, or a capacity below 1
    """
    validate_table_name(table)

    definitions: List[AttributeDefinition] = []
    for name, attr_type in split_pairs(fields, 'fields'):
        _require_name(name, "fields")
        attr_type = _coerce_enum(AttributeType, attr_type, AttributeType.STRING, 'attribute type')
        definitions.append(AttributeDefinition(name=name, type=attr_type))
    declared = {d.name for d in definitions}

    key_schema: List[KeySchemaElement] = []
    for name, role in split_pairs(primary, 'primary'):
        _require_name(name, "primary")
        if name not in declared:
            raise ValidationError(f"Unknown field {name!r} in primary key", {'field': name})
        role = _coerce_enum(KeyType, role, KeyType.HASH, 'key type')
        key_schema.append(KeySchemaElement(name=name, role=role))
    if not key_schema:
        raise ValidationError("At least one primary key attribute is required")

    return {
        'TableName': table,
        'AttributeDefinitions': [d.to_wire() for d in definitions],
        'KeySchema': [k.to_wire() for k in key_schema],
        'ProvisionedThroughput': {
            'ReadCapacityUnits': _capacity_units(read_capacity, DEFAULT_READ_CAPACITY, 'read_capacity'),
            'WriteCapacityUnits': _capacity_units(write_capacity, DEFAULT_WRITE_CAPACITY, 'write_capacity'),
        },
    }


def describe_table_payload(table: str) -> Dict[str, Any]:
    return {'TableName': validate_table_name(table)}


def delete_table_payload(table: str) -> Dict[str, Any]:
    return {'TableName': validate_table_name(table)}


def list_tables_payload(start: Optional[str] = None, limit: Optional[int] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    if start is not None:
        payload['ExclusiveStartTableName'] = start
    if limit is not None:
        payload['Limit'] = limit
    return payload


# =============================================================================
# Item operations
# =============================================================================

def put_item_payload(table: str, fields: Mapping[str, Any], capacity: bool = False) -> Dict[str, Any]:
    """Build a PutItem payload; every value in ``fields`` is type-inferred."""
    validate_table_name(table)
    return {
        'TableName': table,
        'Item': encode_item(_require_mapping(fields, 'fields')),
        'ReturnConsumedCapacity': _capacity(capacity),
    }


def update_item_payload(
    table: str,
    item: Mapping[str, Any],
    fields: Mapping[str, Any],
    action: Union[UpdateAction, str, None] = None,
    capacity: bool = False,
) -> Dict[str, Any]:
    """Build an UpdateItem payload.

    Args:
        table: Table name
        item: Key of the item to update
        fields: Attributes to write
        action: PUT (default), ADD or DELETE, applied to every field
        capacity: Request consumed capacity in the response
    """
    validate_table_name(table)
    update_action = _coerce_enum(UpdateAction, action, UpdateAction.PUT, 'update action')
    return {
        'TableName': table,
        'Key': encode_item(_require_mapping(item, 'item')),
        'AttributeUpdates': {
            name: {'Action': update_action.value, 'Value': to_attribute(value)}
            for name, value in _require_mapping(fields, 'fields').items()
        },
        'ReturnConsumedCapacity': _capacity(capacity),
    }


def delete_item_payload(table: str, item: Mapping[str, Any], capacity: bool = False) -> Dict[str, Any]:
    validate_table_name(table)
    return {
        'TableName': table,
        'Key': encode_item(_require_mapping(item, 'item')),
        'ReturnConsumedCapacity': _capacity(capacity),
    }


def _key_maps(keys: Any, table: str) -> List[Dict[str, Any]]:
    # A list of mappings is taken as-is (composite keys); anything else is a
    # flat name/value list where each pair is one single-attribute key.
    if isinstance(keys, Sequence) and not isinstance(keys, (str, bytes)) and keys \
            and all(isinstance(k, Mapping) for k in keys):
        return [encode_item(k) for k in keys]
    maps = []
    for name, value in split_pairs(keys, f"items[{table!r}]"):
        if value is None:
            raise ValidationError(f"Key {name!r} for table {table!r} has no value")
        maps.append({name: to_attribute(value)})
    return maps


def batch_get_item_payload(items: Mapping[str, Any], capacity: bool = False) -> Dict[str, Any]:
    """Build a BatchGetItem payload.

    Args:
        items: ``{table: keys}`` where keys is a flat name/value list
            (``['id', 1, 'id', 2]``) or a list of key mappings
        capacity: Request consumed capacity in the response
    """
    if not isinstance(items, Mapping) or not items:
        raise ValidationError("'items' must map at least one table name to its keys")
    request_items = {}
    for table, keys in items.items():
        validate_table_name(table)
        request_items[table] = {'Keys': _key_maps(keys, table)}
    return {
        'RequestItems': request_items,
        'ReturnConsumedCapacity': _capacity(capacity),
    }


def _condition(spec: FilterSpec) -> ScanCondition:
    if isinstance(spec, ScanCondition):
        return spec
    if not isinstance(spec, Mapping) or 'field' not in spec:
        raise ValidationError(f"Filter entries need at least a 'field': {spec!r}")
    compare = _coerce_enum(ComparisonOperator, spec.get('compare'), ComparisonOperator.EQ, 'comparison operator')
    return ScanCondition(field=spec['field'], value=spec.get('value'), compare=compare)


def _filter_values(condition: ScanCondition) -> List[Dict[str, Any]]:
    if condition.compare.takes_no_value:
        return []
    if condition.compare.takes_value_list:
        if not isinstance(condition.value, (list, tuple)):
            raise ValidationError(
                f"{condition.compare.value} on {condition.field!r} needs a list of values"
            )
        return [to_attribute(v) for v in condition.value]
    return [to_attribute(condition.value)]


def scan_payload(
    table: str,
    fields: Optional[Sequence[str]] = None,
    limit: Optional[int] = None,
    filter: Optional[Iterable[FilterSpec]] = None,
    capacity: bool = False,
) -> Dict[str, Any]:
    """Build a Scan payload.

    Args:
        table: Table name
        fields: Attribute names to return (all when omitted)
        limit: Items to evaluate per page
        filter: Conditions as ScanCondition or ``{field, value, compare}``
            dicts; ``compare`` defaults to EQ
        capacity: Request consumed capacity in the response
    """
    validate_table_name(table)
    payload: Dict[str, Any] = {
        'TableName': table,
        'ReturnConsumedCapacity': _capacity(capacity),
    }
    if fields:
        payload['AttributesToGet'] = list(fields)
    if limit is not None:
        payload['Limit'] = limit

    scan_filter = {}
    for spec in filter or ():
        condition = _condition(spec)
        entry: Dict[str, Any] = {'ComparisonOperator': condition.compare.value}
        values = _filter_values(condition)
        if values:
            entry['AttributeValueList'] = values
        scan_filter[condition.field] = entry
    if scan_filter:
        payload['ScanFilter'] = scan_filter
    return payload


# =============================================================================
# Envelope
# =============================================================================

def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps_payload(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, default=_json_default, separators=(',', ':'))


class RequestBuilder:
    """Wraps operation payloads into signed OperationRequests."""

    def __init__(self, config: DynamoDBConfig, signer: RequestSigner):
        self.config = config
        self.signer = signer

    def make_request(self, operation: str, payload: Mapping[str, Any]) -> OperationRequest:
        """Serialize a payload and attach target, date, content and auth headers.

        Args:
            operation: Wire operation name, e.g. ``CreateTable``
            payload: Operation payload

        Returns:
            A signed, immutable OperationRequest
        """
        url = self.config.get_endpoint_url()
        target = self.config.get_target(operation)
        body = dumps_payload(payload)
        headers = {
            'Host': self.config.get_host(),
            'X-Amz-Target': target,
            'Content-Type': CONTENT_TYPE,
            'Content-Length': str(len(body.encode('utf-8'))),
        }
        signed = self.signer.sign_headers('POST', url, headers, body)
        # Added after signing: SigV4 signs X-Amz-Date and would rewrite a Date header
        signed['Date'] = http_date()
        logger.debug(f"Built {operation} request ({headers['Content-Length']} bytes)")
        return OperationRequest(
            operation=operation,
            target=target,
            url=url,
            body=body,
            headers=signed,
            table_name=payload.get('TableName'),
        )
