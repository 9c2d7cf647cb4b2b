"""
DynamoDB JSON API client

Public entry points for table lifecycle, item and scan operations. Each
method builds its payload with the request builder and either performs a
single round trip or hands the payload to the pagination engine together with
the operation's continuation and completion rules.

Streaming operations (each_table, batch_get_item, scan) deliver decoded
results through a callback, in the order the service returns them. An error
is raised once and ends the operation; no callback runs after it.
"""

import json
import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..config import DynamoDBConfig
from ..exceptions import ServiceError, ValidationError
from ..models import OperationRequest, TableStatus, UpdateAction
from . import request_builder as builder
from .codec import decode_item
from .pagination import PageState, PaginationEngine
from .request_builder import FilterSpec, RequestBuilder
from .signer import RequestSigner
from .transport import HttpTransport, Transport

logger = logging.getLogger(__name__)

TableCallback = Callable[[str], None]
ItemCallback = Callable[[Dict[str, Any]], None]
BatchItemCallback = Callable[[str, Dict[str, Any]], None]


def _expect(data: Dict[str, Any], key: str, operation: str) -> Any:
    try:
        return data[key]
    except (KeyError, TypeError):
        raise ServiceError(
            f"Unexpected response shape: missing '{key}'",
            operation=operation,
        ) from None


class DynamoDBClient:
    """
    Client for the DynamoDB 2012-08-10 JSON API.

    Holds only immutable configuration, a signer and a transport, so one
    instance can serve calls from several threads; every call keeps its own
    payload and pagination state.

    Example:
        client = DynamoDBClient(DynamoDBConfig.for_local_development())
        client.create_table(table='users', fields=['id', 'S'], primary=['id'])
        client.wait_for_table(table='users')
        client.put_item(table='users', fields={'id': 'u1', 'age': 42})
        client.scan(print, table='users')
    """

    def __init__(
        self,
        config: Optional[DynamoDBConfig] = None,
        transport: Optional[Transport] = None,
        signer: Optional[RequestSigner] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """Initialize the client.

        Args:
            config: DynamoDB configuration (read from the environment when omitted)
            transport: Transport collaborator (requests-based by default)
            signer: Request signer (SigV4 from config credentials by default)
            sleep: Sleep function used between pagination/poll rounds
        """
        self.config = config or DynamoDBConfig.from_env()
        self.signer = signer or RequestSigner(self.config)
        self.transport = transport or HttpTransport(self.config)
        self.builder = RequestBuilder(self.config, self.signer)
        self.sleep = sleep or time.sleep

        if self.config.enable_debug_logging:
            logging.getLogger('dynamodb_client').setLevel(logging.DEBUG)

    # -------------------------------------------------------------------------
    # Round trips
    # -------------------------------------------------------------------------

    def _send(self, request: OperationRequest) -> Dict[str, Any]:
        """Issue one request and decode the JSON body."""
        logger.debug(f"Sending {request.operation} to {request.url}")
        body = self.transport.request(request)
        try:
            data = json.loads(body) if body else {}
        except ValueError as e:
            raise ServiceError(
                f"Response body is not valid JSON: {e}",
                operation=request.operation,
                original_error=e,
            ) from e
        if not isinstance(data, dict):
            raise ServiceError("Response body is not a JSON object", operation=request.operation)
        return data

    def _call(self, operation: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return self._send(self.builder.make_request(operation, payload))

    def _engine(self, policy) -> PaginationEngine:
        return PaginationEngine(self._send, policy, self.sleep)

    def _step(self, state: PageState) -> OperationRequest:
        return self.builder.make_request(state.operation, state.payload)

    # -------------------------------------------------------------------------
    # Table operations
    # -------------------------------------------------------------------------

    def create_table(
        self,
        table: str,
        fields: Any,
        primary: Any,
        read_capacity: Optional[int] = None,
        write_capacity: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Create a table. It is usually not ACTIVE yet; see wait_for_table.

        Args:
            table: Table name
            fields: Attribute definitions, e.g. ``['id', 'S', 'ts', 'N']``
                (type defaults to S)
            primary: Key schema, e.g. ``['id', 'HASH', 'ts', 'RANGE']``
                (role defaults to HASH, so ``['id']`` is a single hash key)
            read_capacity: Read capacity units (default 5)
            write_capacity: Write capacity units (default 5)

        Returns:
            The TableDescription from the response

        Raises:
            ValidationError: If the schema is malformed; nothing is sent
        """
        payload = builder.create_table_payload(table, fields, primary, read_capacity, write_capacity)
        data = self._call('CreateTable', payload)
        logger.info(f"Created table {table}")
        return _expect(data, 'TableDescription', 'CreateTable')

    def describe_table(self, table: str) -> Dict[str, Any]:
        """Return the table description (``Table`` in the response)."""
        data = self._call('DescribeTable', builder.describe_table_payload(table))
        return _expect(data, 'Table', 'DescribeTable')

    def delete_table(self, table: str) -> Dict[str, Any]:
        """Delete a table entirely and return its TableDescription."""
        data = self._call('DeleteTable', builder.delete_table_payload(table))
        logger.info(f"Deleted table {table}")
        return _expect(data, 'TableDescription', 'DeleteTable')

    def wait_for_table(
        self,
        table: str,
        status: Union[TableStatus, str] = TableStatus.ACTIVE,
    ) -> Dict[str, Any]:
        """Poll DescribeTable until the table reports ``status``.

        The pause between polls and the attempt ceiling come from
        ``config.wait_policy()``; by default there is no ceiling.

        Returns:
            The last table description

        Raises:
            PaginationLimitError: If wait_max_attempts is set and exhausted
        """
        try:
            target = TableStatus(status).value
        except ValueError:
            raise ValidationError(f"Unknown table status {status!r}") from None
        state = PageState('DescribeTable', payload=builder.describe_table_payload(table))

        def handle(state: PageState, data: Dict[str, Any]) -> None:
            state.token = _expect(data, 'Table', 'DescribeTable')
            logger.debug(f"Table {table} status: {state.token.get('TableStatus')}")

        def is_complete(state: PageState) -> bool:
            return state.token.get('TableStatus') == target

        self._engine(self.config.wait_policy()).run(state, self._step, handle, is_complete)
        logger.info(f"Table {table} is {target} after {state.rounds} poll(s)")
        return state.token

    def each_table(
        self,
        callback: TableCallback,
        start: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> int:
        """Call ``callback(name)`` for every table, following pagination.

        Args:
            callback: Called once per table name, in service order
            start: Table name to start after
            limit: Page size requested from the service

        Returns:
            Number of table names delivered
        """
        state = PageState('ListTables', payload=builder.list_tables_payload(start, limit))

        def handle(state: PageState, data: Dict[str, Any]) -> None:
            for name in data.get('TableNames', []):
                callback(name)
                state.count += 1
            state.token = data.get('LastEvaluatedTableName')
            if state.token is not None:
                state.payload['ExclusiveStartTableName'] = state.token

        self._engine(self.config.pagination_policy()).run(
            state, self._step, handle, lambda s: s.token is None
        )
        return state.count

    def list_tables(self, start: Optional[str] = None, limit: Optional[int] = None) -> List[str]:
        """Return the names of all tables."""
        tables: List[str] = []
        self.each_table(tables.append, start=start, limit=limit)
        return tables

    # -------------------------------------------------------------------------
    # Item operations
    # -------------------------------------------------------------------------

    def put_item(self, table: str, fields: Mapping[str, Any], capacity: bool = False) -> Dict[str, Any]:
        """Write a single item.

        Args:
            table: Table name
            fields: The item as ``{name: value}``; types are inferred
            capacity: Ask for ConsumedCapacity in the response

        Returns:
            The decoded response (ConsumedCapacity when requested)
        """
        data = self._call('PutItem', builder.put_item_payload(table, fields, capacity))
        logger.info(f"Put item in {table}")
        return data

    def update_item(
        self,
        table: str,
        item: Mapping[str, Any],
        fields: Mapping[str, Any],
        action: Union[UpdateAction, str, None] = None,
        capacity: bool = False,
    ) -> Dict[str, Any]:
        """Update attributes of a single item.

        Args:
            table: Table name
            item: Key of the item, as ``{name: value}``
            fields: Attributes to write, as ``{name: value}``
            action: PUT (default), ADD or DELETE
            capacity: Ask for ConsumedCapacity in the response
        """
        data = self._call('UpdateItem', builder.update_item_payload(table, item, fields, action, capacity))
        logger.info(f"Updated item in {table}: {item}")
        return data

    def delete_item(self, table: str, item: Mapping[str, Any], capacity: bool = False) -> Dict[str, Any]:
        """Delete a single item identified by its key."""
        data = self._call('DeleteItem', builder.delete_item_payload(table, item, capacity))
        logger.info(f"Deleted item from {table}: {item}")
        return data

    def batch_get_item(
        self,
        callback: BatchItemCallback,
        items: Mapping[str, Any],
        capacity: bool = False,
    ) -> int:
        """Fetch items from one or more tables, re-requesting unprocessed keys.

        Args:
            callback: Called as ``callback(table_name, item)`` for every item
                returned, across all rounds
            items: ``{table: keys}``; see batch_get_item_payload
            capacity: Ask for ConsumedCapacity in the responses

        Returns:
            Number of items delivered
        """
        state = PageState('BatchGetItem', payload=builder.batch_get_item_payload(items, capacity))

        def handle(state: PageState, data: Dict[str, Any]) -> None:
            for table_name, entries in data.get('Responses', {}).items():
                for entry in entries:
                    callback(table_name, decode_item(entry))
                    state.count += 1
            state.token = data.get('UnprocessedKeys') or {}
            if state.token:
                logger.debug(f"BatchGetItem: {len(state.token)} table(s) with unprocessed keys")
                state.payload['RequestItems'] = state.token

        self._engine(self.config.pagination_policy()).run(
            state, self._step, handle, lambda s: not s.token
        )
        return state.count

    def scan(
        self,
        callback: ItemCallback,
        table: str,
        fields: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
        filter: Optional[Iterable[FilterSpec]] = None,
        capacity: bool = False,
    ) -> int:
        """Scan a whole table, optionally filtered, following LastEvaluatedKey.

        Args:
            callback: Called once per decoded item, in service order
            table: Table name
            fields: Attribute names to return
            limit: Items evaluated per page
            filter: Conditions, e.g. ``[{'field': 'age', 'value': 18, 'compare': 'GE'}]``
            capacity: Ask for ConsumedCapacity in the responses

        Returns:
            Sum of the ``Count`` values reported by the service
        """
        payload = builder.scan_payload(table, fields, limit, filter, capacity)
        if limit is None:
            logger.warning(f"Scan on {table} without Limit - every page is as large as the service allows")
        state = PageState('Scan', payload=payload)

        def handle(state: PageState, data: Dict[str, Any]) -> None:
            for entry in data.get('Items', []):
                callback(decode_item(entry))
            state.count += int(data.get('Count', 0))
            state.token = data.get('LastEvaluatedKey') or None
            if state.token:
                state.payload['ExclusiveStartKey'] = state.token

        self._engine(self.config.pagination_policy()).run(
            state, self._step, handle, lambda s: not s.token
        )
        return state.count


def create_client(config: Optional[DynamoDBConfig] = None, **kwargs) -> DynamoDBClient:
    """
    Factory function to create a DynamoDBClient.

    Args:
        config: DynamoDB configuration (environment-derived when omitted)
        **kwargs: Passed through to DynamoDBClient (transport, signer, sleep)

    Returns:
        Configured DynamoDBClient instance
    """
    return DynamoDBClient(config, **kwargs)
