"""
Models for the DynamoDB client.

Provides the wire enumerations, the explicitly tagged AttributeValue, the
CreateTable schema entries, scan conditions and the OperationRequest carried
by the transport.
"""

from .attributes import AttributeDefinition, AttributeValue, KeySchemaElement, ScanCondition
from .enums import (
    AttributeType,
    ComparisonOperator,
    KeyType,
    ReturnConsumedCapacity,
    TableStatus,
    UpdateAction,
)
from .request import OperationRequest

__all__ = [
    # Enums
    "AttributeType",
    "ComparisonOperator",
    "KeyType",
    "ReturnConsumedCapacity",
    "TableStatus",
    "UpdateAction",

    # Models
    "AttributeDefinition",
    "AttributeValue",
    "KeySchemaElement",
    "OperationRequest",
    "ScanCondition",
]
