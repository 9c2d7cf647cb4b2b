"""
Wire enumerations

String enums for every closed vocabulary that appears in a request or
response body. Values are the exact strings the service expects.
"""

from enum import Enum


class AttributeType(str, Enum):
    """Type tags of an attribute value on the wire."""
    STRING = "S"
    NUMBER = "N"
    BINARY = "B"
    STRING_SET = "SS"
    NUMBER_SET = "NS"
    BINARY_SET = "BS"

    @property
    def is_set(self) -> bool:
        return self in (AttributeType.STRING_SET, AttributeType.NUMBER_SET, AttributeType.BINARY_SET)


class KeyType(str, Enum):
    """Role an attribute plays in a table's primary key."""
    HASH = "HASH"
    RANGE = "RANGE"


class UpdateAction(str, Enum):
    """Action applied to an attribute by UpdateItem."""
    PUT = "PUT"
    ADD = "ADD"
    DELETE = "DELETE"


class ComparisonOperator(str, Enum):
    """Operators accepted in a ScanFilter condition."""
    EQ = "EQ"
    NE = "NE"
    LE = "LE"
    LT = "LT"
    GE = "GE"
    GT = "GT"
    NOT_NULL = "NOT_NULL"
    NULL = "NULL"
    CONTAINS = "CONTAINS"
    NOT_CONTAINS = "NOT_CONTAINS"
    BEGINS_WITH = "BEGINS_WITH"
    IN = "IN"
    BETWEEN = "BETWEEN"

    @property
    def takes_no_value(self) -> bool:
        return self in (ComparisonOperator.NULL, ComparisonOperator.NOT_NULL)

    @property
    def takes_value_list(self) -> bool:
        return self in (ComparisonOperator.IN, ComparisonOperator.BETWEEN)


class ReturnConsumedCapacity(str, Enum):
    TOTAL = "TOTAL"
    NONE = "NONE"


class TableStatus(str, Enum):
    """Lifecycle states reported by DescribeTable."""
    CREATING = "CREATING"
    UPDATING = "UPDATING"
    DELETING = "DELETING"
    ACTIVE = "ACTIVE"
