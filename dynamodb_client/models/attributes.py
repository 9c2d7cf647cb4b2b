"""
Attribute and key schema models

Typed building blocks that callers may hand to the client instead of plain
Python values:

- AttributeValue: an explicitly tagged value, bypassing type inference
- AttributeDefinition / KeySchemaElement: the pieces of a CreateTable schema
- ScanCondition: one entry of a scan filter
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import AttributeType, ComparisonOperator, KeyType


class AttributeValue(BaseModel):
    """A value with a caller-chosen type tag.

    Type inference looks at the Python type of a value; wrap it in an
    AttributeValue when that would pick the wrong tag, e.g. a numeric string
    that must be stored as a number::

        AttributeValue(type=AttributeType.NUMBER, value="5")
    """

    type: AttributeType
    value: Any

    model_config = ConfigDict(frozen=True)

    @classmethod
    def string(cls, value: Any) -> 'AttributeValue':
        return cls(type=AttributeType.STRING, value=str(value))

    @classmethod
    def number(cls, value: Any) -> 'AttributeValue':
        return cls(type=AttributeType.NUMBER, value=value)

    @classmethod
    def binary(cls, value: bytes) -> 'AttributeValue':
        return cls(type=AttributeType.BINARY, value=value)


class AttributeDefinition(BaseModel):
    """(name, type) pair describing a key attribute in CreateTable."""

    name: str = Field(min_length=1)
    type: AttributeType = AttributeType.STRING

    model_config = ConfigDict(frozen=True)

    def to_wire(self) -> Dict[str, str]:
        return {'AttributeName': self.name, 'AttributeType': self.type.value}


class KeySchemaElement(BaseModel):
    """(name, role) pair of a table's primary key."""

    name: str = Field(min_length=1)
    role: KeyType = KeyType.HASH

    model_config = ConfigDict(frozen=True)

    def to_wire(self) -> Dict[str, str]:
        return {'AttributeName': self.name, 'KeyType': self.role.value}


class ScanCondition(BaseModel):
    """A single scan filter condition.

    ``value`` is ignored for NULL / NOT_NULL and must be a sequence for IN
    and BETWEEN.
    """

    field: str = Field(min_length=1)
    value: Optional[Any] = None
    compare: ComparisonOperator = ComparisonOperator.EQ

    model_config = ConfigDict(frozen=True)
