"""
Attribute type-inference codec

Converts native Python values to the tagged-attribute representation used on
the wire (``{"S": "text"}``, ``{"NS": [1, 2]}``...) and back.

Inference rules, in priority order:

1. AttributeValue             -> its own tag
2. list / tuple / set         -> BS if any member is bytes-like,
                                 else SS if any member is a str,
                                 else NS if every member is a number,
                                 else SS (empty sequences included)
3. bytes / bytearray / view   -> B (base64 text on the wire)
4. int / float / Decimal      -> N (bool is sent as 1 / 0)
5. anything else              -> S (str(value))

``encode`` reports numbers as the native value (``("N", 5)``); the wire maps
built by ``to_attribute`` and ``encode_item`` carry every N and NS member as
number text, e.g. ``{"N": "5"}``.

Classification is by Python type only. A numeric-looking string such as
``"5"`` stays a string; wrap it in ``AttributeValue.number("5")`` to send it as
a number.
"""

import base64
import binascii
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Tuple

from ..exceptions import ValidationError
from ..models import AttributeType, AttributeValue

logger = logging.getLogger(__name__)

_SEQUENCE_TYPES = (list, tuple, set, frozenset)
_BINARY_TYPES = (bytes, bytearray, memoryview)
_INTEGER_TEXT = re.compile(r'^[+-]?\d+$')


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal))


def _number_wire(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    return value


def _number_text(value: Any) -> str:
    return str(_number_wire(value))


def _binary_wire(value: Any) -> str:
    if isinstance(value, str):
        value = value.encode('utf-8')
    return base64.b64encode(bytes(value)).decode('ascii')


def _string_wire(value: Any) -> str:
    if isinstance(value, _BINARY_TYPES):
        return bytes(value).decode('utf-8', errors='replace')
    return value if isinstance(value, str) else str(value)


def _parse_number(value: Any) -> Any:
    if _is_number(value):
        return value
    text = str(value).strip()
    if _INTEGER_TEXT.match(text):
        return int(text)
    try:
        return Decimal(text)
    except InvalidOperation as e:
        raise ValidationError(f"Invalid number on the wire: {value!r}", original_error=e) from e


def _parse_binary(value: Any) -> bytes:
    if isinstance(value, _BINARY_TYPES):
        return bytes(value)
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid base64 binary value on the wire: {value!r}", original_error=e) from e


class AttributeCodec:
    """Encode native values into tagged attributes and decode them back.

    Stateless; the module-level functions below delegate to a shared instance.
    """

    def infer_type(self, value: Any) -> AttributeType:
        """Pick the type tag for a native value."""
        if isinstance(value, AttributeValue):
            return value.type

        if isinstance(value, _SEQUENCE_TYPES):
            members = list(value)
            if any(isinstance(m, _BINARY_TYPES) for m in members):
                return AttributeType.BINARY_SET
            if any(isinstance(m, str) for m in members):
                return AttributeType.STRING_SET
            if members and all(_is_number(m) for m in members):
                return AttributeType.NUMBER_SET
            return AttributeType.STRING_SET

        if isinstance(value, _BINARY_TYPES):
            return AttributeType.BINARY
        if _is_number(value):
            return AttributeType.NUMBER
        return AttributeType.STRING

    def encode(self, value: Any) -> Tuple[str, Any]:
        """Encode a native value.

        Returns:
            ``(tag, wire_value)``, e.g. ``("N", 5)`` or ``("SS", ["a", "b"])``
        """
        attr_type = self.infer_type(value)
        raw = value.value if isinstance(value, AttributeValue) else value
        return attr_type.value, self._to_wire(attr_type, raw)

    def _to_wire(self, attr_type: AttributeType, raw: Any) -> Any:
        if attr_type is AttributeType.NUMBER:
            return _number_wire(raw)
        if attr_type is AttributeType.BINARY:
            return _binary_wire(raw)
        if attr_type is AttributeType.STRING:
            return _string_wire(raw)

        members = list(raw) if isinstance(raw, _SEQUENCE_TYPES) else [raw]
        if attr_type is AttributeType.NUMBER_SET:
            return [_number_wire(m) for m in members]
        if attr_type is AttributeType.BINARY_SET:
            return [_binary_wire(m) for m in members]
        return [_string_wire(m) for m in members]

    def decode(self, tag: str, wire_value: Any) -> Any:
        """Decode a wire value back into a native value.

        Besides the six tags produced by ``encode``, this also understands the
        BOOL, NULL, M and L tags the service may return in items. Unknown tags
        yield the raw value.
        """
        if tag == 'S':
            return wire_value
        if tag == 'N':
            return _parse_number(wire_value)
        if tag == 'B':
            return _parse_binary(wire_value)
        if tag == 'SS':
            return list(wire_value)
        if tag == 'NS':
            return [_parse_number(v) for v in wire_value]
        if tag == 'BS':
            return [_parse_binary(v) for v in wire_value]
        if tag == 'BOOL':
            return bool(wire_value)
        if tag == 'NULL':
            return None
        if tag == 'M':
            return self.decode_item(wire_value)
        if tag == 'L':
            return [self.decode_attribute(v) for v in wire_value]

        logger.debug(f"Unknown attribute tag '{tag}', returning raw value")
        return wire_value

    def to_attribute(self, value: Any) -> Dict[str, Any]:
        """Encode a value as a single-key wire map, e.g. ``{"S": "text"}`` or ``{"N": "5"}``."""
        tag, wire_value = self.encode(value)
        if tag == AttributeType.NUMBER.value:
            wire_value = _number_text(wire_value)
        elif tag == AttributeType.NUMBER_SET.value:
            wire_value = [_number_text(v) for v in wire_value]
        return {tag: wire_value}

    def decode_attribute(self, attribute: Mapping[str, Any]) -> Any:
        """Decode a single-key wire map."""
        if not isinstance(attribute, Mapping) or len(attribute) != 1:
            raise ValidationError(f"Malformed attribute value: {attribute!r}")
        (tag, wire_value), = attribute.items()
        return self.decode(tag, wire_value)

    def encode_item(self, fields: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
        """Encode every value of a ``{name: value}`` mapping."""
        return {name: self.to_attribute(value) for name, value in fields.items()}

    def decode_item(self, item: Mapping[str, Mapping[str, Any]]) -> Dict[str, Any]:
        """Decode a ``{name: {tag: value}}`` item into ``{name: value}``."""
        return {name: self.decode_attribute(attribute) for name, attribute in item.items()}


_codec = AttributeCodec()


def encode(value: Any) -> Tuple[str, Any]:
    return _codec.encode(value)


def decode(tag: str, wire_value: Any) -> Any:
    return _codec.decode(tag, wire_value)


def to_attribute(value: Any) -> Dict[str, Any]:
    return _codec.to_attribute(value)


def encode_item(fields: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    return _codec.encode_item(fields)


def decode_item(item: Mapping[str, Mapping[str, Any]]) -> Dict[str, Any]:
    return _codec.decode_item(item)
