"""
Core components of the DynamoDB client:

- AttributeCodec: native values <-> tagged wire attributes
- Request builder: per-operation payloads and the signed envelope
- PaginationEngine: repeat-until-complete driver for multi-round-trip calls
- DynamoDBClient: the public operation surface
"""

from .client import DynamoDBClient, create_client
from .codec import AttributeCodec, decode, decode_item, encode, encode_item, to_attribute
from .pagination import PageState, PaginationEngine
from .request_builder import RequestBuilder
from .signer import RequestSigner
from .transport import HttpTransport, Transport, map_service_error

__all__ = [
    "AttributeCodec",
    "DynamoDBClient",
    "HttpTransport",
    "PageState",
    "PaginationEngine",
    "RequestBuilder",
    "RequestSigner",
    "Transport",
    "create_client",
    "decode",
    "decode_item",
    "encode",
    "encode_item",
    "map_service_error",
    "to_attribute",
]
