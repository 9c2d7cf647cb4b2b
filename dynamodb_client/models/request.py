"""Transport-level request built once per round trip."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True)
class OperationRequest:
    """A signed, ready-to-send request.

    Attributes:
        operation: Wire operation name, e.g. ``Scan``
        target: X-Amz-Target header value
        url: Endpoint URL the request is POSTed to
        body: Serialized JSON payload
        headers: All request headers, Authorization included
        method: HTTP method (always POST for this protocol)
        table_name: Table the operation targets, when it names exactly one
    """

    operation: str
    target: str
    url: str
    body: str
    headers: Mapping[str, str] = field(default_factory=dict)
    method: str = "POST"
    table_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'headers', MappingProxyType(dict(self.headers)))
