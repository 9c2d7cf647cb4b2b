"""
DynamoDB Client Utilities

Small helpers shared by the request builder and the client:

- Table name validation (service naming rules)
- HTTP date formatting for the Date header
- Splitting caller-supplied name/value lists into pairs
"""

import logging
import re
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

TABLE_NAME_MIN_LENGTH = 3
TABLE_NAME_MAX_LENGTH = 255
_INVALID_TABLE_CHARS = re.compile(r'[^a-zA-Z0-9_.-]')


def validate_table_name(name: Optional[str]) -> str:
    """Validate a table name against the service naming rules.

    Args:
        name: Table name to check

    Returns:
        The name, unchanged

    Raises:
        ValidationError: If the name is undefined, too short, too long or
            contains characters outside ``[a-zA-Z0-9_.-]``
    """
    if name is None:
        raise ValidationError("Table name is undefined")
    if not isinstance(name, str):
        raise ValidationError(f"Table name must be a string, got {type(name).__name__}")
    if len(name) < TABLE_NAME_MIN_LENGTH:
        raise ValidationError(f"Table name too short: {name!r}", {'table': name})
    if len(name) > TABLE_NAME_MAX_LENGTH:
        raise ValidationError(f"Table name too long ({len(name)} characters)", {'table': name[:32] + '...'})
    if _INVALID_TABLE_CHARS.search(name):
        raise ValidationError(f"Invalid characters in table name: {name!r}", {'table': name})
    return name


def http_date(now: Optional[datetime] = None) -> str:
    """Format a timestamp as an RFC 7231 date, e.g. ``Sun, 18 Oct 2026 10:00:00 GMT``.

    Naive datetimes are assumed to already be in UTC.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return format_datetime(now.astimezone(timezone.utc), usegmt=True)


def split_pairs(entries: Any, what: str) -> List[Tuple[Any, Optional[Any]]]:
    """Normalize a name/value list into (name, value) tuples.

    Accepted shapes:
    - a mapping: ``{'id': 'S', 'ts': 'N'}``
    - a flat list: ``['id', 'S', 'ts', 'N']``; a trailing name without a
      partner gets ``None`` so the caller can apply its default
    - a list of names and/or tuples: ``['id', ('ts', 'N')]``

    Args:
        entries: The caller's list or mapping
        what: Argument name, used in error messages

    Raises:
        ValidationError: If entries is missing or not one of the shapes above
    """
    if entries is None:
        raise ValidationError(f"'{what}' is required")
    if isinstance(entries, Mapping):
        return list(entries.items())
    if isinstance(entries, (str, bytes)) or not isinstance(entries, Sequence):
        raise ValidationError(f"'{what}' must be a list of pairs or a mapping")

    if any(isinstance(e, (tuple, list)) for e in entries):
        pairs = []
        for entry in entries:
            if isinstance(entry, (tuple, list)):
                if not 1 <= len(entry) <= 2:
                    raise ValidationError(f"'{what}' entries must be (name, value) pairs: {entry!r}")
                pairs.append((entry[0], entry[1] if len(entry) == 2 else None))
            else:
                pairs.append((entry, None))
        return pairs

    flat = list(entries)
    return [
        (flat[i], flat[i + 1] if i + 1 < len(flat) else None)
        for i in range(0, len(flat), 2)
    ]
