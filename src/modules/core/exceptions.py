"""Cross-module exceptions and identifier parsing.

Every catalog aggregate is keyed by a UUIDv7.  Services parse incoming
identifiers up front so a malformed id is reported as a format error
rather than silently treated as "not found".
"""

from __future__ import annotations

from uuid import UUID


class InvalidIdentifier(Exception):
    """An identifier does not have the expected UUID format."""


def parse_id(value: object, message: str) -> UUID:
    """Return ``value`` as a ``UUID`` or raise ``InvalidIdentifier(message)``."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidIdentifier(message) from exc
