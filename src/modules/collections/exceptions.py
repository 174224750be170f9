"""Collection domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class CollectionNotFound(Exception):
    """The requested collection does not exist."""


class CollectionAlreadyExists(Exception):
    """Another collection already uses the same name or slug."""


class CollectionHasProducts(Exception):
    """The collection is still referenced by products and cannot be deleted."""
