"""Collection repository interfaces.

``ICollectionLookup`` is the narrow contract the product core consumes:
"does collection X exist, and is it active?", answered inside the
caller's transaction.  ``ICollectionRepository`` adds the CRUD and
uniqueness look-ups used by the collection service.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.collections.models import Collection


class ICollectionLookup(ABC):
    """Read-only collection resolution for other modules."""

    @abstractmethod
    def resolve(self, id: UUID) -> Optional[Collection]:
        """Return the collection locked for the current transaction, or ``None``."""


class ICollectionRepository(IRepository["Collection"], ICollectionLookup):
    """Repository contract for the Collection aggregate."""

    @abstractmethod
    def list_active(self) -> List[Collection]:
        """List collections flagged as active."""

    @abstractmethod
    def find_conflicting(
        self, name: str, slug: str, exclude_id: Optional[UUID] = None
    ) -> Optional[Collection]:
        """Return a collection (other than ``exclude_id``) using ``name`` or ``slug``."""

    @abstractmethod
    def has_products(self, id: UUID) -> bool:
        """Whether any product references the collection."""
