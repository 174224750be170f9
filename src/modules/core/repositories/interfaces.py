"""Generic repository interface (Dependency Inversion Principle).

``IRepository[T]`` is the contract every catalog repository extends.
Services depend on these abstractions and receive the Django-backed
implementations through their constructors, so the lifecycle logic can
be exercised against doubles that fail on demand.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` is the entity managed by the repository
    (``Product``, ``Sku``, ``Collection``).  Identifiers are passed as
    strings or UUIDs; look-ups return ``None`` rather than raising.
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key."""

    @abstractmethod
    def list(self) -> List[T]:
        """List every entity."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Permanently remove an entity by ID."""
