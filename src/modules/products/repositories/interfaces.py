"""Product and SKU repository interfaces.

Extend ``IRepository[T]`` with the look-ups the lifecycle service needs:
row-locked reads, SKU loading per product and bulk SKU replacement.
All writes run inside the caller's ``transaction.atomic`` block.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional, Sequence
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product, Sku


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional["Product"]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Used by every command so concurrent writers on the same product
        serialise instead of interleaving.  Returns ``None`` if absent.
        """


class ISkuRepository(IRepository["Sku"]):
    """Repository contract for SKUs; always scoped to one owning product."""

    @abstractmethod
    def list_for_product(self, product_id: UUID) -> List[Sku]:
        """All SKUs owned by the product, fully loaded."""

    @abstractmethod
    def count_for_product(self, product_id: UUID) -> int:
        """Number of SKUs owned by the product."""

    @abstractmethod
    def bulk_create(self, skus: Sequence[Sku]) -> List[Sku]:
        """Insert many SKUs in one statement."""

    @abstractmethod
    def delete_for_product(self, product_id: UUID) -> int:
        """Delete every SKU owned by the product; return how many were removed."""
