"""Django ORM implementations of the Product and SKU repositories.

Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising, and the Service Layer decides how a missing entity
is reported.  Identifiers are expected to be parsed by the service.
"""

from __future__ import annotations

from typing import List, Optional, Sequence
from uuid import UUID

import structlog

from modules.products.models import Product, Sku
from modules.products.repositories.interfaces import (
    IProductRepository,
    ISkuRepository,
)

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product with its SKUs prefetched."""
        return (
            Product.objects.select_related("collection")
            .prefetch_related("skus")
            .filter(id=id)
            .first()
        )

    def get_for_update(self, id: str) -> Optional[Product]:
        return Product.objects.select_for_update().filter(id=id).first()

    def list(self) -> List[Product]:
        return list(
            Product.objects.select_related("collection").prefetch_related("skus")
        )

    def save(self, entity: Product) -> Product:
        entity.save()
        logger.info(
            "product.saved",
            product_id=str(entity.id),
            status=entity.status,
            purchasable=entity.purchasable,
        )
        return entity

    def delete(self, id: str) -> bool:
        deleted, _ = Product.objects.filter(id=id).delete()
        return deleted > 0


class SkuDjangoRepository(ISkuRepository):
    """Concrete SKU repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Sku]:
        return Sku.objects.filter(id=id).first()

    def list(self) -> List[Sku]:
        return list(Sku.objects.all())

    def list_for_product(self, product_id: UUID) -> List[Sku]:
        return list(Sku.objects.filter(product_id=product_id))

    def count_for_product(self, product_id: UUID) -> int:
        return Sku.objects.filter(product_id=product_id).count()

    def save(self, entity: Sku) -> Sku:
        entity.save()
        return entity

    def bulk_create(self, skus: Sequence[Sku]) -> List[Sku]:
        created = Sku.objects.bulk_create(list(skus))
        logger.info("sku.bulk_created", count=len(created))
        return created

    def delete(self, id: str) -> bool:
        deleted, _ = Sku.objects.filter(id=id).delete()
        return deleted > 0

    def delete_for_product(self, product_id: UUID) -> int:
        deleted, _ = Sku.objects.filter(product_id=product_id).delete()
        logger.info("sku.deleted_for_product", product_id=str(product_id), count=deleted)
        return deleted
