"""Django ORM implementation of the Collection repository.

Look-ups follow the Null Object pattern: they return ``None`` instead of
raising, and the service decides how a missing collection is reported.
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

import structlog
from django.db.models import Q

from modules.collections.models import Collection
from modules.collections.repositories.interfaces import ICollectionRepository

logger = structlog.get_logger(__name__)


class CollectionDjangoRepository(ICollectionRepository):
    """Concrete Collection repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Collection]:
        return Collection.objects.filter(id=id).first()

    def resolve(self, id: UUID) -> Optional[Collection]:
        """Fetch with ``SELECT FOR UPDATE`` so the active flag cannot change
        under a product transaction that depends on it."""
        return Collection.objects.select_for_update().filter(id=id).first()

    def list(self) -> List[Collection]:
        return list(Collection.objects.all())

    def list_active(self) -> List[Collection]:
        return list(Collection.objects.filter(is_active=True))

    def save(self, entity: Collection) -> Collection:
        entity.save()
        logger.info(
            "collection.saved",
            collection_id=str(entity.id),
            slug=entity.slug,
        )
        return entity

    def delete(self, id: str) -> bool:
        deleted, _ = Collection.objects.filter(id=id).delete()
        return deleted > 0

    def find_conflicting(
        self, name: str, slug: str, exclude_id: Optional[UUID] = None
    ) -> Optional[Collection]:
        queryset = Collection.objects.filter(Q(name=name) | Q(slug=slug))
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.first()

    def has_products(self, id: UUID) -> bool:
        from modules.products.models import Product

        return Product.objects.filter(collection_id=id).exists()
