"""Collection service layer (Use Cases).

Business rules enforced here:
- Name and slug are globally unique (conflict otherwise).
- Slug is derived from the name when the caller does not supply one.
- A collection still referenced by products cannot be deleted.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction

from modules.collections.exceptions import (
    CollectionAlreadyExists,
    CollectionHasProducts,
    CollectionNotFound,
)
from modules.collections.models import Collection
from modules.core.exceptions import parse_id

if TYPE_CHECKING:
    from uuid import UUID

    from modules.collections.dtos import CreateCollectionDTO, UpdateCollectionDTO
    from modules.collections.repositories.interfaces import ICollectionRepository

logger = structlog.get_logger(__name__)


def slugify_name(name: str) -> str:
    """``"Summer Sale 2024!"`` -> ``"summer-sale-2024"``."""
    slug = name.lower().strip()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


class CollectionService:
    """Application service for Collection use-cases."""

    def __init__(self, repository: ICollectionRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_collection(self, dto: CreateCollectionDTO) -> Collection:
        """Raises:
        CollectionAlreadyExists: name or slug already taken.
        """
        slug = dto.slug or slugify_name(dto.name)
        self._check_for_duplicates(dto.name, slug)

        collection = Collection(
            name=dto.name,
            slug=slug,
            description=dto.description,
            is_active=dto.is_active,
            metadata=dict(dto.metadata),
        )
        collection = self._repo.save(collection)
        logger.info("collection.created", collection_id=str(collection.id), slug=slug)
        return collection

    @transaction.atomic
    def update_collection(self, id: str, dto: UpdateCollectionDTO) -> Collection:
        collection = self._get_or_raise(id)

        patch = {
            field: value
            for field, value in dto.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if "name" in patch or "slug" in patch:
            self._check_for_duplicates(
                patch.get("name", collection.name),
                patch.get("slug", collection.slug),
                exclude_id=collection.id,
            )

        for field, value in patch.items():
            setattr(collection, field, value)

        collection = self._repo.save(collection)
        logger.info(
            "collection.updated",
            collection_id=str(collection.id),
            fields=sorted(patch),
        )
        return collection

    @transaction.atomic
    def delete_collection(self, id: str) -> None:
        """Raises:
        CollectionNotFound: no such collection.
        CollectionHasProducts: products still reference it.
        """
        collection = self._get_or_raise(id)
        if self._repo.has_products(collection.id):
            logger.warning("collection.delete_blocked", collection_id=str(collection.id))
            raise CollectionHasProducts(
                "Cannot delete collection with products. Remove all products first."
            )
        self._repo.delete(str(collection.id))
        logger.info("collection.deleted", collection_id=str(collection.id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_collection(self, id: str) -> Collection:
        return self._get_or_raise(id)

    def list_collections(self, active_only: bool = False) -> List[Collection]:
        if active_only:
            return self._repo.list_active()
        return self._repo.list()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_or_raise(self, id: str) -> Collection:
        collection_id = parse_id(id, "Invalid collection ID")
        collection = self._repo.get_by_id(str(collection_id))
        if not collection:
            raise CollectionNotFound("Collection not found")
        return collection

    def _check_for_duplicates(
        self, name: str, slug: str, exclude_id: UUID | None = None
    ) -> None:
        existing = self._repo.find_conflicting(name, slug, exclude_id=exclude_id)
        if not existing:
            return
        if existing.name == name:
            raise CollectionAlreadyExists("Collection name already exists")
        raise CollectionAlreadyExists("Collection slug already exists")
