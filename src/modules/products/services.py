"""Product service layer (Use Cases).

Orchestrates the product lifecycle.  Every command runs inside a single
``transaction.atomic`` block: validation, collection resolution, SKU
synchronisation and the purchasable recomputation commit together, and
any exception rolls all of them back before propagating unchanged.

Business rules enforced here:
- Only the owner may update, delete or restock a product.
- Status/type field requirements (see ``validators``).
- Published products reference an existing, active collection and own
  at least one SKU.
- SKUs are regenerated only when the variant definition changes.
- ``purchasable`` is recomputed on every mutation, SKU updates included.
- The product type is fixed once SKUs exist.
- Deleting a product deletes its SKUs first, in the same transaction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Union

import structlog
from django.db import transaction

from modules.core.exceptions import parse_id
from modules.products.availability import calculate_purchasable
from modules.products.exceptions import (
    NotProductOwner,
    ProductNotFound,
    ProductRuleViolation,
    SkuCombinationNotFound,
)
from modules.products.models import Product, ProductStatus, ProductType
from modules.products.sku_sync import SkuSynchronizer
from modules.products.validators import (
    TYPE_EXCLUSIVE_FIELDS,
    ProductCandidate,
    build_candidate,
    ensure_active_collection,
    ensure_has_skus,
    validate_product,
    validate_variant_axes,
)
from modules.products.variants import combination_key

if TYPE_CHECKING:
    from uuid import UUID

    from modules.collections.repositories.interfaces import ICollectionLookup
    from modules.products.dtos import UpdateProductDTO, UpdateSkusDTO
    from modules.products.repositories.interfaces import (
        IProductRepository,
        ISkuRepository,
    )

logger = structlog.get_logger(__name__)

OwnerId = Union[int, str, "UUID"]

# Patch keys that cannot be cleared; an explicit null means "leave as is".
_NON_NULLABLE = ("title", "type", "status", "variants")


class ProductService:
    """Application service for Product use-cases.

    Receives its repositories and the collection lookup via constructor
    injection (DIP).
    """

    def __init__(
        self,
        repository: IProductRepository,
        sku_repository: ISkuRepository,
        collection_lookup: ICollectionLookup,
        synchronizer: SkuSynchronizer | None = None,
    ) -> None:
        self._repo = repository
        self._sku_repo = sku_repository
        self._collections = collection_lookup
        self._sync = synchronizer or SkuSynchronizer(sku_repository)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: ProductCandidate, owner_id: OwnerId) -> Product:
        """Create a product and, when it has variants, its SKU matrix.

        Raises:
            ProductRuleViolation: a status/type rule is not met, the
                collection is missing/inactive, or a published product
                would end without SKUs.
            InvalidIdentifier: malformed collection id.
            DuplicateVariantCombination: the variant matrix has duplicates.
        """
        log = logger.bind(owner_id=str(owner_id), status=dto.status, type=dto.type)

        validate_product(dto)
        variants = [v.model_dump() for v in dto.variants]
        validate_variant_axes(variants)

        collection = None
        if dto.collection_id:
            collection = ensure_active_collection(dto.collection_id, self._collections)

        product = Product(
            title=dto.title,
            description=dto.description or "",
            type=dto.type,
            status=dto.status,
            collection=collection,
            owner_id=owner_id,
            variants=variants,
            purchasable=False,
            **self._type_fields(dto),
        )
        product = self._repo.save(product)

        if variants:
            self._sync.synchronize(product, [], variants)
            skus = self._sku_repo.list_for_product(product.id)
            product.purchasable = calculate_purchasable(product, skus)
            product.save(update_fields=["purchasable"])

        ensure_has_skus(product.status, self._sku_repo.count_for_product(product.id))

        log.info("product.created", product_id=str(product.id))
        return self._reload(product.id)

    @transaction.atomic
    def update_product(
        self, id: str, dto: UpdateProductDTO, owner_id: OwnerId
    ) -> Product:
        """Apply a partial update, regenerating SKUs if the variants changed.

        Raises:
            InvalidIdentifier: malformed product or collection id.
            ProductNotFound: no such product.
            NotProductOwner: caller does not own the product.
            ProductRuleViolation: the merged product breaks a rule.
            DuplicateVariantCombination: the new matrix has duplicates.
        """
        product = self._get_owned_for_update(id, owner_id)
        log = logger.bind(product_id=str(product.id))

        patch = {
            field: value
            for field, value in dto.patch().items()
            if not (value is None and field in _NON_NULLABLE)
        }
        existing_skus = self._sku_repo.count_for_product(product.id)
        if patch.get("type", product.type) != product.type and existing_skus:
            log.warning("product.type_change_rejected", sku_count=existing_skus)
            raise ProductRuleViolation(
                "Product type cannot be changed once SKUs exist"
            )

        merged = {**product.to_candidate(), **patch}
        if merged["type"] != product.type:
            # The previous type's exclusive field is not carried over.
            inherited = TYPE_EXCLUSIVE_FIELDS[product.type]
            if inherited not in patch:
                merged.pop(inherited, None)

        candidate = build_candidate(merged)
        validate_product(candidate)
        variants = [v.model_dump() for v in candidate.variants]
        validate_variant_axes(variants)

        collection = product.collection
        if candidate.collection_id is None:
            collection = None
        elif "collection_id" in patch or candidate.status == ProductStatus.PUBLISHED:
            collection = ensure_active_collection(
                candidate.collection_id, self._collections
            )

        regenerated = self._sync.synchronize(product, product.variants, variants)

        product.title = candidate.title
        product.description = candidate.description or ""
        product.type = candidate.type
        product.status = candidate.status
        product.collection = collection
        product.variants = variants
        for field, value in self._type_fields(candidate).items():
            setattr(product, field, value)

        skus = self._sku_repo.list_for_product(product.id)
        ensure_has_skus(product.status, len(skus))
        product.purchasable = calculate_purchasable(product, skus)
        product = self._repo.save(product)

        log.info(
            "product.updated",
            fields=sorted(patch),
            skus_regenerated=regenerated,
            purchasable=product.purchasable,
        )
        return self._reload(product.id)

    @transaction.atomic
    def delete_product(self, id: str, owner_id: OwnerId) -> None:
        """Hard-delete a product and every SKU it owns, atomically.

        Raises:
            InvalidIdentifier: malformed id.
            ProductNotFound: no such product.
            NotProductOwner: caller does not own the product.
        """
        product = self._get_owned_for_update(id, owner_id)
        removed = self._sku_repo.delete_for_product(product.id)
        self._repo.delete(str(product.id))
        logger.info("product.deleted", product_id=str(product.id), skus_removed=removed)

    @transaction.atomic
    def update_skus(self, id: str, dto: UpdateSkusDTO, owner_id: OwnerId) -> Product:
        """Patch price/quantity (and dimensions) of SKUs matched by combination.

        Matching is exact on the combination's key set and values,
        independent of key order.  ``purchasable`` is recomputed from the
        updated stock and persisted.

        Raises:
            InvalidIdentifier: malformed id.
            ProductNotFound: no such product.
            NotProductOwner: caller does not own the product.
            ProductRuleViolation: the product has no SKUs, or dimensions
                were sent for a digital product.
            SkuCombinationNotFound: a patch matches no SKU; nothing is saved.
        """
        product = self._get_owned_for_update(id, owner_id)
        log = logger.bind(product_id=str(product.id))

        skus = self._sku_repo.list_for_product(product.id)
        if not skus:
            raise ProductRuleViolation("Product has no SKUs to update")

        by_key = {combination_key(sku.variant_combination): sku for sku in skus}
        touched: Dict[Any, Any] = {}
        for patch in dto.skus:
            sku = by_key.get(combination_key(patch.variant_combination))
            if sku is None:
                log.warning(
                    "product.sku_combination_not_found",
                    combination=patch.variant_combination,
                )
                raise SkuCombinationNotFound(patch.variant_combination)

            if patch.price is not None:
                sku.price = patch.price
            if patch.quantity is not None:
                sku.quantity = patch.quantity
            if patch.dimensions is not None:
                if product.type != ProductType.PHYSICAL:
                    raise ProductRuleViolation(
                        "Digital product SKUs cannot have dimensions"
                    )
                sku.dimensions = patch.dimensions.model_dump()
            touched[sku.id] = sku

        for sku in touched.values():
            self._sku_repo.save(sku)

        product.purchasable = calculate_purchasable(product, skus)
        product.save(update_fields=["purchasable"])

        log.info(
            "product.skus_updated",
            skus_updated=len(touched),
            purchasable=product.purchasable,
        )
        return self._reload(product.id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self) -> List[Product]:
        """Return every product with its SKUs populated."""
        return self._repo.list()

    def get_product(self, id: str) -> Product:
        """Retrieve a single product with its SKUs populated.

        Raises:
            InvalidIdentifier: malformed id.
            ProductNotFound: the product does not exist.
        """
        product_id = parse_id(id, "Invalid product ID")
        product = self._repo.get_by_id(str(product_id))
        if not product:
            raise ProductNotFound("Product not found")
        return product

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_owned_for_update(self, id: str, owner_id: OwnerId) -> Product:
        product_id = parse_id(id, "Invalid product ID")
        product = self._repo.get_for_update(str(product_id))
        if not product:
            raise ProductNotFound("Product not found")
        if str(product.owner_id) != str(owner_id):
            logger.warning(
                "product.ownership_denied",
                product_id=str(product.id),
                caller_id=str(owner_id),
            )
            raise NotProductOwner("You can only modify your own products")
        return product

    def _reload(self, product_id: Any) -> Product:
        return self._repo.get_by_id(str(product_id))

    @staticmethod
    def _type_fields(candidate: ProductCandidate) -> Dict[str, Any]:
        """``shipping_model``/``file_url`` values, cleared for the other type."""
        if candidate.type == ProductType.PHYSICAL:
            shipping = candidate.shipping_model
            return {
                "shipping_model": shipping.model_dump() if shipping else None,
                "file_url": "",
            }
        return {
            "shipping_model": None,
            "file_url": str(candidate.file_url) if candidate.file_url else "",
        }
