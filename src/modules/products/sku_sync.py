"""SKU synchronisation: keep a product's SKU rows equal to its variant matrix.

The synchronizer never opens its own transaction; it is always called
from inside a lifecycle command so that SKU deletes/inserts commit or
roll back together with the product write that triggered them.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Iterable, List, Mapping, Optional

import structlog
from django.conf import settings

from modules.products.exceptions import (
    DuplicateVariantCombination,
    ProductRuleViolation,
)
from modules.products.models import Sku
from modules.products.variants import (
    combination_key,
    count_variant_combinations,
    generate_variant_combinations,
    has_variants_changed,
)

if TYPE_CHECKING:
    from modules.products.models import Product
    from modules.products.repositories.interfaces import ISkuRepository

logger = structlog.get_logger(__name__)


class SkuSynchronizer:
    """Regenerates SKUs when, and only when, the variant definition changes."""

    def __init__(
        self, repository: ISkuRepository, max_skus: Optional[int] = None
    ) -> None:
        self._repo = repository
        self._max_skus = max_skus

    @property
    def max_skus(self) -> int:
        if self._max_skus is not None:
            return self._max_skus
        return settings.CATALOG_MAX_SKUS_PER_PRODUCT

    def synchronize(
        self,
        product: Product,
        old_variants: Optional[Iterable[Mapping[str, Any]]],
        new_variants: Optional[Iterable[Mapping[str, Any]]],
    ) -> bool:
        """Bring ``product``'s SKUs in line with ``new_variants``.

        Unchanged variants (same axes and values in any order) leave every
        SKU, with its price/quantity/dimensions, untouched.  Changed
        variants replace the whole SKU set: one fresh SKU per combination
        at price 0 and quantity 0.  A product without variants ends with
        no SKUs.

        Returns:
            ``True`` when SKUs were regenerated.

        Raises:
            DuplicateVariantCombination: two combinations collide.
            ProductRuleViolation: the matrix exceeds the configured cap.
        """
        old_variants = list(old_variants or [])
        new_variants = list(new_variants or [])

        if not has_variants_changed(old_variants, new_variants):
            return False

        combinations = self._plan(new_variants) if new_variants else []

        removed = self._repo.delete_for_product(product.id)
        self._repo.bulk_create(
            [
                Sku(
                    product=product,
                    variant_combination=combination,
                    price=Decimal("0.00"),
                    quantity=0,
                    dimensions=None,
                )
                for combination in combinations
            ]
        )

        logger.info(
            "product.skus_regenerated",
            product_id=str(product.id),
            removed=removed,
            created=len(combinations),
        )
        return True

    def _plan(self, variants: List[Mapping[str, Any]]) -> List[dict]:
        expected = count_variant_combinations(variants)
        if expected > self.max_skus:
            raise ProductRuleViolation(
                f"Variants produce {expected} SKUs; at most {self.max_skus} are allowed"
            )

        combinations = generate_variant_combinations(variants)
        keys = {combination_key(c) for c in combinations}
        if len(keys) != len(combinations):
            logger.warning(
                "product.duplicate_combinations",
                generated=len(combinations),
                unique=len(keys),
            )
            raise DuplicateVariantCombination("Duplicate variant combinations found")
        return combinations
