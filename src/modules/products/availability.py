"""Purchasability: whether a product can currently be bought."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from modules.products.models import ProductStatus


def _quantity_of(sku: Any) -> Optional[int]:
    if isinstance(sku, Mapping):
        return sku.get("quantity")
    return getattr(sku, "quantity", None)


def calculate_purchasable(product: Any, skus: Optional[Iterable[Any]]) -> bool:
    """True iff ``product`` is published and some SKU has stock.

    ``skus`` must be fully loaded records (model instances or mappings with
    a ``quantity``).  Bare references such as ids carry no stock level, so
    their presence makes the result ``False`` rather than a guess.
    """
    if product.status != ProductStatus.PUBLISHED:
        return False

    quantities = [_quantity_of(sku) for sku in (skus or [])]
    if not quantities or any(q is None for q in quantities):
        return False

    return any(q > 0 for q in quantities)
