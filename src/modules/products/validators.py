"""Product validation engine.

Status decides which fields are mandatory:

=========  =====================================================
status     requires
=========  =====================================================
draft      title, type, status; nothing else
published  title, description, collection (existing and active),
           plus ``shipping_model`` (physical) or ``file_url``
           (digital), plus at least one SKU once SKUs are generated
=========  =====================================================

Drafts short-circuit after the minimal check, so type-specific fields
are never required of a draft.  Every failure raises
``ProductRuleViolation`` (or ``InactiveCollection``) whose message names
the unmet rule.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping, NoReturn, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from modules.core.exceptions import parse_id
from modules.products.dtos import (
    CreateDigitalProductDTO,
    CreatePhysicalProductDTO,
    parse_create_product,
)
from modules.products.exceptions import InactiveCollection, ProductRuleViolation
from modules.products.models import ProductStatus
from modules.products.variants import duplicate_axis_names

if TYPE_CHECKING:
    from modules.collections.models import Collection
    from modules.collections.repositories.interfaces import ICollectionLookup

logger = structlog.get_logger(__name__)

ProductCandidate = Union[CreatePhysicalProductDTO, CreateDigitalProductDTO]

# Fields owned by exactly one product type.
TYPE_EXCLUSIVE_FIELDS = {
    "physical": "shipping_model",
    "digital": "file_url",
}
EXCLUSIVE_FIELD_MESSAGES = {
    "file_url": "Physical products cannot have a file URL",
    "shipping_model": "Digital products cannot have a shipping model",
}


def _reject(message: str, exc_class: type = ProductRuleViolation) -> NoReturn:
    logger.warning("product.validation_failed", reason=message)
    raise exc_class(message)


# ---------------------------------------------------------------------------
# Candidate construction
# ---------------------------------------------------------------------------


def build_candidate(data: Mapping[str, Any]) -> ProductCandidate:
    """Parse merged product fields into the typed candidate.

    A field belonging to the other product type is dropped when empty and
    rejected otherwise.
    """
    fields: Dict[str, Any] = dict(data)
    own_field = TYPE_EXCLUSIVE_FIELDS.get(fields.get("type"))
    for field in TYPE_EXCLUSIVE_FIELDS.values():
        if field == own_field or field not in fields:
            continue
        if fields[field] in (None, "", {}):
            fields.pop(field)
        else:
            _reject(EXCLUSIVE_FIELD_MESSAGES[field])

    try:
        return parse_create_product(fields)
    except PydanticValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        _reject(f"Invalid product: {errors}")


# ---------------------------------------------------------------------------
# Rule checks
# ---------------------------------------------------------------------------


def validate_product(candidate: ProductCandidate) -> None:
    """Apply the status/type rule table to ``candidate``."""
    if candidate.status == ProductStatus.DRAFT:
        if not candidate.title or not candidate.type or not candidate.status:
            _reject("Draft products require title, type, and status")
        return

    if candidate.status == ProductStatus.PUBLISHED:
        _validate_published(candidate)


def _validate_published(candidate: ProductCandidate) -> None:
    if not (candidate.title and candidate.description and candidate.collection_id):
        _reject("Published products require title, description, and collection")

    if isinstance(candidate, CreatePhysicalProductDTO):
        if not candidate.shipping_model:
            _reject("Physical products require shipping model")
    elif isinstance(candidate, CreateDigitalProductDTO):
        if not candidate.file_url:
            _reject("Digital products require file URL")


def validate_variant_axes(variants: Iterable[Mapping[str, Any]]) -> None:
    """Axis names must be unique within a product."""
    duplicates = duplicate_axis_names(variants)
    if duplicates:
        _reject(f"Variant names must be unique (repeated: {', '.join(duplicates)})")


def ensure_active_collection(
    collection_id: Any, lookup: ICollectionLookup
) -> Collection:
    """Resolve the collection inside the current transaction and require it active.

    Raises:
        InvalidIdentifier: malformed id.
        ProductRuleViolation: no such collection.
        InactiveCollection: the collection is deactivated.
    """
    cid = parse_id(collection_id, "Invalid collection ID format")
    collection = lookup.resolve(cid)
    if collection is None:
        _reject("Collection not found")
    if not collection.is_active:
        _reject("Collection is not active", InactiveCollection)
    return collection


def ensure_has_skus(status: str, sku_count: int) -> None:
    if status == ProductStatus.PUBLISHED and sku_count == 0:
        _reject("Published products must have at least one SKU")
