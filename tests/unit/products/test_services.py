"""Unit tests for ProductService.

Runs against the real Django repositories on the test database so the
transactional guarantees are exercised; a failing repository is injected
where a mid-command failure must be simulated.

Covers:
- create_product: drafts, published products with SKUs, collection and
  SKU rules, rollback on failure.
- update_product: merge semantics, idempotent variant reorder, SKU
  regeneration, ownership, type changes.
- delete_product: SKU cascade, ownership, atomic rollback.
- update_skus: combination matching, purchasable recomputation, conflicts.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.collections.repositories.django_repository import (
    CollectionDjangoRepository,
)
from modules.core.exceptions import InvalidIdentifier
from modules.products.dtos import UpdateProductDTO, UpdateSkusDTO, parse_create_product
from modules.products.exceptions import (
    DuplicateVariantCombination,
    InactiveCollection,
    NotProductOwner,
    ProductNotFound,
    ProductRuleViolation,
    SkuCombinationNotFound,
)
from modules.products.models import Product, Sku
from modules.products.repositories.django_repository import (
    ProductDjangoRepository,
    SkuDjangoRepository,
)
from modules.products.services import ProductService
from modules.products.variants import combinations_match

pytestmark = pytest.mark.unit

COLOR = {"name": "color", "values": ["red", "blue"]}
SIZE = {"name": "size", "values": ["S", "M"]}
SHIPPING = {"name": "Standard", "weight": 0.4}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _build_service(sku_repository=None) -> ProductService:
    return ProductService(
        repository=ProductDjangoRepository(),
        sku_repository=sku_repository or SkuDjangoRepository(),
        collection_lookup=CollectionDjangoRepository(),
    )


@pytest.fixture()
def service():
    return _build_service()


@pytest.fixture()
def published_data(active_collection):
    return {
        "title": "Linen Shirt",
        "type": "physical",
        "status": "published",
        "description": "Breathable linen",
        "collection_id": str(active_collection.id),
        "shipping_model": SHIPPING,
        "variants": [COLOR, SIZE],
    }


@pytest.fixture()
def published_product(service, published_data, user):
    return service.create_product(parse_create_product(published_data), user.pk)


def _draft(service, owner, **overrides):
    data = {"title": "Draft Tee", "type": "physical", "status": "draft"}
    data.update(overrides)
    return service.create_product(parse_create_product(data), owner.pk)


def _patch(**fields) -> UpdateProductDTO:
    return UpdateProductDTO.model_validate(fields)


def _skus(*patches) -> UpdateSkusDTO:
    return UpdateSkusDTO.model_validate({"skus": list(patches)})


def _sku(product_id, **combination) -> Sku:
    matches = [
        sku
        for sku in Sku.objects.filter(product_id=product_id)
        if combinations_match(sku.variant_combination, combination)
    ]
    assert len(matches) == 1
    return matches[0]


# ===========================================================================
# create_product
# ===========================================================================


class TestCreateProduct:
    def test_minimal_draft(self, service, user):
        product = _draft(service, user)

        assert product.owner_id == user.pk
        assert product.status == "draft"
        assert product.purchasable is False
        assert list(product.skus.all()) == []

    def test_published_with_variants_generates_skus(self, published_product, user):
        skus = list(published_product.skus.all())

        assert len(skus) == 4
        assert all(s.price == Decimal("0.00") and s.quantity == 0 for s in skus)
        assert published_product.purchasable is False
        assert published_product.shipping_model["name"] == "Standard"
        assert published_product.owner_id == user.pk

    def test_draft_with_variants_generates_skus(self, service, user):
        product = _draft(service, user, variants=[SIZE])
        assert product.skus.count() == 2

    def test_published_without_skus_is_rejected_and_rolled_back(
        self, service, published_data, user
    ):
        published_data.pop("variants")
        with pytest.raises(ProductRuleViolation, match="at least one SKU"):
            service.create_product(parse_create_product(published_data), user.pk)
        assert Product.objects.count() == 0

    def test_inactive_collection(self, service, published_data, inactive_collection, user):
        published_data["collection_id"] = str(inactive_collection.id)
        with pytest.raises(InactiveCollection):
            service.create_product(parse_create_product(published_data), user.pk)
        assert Product.objects.count() == 0

    def test_missing_collection(self, service, published_data, user):
        published_data["collection_id"] = "0190a9e6-8c1f-7b3a-9d2e-4f5a6b7c8d9e"
        with pytest.raises(ProductRuleViolation, match="Collection not found"):
            service.create_product(parse_create_product(published_data), user.pk)

    def test_malformed_collection_id(self, service, published_data, user):
        published_data["collection_id"] = "summer"
        with pytest.raises(InvalidIdentifier, match="Invalid collection ID format"):
            service.create_product(parse_create_product(published_data), user.pk)

    def test_draft_may_reference_collection(self, service, user, active_collection):
        product = _draft(service, user, collection_id=str(active_collection.id))
        assert product.collection_id == active_collection.id

    def test_duplicate_combinations_conflict(self, service, user):
        with pytest.raises(DuplicateVariantCombination):
            _draft(service, user, variants=[{"name": "size", "values": ["M", "M"]}])
        assert Product.objects.count() == 0

    def test_repeated_axis_name(self, service, user):
        with pytest.raises(ProductRuleViolation, match="Variant names must be unique"):
            _draft(service, user, variants=[SIZE, SIZE])


# ===========================================================================
# update_product
# ===========================================================================


class TestUpdateProduct:
    def test_partial_update_preserves_other_fields(self, service, published_product, user):
        product = service.update_product(
            str(published_product.id), _patch(title="Linen Shirt II"), user.pk
        )
        assert product.title == "Linen Shirt II"
        assert product.description == "Breathable linen"
        assert product.skus.count() == 4

    def test_reordered_variants_keep_skus(self, service, published_product, user):
        before = {s.id for s in published_product.skus.all()}
        service.update_skus(
            str(published_product.id),
            _skus({"variant_combination": {"color": "red", "size": "S"}, "price": "12.50"}),
            user.pk,
        )

        reordered = [{"name": "size", "values": ["M", "S"]}, {"name": "color", "values": ["blue", "red"]}]
        product = service.update_product(
            str(published_product.id), _patch(variants=reordered), user.pk
        )

        assert {s.id for s in product.skus.all()} == before
        red_s = _sku(product.id, color="red", size="S")
        assert red_s.price == Decimal("12.50")

    def test_changed_variants_regenerate_skus(self, service, published_product, user):
        before = {s.id for s in published_product.skus.all()}
        grown = [COLOR, {"name": "size", "values": ["S", "M", "L"]}]

        product = service.update_product(
            str(published_product.id), _patch(variants=grown), user.pk
        )

        skus = list(product.skus.all())
        assert len(skus) == 6
        assert before.isdisjoint({s.id for s in skus})

    def test_clearing_variants_of_published_product_is_rejected(
        self, service, published_product, user
    ):
        with pytest.raises(ProductRuleViolation, match="at least one SKU"):
            service.update_product(str(published_product.id), _patch(variants=[]), user.pk)
        assert Sku.objects.filter(product_id=published_product.id).count() == 4

    def test_publishing_incomplete_draft_is_rejected(self, service, user):
        draft = _draft(service, user, variants=[SIZE])
        with pytest.raises(ProductRuleViolation, match="description, and collection"):
            service.update_product(str(draft.id), _patch(status="published"), user.pk)

    def test_publishing_complete_draft(self, service, user, active_collection):
        draft = _draft(service, user, variants=[SIZE])
        product = service.update_product(
            str(draft.id),
            _patch(
                status="published",
                description="Cotton tee",
                collection_id=str(active_collection.id),
                shipping_model=SHIPPING,
            ),
            user.pk,
        )
        assert product.status == "published"
        assert product.collection_id == active_collection.id

    def test_only_owner_may_update(self, service, published_product, other_user):
        with pytest.raises(NotProductOwner):
            service.update_product(str(published_product.id), _patch(title="Mine"), other_user.pk)

    def test_not_found(self, service, user):
        with pytest.raises(ProductNotFound):
            service.update_product("0190a9e6-8c1f-7b3a-9d2e-4f5a6b7c8d9e", _patch(title="x"), user.pk)

    def test_invalid_id(self, service, user):
        with pytest.raises(InvalidIdentifier, match="Invalid product ID"):
            service.update_product("42", _patch(title="x"), user.pk)

    def test_type_change_rejected_once_skus_exist(self, service, published_product, user):
        with pytest.raises(ProductRuleViolation, match="type cannot be changed"):
            service.update_product(str(published_product.id), _patch(type="digital"), user.pk)

    def test_type_change_without_skus_drops_other_type_field(self, service, user):
        draft = _draft(service, user, shipping_model=SHIPPING)
        product = service.update_product(str(draft.id), _patch(type="digital"), user.pk)

        assert product.type == "digital"
        assert product.shipping_model is None

    def test_explicit_null_title_is_ignored(self, service, user):
        draft = _draft(service, user)
        product = service.update_product(str(draft.id), _patch(title=None), user.pk)
        assert product.title == "Draft Tee"

    def test_unpublishing_clears_purchasable(self, service, published_product, user):
        service.update_skus(
            str(published_product.id),
            _skus({"variant_combination": {"color": "blue", "size": "M"}, "quantity": 2}),
            user.pk,
        )
        product = service.update_product(str(published_product.id), _patch(status="draft"), user.pk)
        assert product.purchasable is False


# ===========================================================================
# delete_product
# ===========================================================================


class FailingSkuRepository(SkuDjangoRepository):
    """Deletes the SKUs, then fails before the product row is removed."""

    def delete_for_product(self, product_id):
        super().delete_for_product(product_id)
        raise RuntimeError("storage unavailable")


class TestDeleteProduct:
    def test_deletes_product_and_skus(self, service, user):
        product = _draft(service, user, variants=[{"name": "size", "values": ["S", "M", "L"]}])
        assert Sku.objects.filter(product_id=product.id).count() == 3

        service.delete_product(str(product.id), user.pk)

        assert not Product.objects.filter(id=product.id).exists()
        assert Sku.objects.filter(product_id=product.id).count() == 0

    def test_failure_rolls_back_sku_deletion(self, user):
        product = _draft(_build_service(), user, variants=[{"name": "size", "values": ["S", "M", "L"]}])
        failing = _build_service(sku_repository=FailingSkuRepository())

        with pytest.raises(RuntimeError):
            failing.delete_product(str(product.id), user.pk)

        assert Product.objects.filter(id=product.id).exists()
        assert Sku.objects.filter(product_id=product.id).count() == 3

    def test_only_owner_may_delete(self, service, published_product, other_user):
        with pytest.raises(NotProductOwner):
            service.delete_product(str(published_product.id), other_user.pk)
        assert Product.objects.filter(id=published_product.id).exists()

    def test_not_found(self, service, user):
        with pytest.raises(ProductNotFound):
            service.delete_product("0190a9e6-8c1f-7b3a-9d2e-4f5a6b7c8d9e", user.pk)


# ===========================================================================
# update_skus
# ===========================================================================


class TestUpdateSkus:
    def test_stock_makes_published_product_purchasable(self, service, published_product, user):
        product = service.update_skus(
            str(published_product.id),
            _skus({"variant_combination": {"size": "M", "color": "blue"}, "price": "19.90", "quantity": 5}),
            user.pk,
        )

        assert product.purchasable is True
        sku = _sku(product.id, color="blue", size="M")
        assert sku.price == Decimal("19.90")
        assert sku.quantity == 5

    def test_draft_with_stock_is_not_purchasable(self, service, user):
        draft = _draft(service, user, variants=[SIZE])
        product = service.update_skus(
            str(draft.id), _skus({"variant_combination": {"size": "S"}, "quantity": 9}), user.pk
        )
        assert product.purchasable is False

    def test_unmatched_combination_saves_nothing(self, service, published_product, user):
        with pytest.raises(SkuCombinationNotFound) as exc_info:
            service.update_skus(
                str(published_product.id),
                _skus(
                    {"variant_combination": {"color": "red", "size": "S"}, "price": "50.00"},
                    {"variant_combination": {"color": "green", "size": "S"}, "price": "60.00"},
                ),
                user.pk,
            )

        assert exc_info.value.combination == {"color": "green", "size": "S"}
        assert "green" in str(exc_info.value)
        prices = set(Sku.objects.filter(product_id=published_product.id).values_list("price", flat=True))
        assert prices == {Decimal("0.00")}

    def test_partial_combination_does_not_match(self, service, published_product, user):
        with pytest.raises(SkuCombinationNotFound):
            service.update_skus(
                str(published_product.id),
                _skus({"variant_combination": {"color": "red"}, "quantity": 1}),
                user.pk,
            )

    def test_product_without_skus(self, service, user):
        draft = _draft(service, user)
        with pytest.raises(ProductRuleViolation, match="no SKUs"):
            service.update_skus(
                str(draft.id), _skus({"variant_combination": {}, "quantity": 1}), user.pk
            )

    def test_dimensions_on_physical_sku(self, service, published_product, user):
        dims = {"width": 30, "height": 2, "length": 40, "weight": 0.3}
        service.update_skus(
            str(published_product.id),
            _skus({"variant_combination": {"color": "red", "size": "M"}, "dimensions": dims}),
            user.pk,
        )
        sku = _sku(published_product.id, color="red", size="M")
        assert sku.dimensions["length"] == 40

    def test_dimensions_rejected_for_digital(self, service, user):
        draft = _draft(service, user, type="digital", variants=[{"name": "format", "values": ["pdf"]}])
        dims = {"width": 1, "height": 1, "length": 1, "weight": 1}
        with pytest.raises(ProductRuleViolation, match="cannot have dimensions"):
            service.update_skus(
                str(draft.id),
                _skus({"variant_combination": {"format": "pdf"}, "dimensions": dims}),
                user.pk,
            )

    def test_only_owner_may_restock(self, service, published_product, other_user):
        with pytest.raises(NotProductOwner):
            service.update_skus(
                str(published_product.id),
                _skus({"variant_combination": {"color": "red", "size": "S"}, "quantity": 1}),
                other_user.pk,
            )
