"""Unit tests for ``calculate_purchasable``."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from modules.products.availability import calculate_purchasable

pytestmark = pytest.mark.unit

PUBLISHED = SimpleNamespace(status="published")
DRAFT = SimpleNamespace(status="draft")


class TestCalculatePurchasable:
    def test_published_with_stock(self):
        skus = [{"quantity": 0}, {"quantity": 5}]
        assert calculate_purchasable(PUBLISHED, skus) is True

    def test_draft_is_never_purchasable(self):
        assert calculate_purchasable(DRAFT, [{"quantity": 10}]) is False

    def test_published_without_stock(self):
        assert calculate_purchasable(PUBLISHED, [{"quantity": 0}, {"quantity": 0}]) is False

    def test_published_without_skus(self):
        assert calculate_purchasable(PUBLISHED, []) is False
        assert calculate_purchasable(PUBLISHED, None) is False

    def test_unloaded_references_are_not_purchasable(self):
        assert calculate_purchasable(PUBLISHED, ["0190a1b2-sku-id"]) is False

    def test_accepts_model_like_objects(self):
        skus = [SimpleNamespace(quantity=3)]
        assert calculate_purchasable(PUBLISHED, skus) is True
