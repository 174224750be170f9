"""Product and SKU models.

Business rules implemented (storage side):
- A product owns its SKUs exclusively; deleting the product removes them.
- ``variant_combination`` is a JSON object mapping axis name -> value.
- SKU price and quantity are non-negative and default to zero.
- ``purchasable`` is derived and only written by the lifecycle service.
- Type-specific fields: ``shipping_model`` (physical), ``file_url``
  (digital), ``Sku.dimensions`` (physical).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel


class ProductType(models.TextChoices):
    PHYSICAL = "physical", "Physical"
    DIGITAL = "digital", "Digital"


class ProductStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    PUBLISHED = "published", "Published"


class Product(BaseModel):
    """Product aggregate root.

    ``variants`` is the ordered list of axes ``[{"name", "values"}]`` the
    SKU matrix is generated from; ``skus`` (reverse FK) always holds
    exactly one row per combination.
    """

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    type = models.CharField(
        max_length=16,
        choices=ProductType.choices,
        default=ProductType.PHYSICAL,
    )
    status = models.CharField(
        max_length=16,
        choices=ProductStatus.choices,
        default=ProductStatus.DRAFT,
    )
    collection = models.ForeignKey(
        "collections.Collection",
        on_delete=models.PROTECT,
        related_name="products",
        null=True,
        blank=True,
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="products",
        editable=False,
    )
    shipping_model = models.JSONField(null=True, blank=True, default=None)
    file_url = models.URLField(max_length=1024, blank=True, default="")
    variants = models.JSONField(blank=True, default=list)
    purchasable = models.BooleanField(default=False, editable=False)

    class Meta:
        db_table = "products"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="products_status_idx"),
        ]

    @property
    def is_published(self) -> bool:
        return self.status == ProductStatus.PUBLISHED

    @property
    def is_physical(self) -> bool:
        return self.type == ProductType.PHYSICAL

    def to_candidate(self) -> Dict[str, Any]:
        """Field values in the shape accepted by the product DTOs."""
        data: Dict[str, Any] = {
            "title": self.title,
            "description": self.description or None,
            "type": self.type,
            "status": self.status,
            "collection_id": str(self.collection_id) if self.collection_id else None,
            "variants": list(self.variants or []),
        }
        if self.is_physical:
            data["shipping_model"] = self.shipping_model
        else:
            data["file_url"] = self.file_url or None
        return data

    def __str__(self) -> str:
        return f"{self.title} [{self.type}/{self.status}]"


class Sku(BaseModel):
    """One purchasable unit: a single value chosen on every variant axis."""

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="skus",
    )
    variant_combination = models.JSONField(default=dict)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    quantity = models.PositiveIntegerField(default=0)
    dimensions = models.JSONField(null=True, blank=True, default=None)

    class Meta:
        db_table = "skus"
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                check=models.Q(price__gte=0),
                name="skus_price_non_negative",
            ),
        ]

    @property
    def combination_label(self) -> str:
        return ", ".join(f"{k}={v}" for k, v in self.variant_combination.items()) or "-"

    def __str__(self) -> str:
        return f"{self.product_id} ({self.combination_label})"
