"""Product DRF serializers for API output.

Input is parsed into Pydantic DTOs (``dtos.py``) by the views; these
serializers only render the Product aggregate with its nested SKUs.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product, Sku


class SkuSerializer(serializers.ModelSerializer):
    class Meta:
        model = Sku
        fields = [
            "id",
            "variant_combination",
            "price",
            "quantity",
            "dimensions",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    """Product with its SKUs, collection reference and derived availability."""

    collection_id = serializers.UUIDField(read_only=True, allow_null=True)
    owner_id = serializers.CharField(read_only=True)
    skus = SkuSerializer(many=True, read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "title",
            "description",
            "type",
            "status",
            "collection_id",
            "owner_id",
            "shipping_model",
            "file_url",
            "variants",
            "skus",
            "purchasable",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
