"""Collection DRF serializers (output only; input goes through DTOs)."""

from __future__ import annotations

from rest_framework import serializers

from modules.collections.models import Collection


class CollectionSerializer(serializers.ModelSerializer):
    product_count = serializers.SerializerMethodField()

    class Meta:
        model = Collection
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "is_active",
            "metadata",
            "product_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_product_count(self, obj: Collection) -> int:
        return obj.products.count()
