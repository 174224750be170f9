"""Collection model: a named, sluggable grouping of products.

Products reference a collection through a nullable FK.  Publishing a
product requires its collection to exist and be active; a collection
that still has products cannot be deleted (enforced at service layer,
backed by ``on_delete=PROTECT`` on the product side).
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class Collection(BaseModel):
    """Collection aggregate root."""

    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=120, unique=True)
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)
    metadata = models.JSONField(blank=True, default=dict)

    class Meta:
        db_table = "collections"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_active"], name="collections_active_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.slug})"
