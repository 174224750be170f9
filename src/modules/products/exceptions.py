"""Product domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.  Any of them aborts the enclosing
transaction; nothing is partially applied.
"""

from __future__ import annotations

from typing import Any, Mapping


class ProductNotFound(Exception):
    """The requested product does not exist."""


class NotProductOwner(Exception):
    """The caller is not the owner of the product it tries to change."""


class ProductRuleViolation(Exception):
    """A status/type rule was broken (missing required field, bad variants...).

    The message names the unmet rule, e.g.
    ``"Physical products require shipping model"``.
    """


class InactiveCollection(ProductRuleViolation):
    """The referenced collection exists but is not active."""


class ProductConflict(Exception):
    """The request conflicts with the product's SKU set."""


class DuplicateVariantCombination(ProductConflict):
    """Two generated SKUs would share the same variant combination."""


class SkuCombinationNotFound(ProductConflict):
    """A SKU patch targets a combination the product does not have."""

    def __init__(self, combination: Mapping[str, Any]) -> None:
        self.combination = dict(combination)
        super().__init__(
            f"SKU with variant combination {self.combination} not found"
        )
