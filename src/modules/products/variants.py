"""Variant axes: combination generation and change detection.

A variant axis is ``{"name": str, "values": [str, ...]}``; a product's
``variants`` is an ordered list of axes.  Everything here is pure and
operates on plain dicts (the JSON shape stored on ``Product.variants``).
"""

from __future__ import annotations

from itertools import product as cartesian_product
from math import prod
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

VariantAxis = Mapping[str, Any]
Combination = Dict[str, str]
CombinationKey = Tuple[Tuple[str, str], ...]


def generate_variant_combinations(variants: Sequence[VariantAxis]) -> List[Combination]:
    """Expand variant axes into every value combination.

    The first axis varies slowest and values keep their input order, so the
    output is deterministic.  An empty axis list yields ``[{}]``: a single,
    variant-less combination.

    Axis names are not checked for uniqueness here; a repeated name
    overwrites the earlier key in each combination.

    Raises:
        ValueError: an axis has no values.
    """
    names: List[str] = []
    value_lists: List[List[str]] = []
    for axis in variants:
        values = list(axis.get("values") or [])
        if not values:
            raise ValueError(f"Variant '{axis.get('name')}' must have at least one value")
        names.append(axis["name"])
        value_lists.append(values)

    return [dict(zip(names, picked)) for picked in cartesian_product(*value_lists)]


def count_variant_combinations(variants: Sequence[VariantAxis]) -> int:
    """Size of the matrix ``generate_variant_combinations`` would produce."""
    return prod(len(axis.get("values") or []) for axis in variants)


def combination_key(combination: Mapping[str, Any]) -> CombinationKey:
    """Order-independent, hashable identity of a combination."""
    return tuple(sorted((str(k), str(v)) for k, v in combination.items()))


def combinations_match(left: Mapping[str, Any], right: Mapping[str, Any]) -> bool:
    """Same key set and same value per key, regardless of key order."""
    return combination_key(left) == combination_key(right)


def normalize_variants(
    variants: Optional[Iterable[VariantAxis]],
) -> List[Tuple[str, Tuple[str, ...]]]:
    """Canonical form: axes sorted by name, values sorted within each axis."""
    return sorted(
        (axis["name"], tuple(sorted(axis.get("values") or [])))
        for axis in (variants or [])
    )


def has_variants_changed(
    old_variants: Optional[Iterable[VariantAxis]],
    new_variants: Optional[Iterable[VariantAxis]],
) -> bool:
    """Whether two variant definitions differ, ignoring axis and value order.

    ``None`` and ``[]`` are equivalent.  The comparison is symmetric.
    """
    return normalize_variants(old_variants) != normalize_variants(new_variants)


def duplicate_axis_names(variants: Iterable[VariantAxis]) -> List[str]:
    seen: set = set()
    duplicates: List[str] = []
    for axis in variants:
        name = axis["name"]
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    return duplicates
