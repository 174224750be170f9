"""Unit tests for variant combination generation and change detection."""

from __future__ import annotations

import pytest

from modules.products.variants import (
    combination_key,
    combinations_match,
    count_variant_combinations,
    duplicate_axis_names,
    generate_variant_combinations,
    has_variants_changed,
)

pytestmark = pytest.mark.unit

COLOR = {"name": "color", "values": ["red", "blue"]}
SIZE = {"name": "size", "values": ["S", "M", "L"]}


class TestGenerateVariantCombinations:
    def test_cartesian_product_size(self):
        combos = generate_variant_combinations([COLOR, SIZE])
        assert len(combos) == 6
        assert count_variant_combinations([COLOR, SIZE]) == 6

    def test_every_combination_assigns_every_axis(self):
        combos = generate_variant_combinations([COLOR, SIZE])
        for combo in combos:
            assert set(combo) == {"color", "size"}
            assert combo["color"] in COLOR["values"]
            assert combo["size"] in SIZE["values"]

    def test_combinations_are_distinct(self):
        combos = generate_variant_combinations([COLOR, SIZE])
        assert len({combination_key(c) for c in combos}) == len(combos)

    def test_first_axis_varies_slowest(self):
        combos = generate_variant_combinations([COLOR, SIZE])
        assert combos[0] == {"color": "red", "size": "S"}
        assert combos[1] == {"color": "red", "size": "M"}
        assert combos[3] == {"color": "blue", "size": "S"}

    def test_single_axis(self):
        assert generate_variant_combinations([COLOR]) == [
            {"color": "red"},
            {"color": "blue"},
        ]

    def test_no_axes_yields_single_empty_combination(self):
        assert generate_variant_combinations([]) == [{}]

    def test_axis_without_values_raises(self):
        with pytest.raises(ValueError, match="must have at least one value"):
            generate_variant_combinations([COLOR, {"name": "size", "values": []}])

    def test_duplicate_values_produce_duplicate_combinations(self):
        combos = generate_variant_combinations([{"name": "color", "values": ["red", "red"]}])
        assert combos == [{"color": "red"}, {"color": "red"}]


class TestHasVariantsChanged:
    def test_identical_definitions(self):
        assert has_variants_changed([COLOR, SIZE], [COLOR, SIZE]) is False

    def test_axis_order_is_ignored(self):
        assert has_variants_changed([COLOR, SIZE], [SIZE, COLOR]) is False

    def test_value_order_is_ignored(self):
        reordered = {"name": "color", "values": ["blue", "red"]}
        assert has_variants_changed([COLOR], [reordered]) is False

    def test_added_value_is_a_change(self):
        grown = {"name": "color", "values": ["red", "blue", "green"]}
        assert has_variants_changed([COLOR], [grown]) is True

    def test_renamed_axis_is_a_change(self):
        renamed = {"name": "colour", "values": ["red", "blue"]}
        assert has_variants_changed([COLOR], [renamed]) is True

    def test_none_and_empty_are_equivalent(self):
        assert has_variants_changed(None, []) is False
        assert has_variants_changed([], None) is False

    def test_symmetric(self):
        pairs = [([COLOR], [COLOR, SIZE]), ([], [SIZE]), ([COLOR], [SIZE])]
        for old, new in pairs:
            assert has_variants_changed(old, new) == has_variants_changed(new, old)


class TestCombinationMatching:
    def test_key_order_does_not_matter(self):
        assert combinations_match(
            {"color": "red", "size": "M"}, {"size": "M", "color": "red"}
        )

    def test_different_value(self):
        assert not combinations_match({"color": "red"}, {"color": "blue"})

    def test_subset_does_not_match(self):
        assert not combinations_match({"color": "red"}, {"color": "red", "size": "M"})


class TestDuplicateAxisNames:
    def test_reports_each_repeated_name_once(self):
        axes = [COLOR, COLOR, SIZE, COLOR]
        assert duplicate_axis_names(axes) == ["color"]

    def test_unique_names(self):
        assert duplicate_axis_names([COLOR, SIZE]) == []
