"""
tests/test_islands.py — Unit tests for the island-of-difference classifier.

Covers band construction, band lookup on edges, the four verdicts, the
split-direction case, order independence, and input validation.
"""

import itertools
import math

import pytest

from fuel_poverty.islands import (
    DEFAULT_BAND_EDGES,
    Area,
    Band,
    Classification,
    InvalidInputError,
    band_for,
    classify,
    make_bands,
    summarise_neighbours,
)


def area(code: str, metric: float) -> Area:
    return Area(code=code, name=f"District {code}", metric=metric)


# ---------------------------------------------------------------------------
# Bands
# ---------------------------------------------------------------------------


class TestBands:
    def test_default_labels(self):
        labels = [b.label for b in make_bands()]
        assert labels == [
            "0 to 5", "5 to 10", "10 to 15", "15 to 20", "20 to 25", "Over 25",
        ]

    def test_bands_cover_real_line(self):
        bands = make_bands()
        assert bands[0].lower == -math.inf
        assert bands[-1].upper == math.inf
        for lo, hi in zip(bands, bands[1:]):
            assert lo.upper == hi.lower

    def test_edge_value_falls_in_upper_band(self):
        bands = make_bands()
        for edge, expected in zip(DEFAULT_BAND_EDGES, bands[1:]):
            assert band_for(edge, bands) == expected
            assert band_for(edge - 1e-9, bands) == bands[expected.index - 1]

    def test_negative_metric_in_lowest_band(self):
        bands = make_bands()
        assert band_for(-3.0, bands).label == "0 to 5"

    def test_large_metric_in_top_band(self):
        assert band_for(99.0, make_bands()).label == "Over 25"

    def test_band_contains(self):
        band = make_bands()[2]
        assert band.contains(10)
        assert band.contains(14.99)
        assert not band.contains(15)

    def test_bands_ordered_by_position(self):
        bands = make_bands()
        assert sorted(reversed(bands)) == list(bands)
        assert bands[0] < bands[5]

    def test_custom_labels(self):
        bands = make_bands([10, 20], labels=["low", "mid", "high"])
        assert [b.label for b in bands] == ["low", "mid", "high"]

    def test_label_count_mismatch(self):
        with pytest.raises(InvalidInputError):
            make_bands([10, 20], labels=["low", "high"])

    def test_non_increasing_edges(self):
        with pytest.raises(InvalidInputError):
            make_bands([5, 10, 10, 20])
        with pytest.raises(InvalidInputError):
            make_bands([10, 5])

    def test_non_finite_edges(self):
        with pytest.raises(InvalidInputError):
            make_bands([5, math.nan])

    def test_no_edges_is_one_band(self):
        bands = make_bands([])
        assert len(bands) == 1
        assert band_for(42, bands).label == "All"
        assert bands[0] == Band(index=0, label="All", lower=-math.inf, upper=math.inf)


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_above_island(self):
        areas = [area("A", 30), area("B", 12), area("C", 8)]
        result = classify(areas, {"A": {"B", "C"}, "B": {"A"}, "C": {"A"}})
        assert result["A"] is Classification.ABOVE_ISLAND

    def test_split_direction_is_same(self):
        areas = [area("A", 12), area("B", 30), area("C", 8)]
        result = classify(areas, {"A": {"B", "C"}})
        assert result["A"] is Classification.SAME

    def test_shared_band_is_same(self):
        areas = [area("A", 7), area("B", 9)]
        result = classify(areas, {"A": {"B"}, "B": {"A"}})
        assert result["A"] is Classification.SAME
        assert result["B"] is Classification.SAME

    def test_no_neighbours(self):
        result = classify([area("A", 2)], {})
        assert result == {"A": Classification.NO_NEIGHBOURS}

    def test_duplicate_codes(self):
        with pytest.raises(InvalidInputError, match="Duplicate"):
            classify([area("A", 2), area("A", 3)], {})

    def test_under_island(self):
        areas = [area("A", 4), area("B", 12), area("C", 26)]
        result = classify(areas, {"A": {"B", "C"}})
        assert result["A"] is Classification.UNDER_ISLAND

    def test_neighbours_of_island_are_same(self):
        areas = [area("A", 30), area("B", 12), area("C", 8)]
        result = classify(areas, {"A": {"B", "C"}, "B": {"A", "C"}, "C": {"A", "B"}})
        # B has A above and C below
        assert result["B"] is Classification.SAME
        # C: A and B both higher bands
        assert result["C"] is Classification.UNDER_ISLAND


# ---------------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------------


class TestEdgeCases:
    def test_lower_metric_same_band_is_same(self):
        areas = [area("A", 14), area("B", 11), area("C", 3)]
        result = classify(areas, {"A": {"B", "C"}})
        assert result["A"] is Classification.SAME

    def test_tied_metric_is_same(self):
        areas = [area("A", 18), area("B", 18)]
        assert classify(areas, {"A": {"B"}})["A"] is Classification.SAME

    def test_self_reference_dropped(self):
        areas = [area("A", 30), area("B", 12)]
        result = classify(areas, {"A": {"A", "B"}, "B": {"B"}})
        assert result["A"] is Classification.ABOVE_ISLAND
        assert result["B"] is Classification.NO_NEIGHBOURS

    def test_unknown_neighbour_ignored(self):
        areas = [area("A", 30), area("B", 12)]
        result = classify(areas, {"A": {"B", "S12000033"}})
        assert result["A"] is Classification.ABOVE_ISLAND

    def test_only_unknown_neighbours_is_no_neighbours(self):
        result = classify([area("A", 30)], {"A": {"W06000001"}})
        assert result["A"] is Classification.NO_NEIGHBOURS

    def test_callable_neighbours(self):
        areas = [area("A", 30), area("B", 12)]
        lookup = {"A": ["B"], "B": ["A"]}
        result = classify(areas, lambda code: lookup[code])
        assert result == {
            "A": Classification.ABOVE_ISLAND,
            "B": Classification.UNDER_ISLAND,
        }

    def test_area_objects_as_neighbours(self):
        a, b = area("A", 30), area("B", 12)
        result = classify([a, b], {"A": {b}, "B": {a}})
        assert result["A"] is Classification.ABOVE_ISLAND

    def test_custom_edges(self):
        areas = [area("A", 30), area("B", 12)]
        result = classify(areas, {"A": {"B"}}, band_edges=[50])
        assert result["A"] is Classification.SAME

    def test_empty_areas(self):
        with pytest.raises(InvalidInputError):
            classify([], {})

    def test_nan_metric(self):
        with pytest.raises(InvalidInputError):
            classify([area("A", math.nan)], {})

    def test_string_metric(self):
        areas = [Area("A", "Ash", "30"), area("B", 12.0)]
        with pytest.raises(InvalidInputError, match="non-numeric"):
            classify(areas, {"A": {"B"}})

    def test_bool_metric(self):
        with pytest.raises(InvalidInputError):
            classify([Area("A", "Ash", True)], {})

    def test_integer_codes_match_neighbours(self):
        areas = [Area(1, "Ash", 30.0), Area(2, "Birch", 12.0)]
        result = classify(areas, {1: {2}, 2: {1}})
        assert result[1] is Classification.ABOVE_ISLAND
        assert result[2] is Classification.UNDER_ISLAND

    def test_bad_edges(self):
        with pytest.raises(InvalidInputError):
            classify([area("A", 1)], {}, band_edges=[10, 5])

    def test_one_verdict_per_area(self):
        areas = [area(c, m) for c, m in zip("ABCDE", [1, 6, 11, 16, 21])]
        result = classify(areas, {"A": {"B"}, "B": {"A", "C"}})
        assert set(result) == {"A", "B", "C", "D", "E"}

    def test_is_island(self):
        assert Classification.ABOVE_ISLAND.is_island
        assert Classification.UNDER_ISLAND.is_island
        assert not Classification.SAME.is_island
        assert not Classification.NO_NEIGHBOURS.is_island


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------


class TestSummaries:
    def test_counts(self):
        areas = [area("A", 12), area("B", 30), area("C", 8), area("D", 13)]
        summary = summarise_neighbours(areas, {"A": {"B", "C", "D"}})["A"]
        assert summary.band.label == "10 to 15"
        assert (summary.n_neighbours, summary.n_lower, summary.n_higher,
                summary.n_same_band) == (3, 1, 1, 1)
        assert summary.verdict is Classification.SAME
        assert not summary.is_split

    def test_split_flag(self):
        areas = [area("A", 12), area("B", 30), area("C", 8)]
        summary = summarise_neighbours(areas, {"A": {"B", "C"}})["A"]
        assert summary.is_split
        assert summary.verdict is Classification.SAME

    def test_attributes_not_compared(self):
        a1 = Area("A", "Adur", 10.0, {"households": 100})
        a2 = Area("A", "Adur", 10.0, {"households": 200})
        assert a1 == a2
        assert hash(a1) == hash(a2)

    def test_attributes_read_only(self):
        source = {"households": 100}
        a = Area("A", "Adur", 10.0, source)
        with pytest.raises(TypeError):
            a.attributes["households"] = 200
        source["households"] = 300
        assert a.attributes["households"] == 100
        assert dict(Area("B", "Brent", 5.0).attributes) == {}


# ---------------------------------------------------------------------------
# Determinism
# ---------------------------------------------------------------------------


class TestDeterminism:
    AREAS = [area("A", 30), area("B", 12), area("C", 8), area("D", 22), area("E", 3)]
    NEIGHBOURS = {
        "A": ["B", "C"],
        "B": ["A", "C", "D"],
        "C": ["A", "B", "E"],
        "D": ["B"],
        "E": ["C"],
    }

    def test_order_independent(self):
        expected = classify(self.AREAS, self.NEIGHBOURS)
        for perm in itertools.permutations(self.AREAS):
            reversed_neighbours = {k: list(reversed(v)) for k, v in self.NEIGHBOURS.items()}
            assert classify(list(perm), reversed_neighbours) == expected

    def test_idempotent(self):
        first = classify(self.AREAS, self.NEIGHBOURS)
        second = classify(self.AREAS, self.NEIGHBOURS)
        assert first == second

    def test_inputs_not_mutated(self):
        neighbours = {k: set(v) for k, v in self.NEIGHBOURS.items()}
        snapshot = {k: set(v) for k, v in neighbours.items()}
        classify(self.AREAS, neighbours)
        assert neighbours == snapshot
