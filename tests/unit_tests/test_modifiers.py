"""Tests for peak list post-processing."""

import pytest

from pmfast.fragments import (
    ChainModifier,
    FilterModifier,
    FragmentPeak,
    PMFFragmenter,
    SortModifier,
    UnificationModifier,
)


@pytest.fixture
def peaks():
    return [
        FragmentPeak(30.0, 0, 3, 0),
        FragmentPeak(10.0, 3, 1, 0),
        FragmentPeak(40.0, 0, 4, 1),
        FragmentPeak(10.0, 4, 1, 0),
        FragmentPeak(10.05, 5, 1, 0),
    ]


class TestSortModifier:

    def test_sort_by_mass(self, peaks):
        SortModifier("mass")(peaks)

        assert [p.mass for p in peaks] == [10.0, 10.0, 10.05, 30.0, 40.0]
        # stable: equal masses keep their order
        assert [p.start for p in peaks[:2]] == [3, 4]

    def test_sort_descending_by_length(self, peaks):
        SortModifier("length", reverse=True)(peaks)

        assert [p.length for p in peaks] == [4, 3, 1, 1, 1]

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown sort key"):
            SortModifier("intensity")


class TestUnificationModifier:

    def test_exact_duplicates(self, peaks):
        original = list(peaks)

        UnificationModifier()(peaks)

        assert [p.mass for p in peaks] == [30.0, 10.0, 40.0, 10.05]
        assert peaks[1] is original[1]

    def test_tolerance(self, peaks):
        UnificationModifier(tolerance=0.1)(peaks)

        assert [p.mass for p in peaks] == [30.0, 10.0, 40.0]


class TestFilterModifier:

    def test_mass_range(self, peaks):
        FilterModifier(min_mass=20.0, max_mass=35.0)(peaks)

        assert [p.mass for p in peaks] == [30.0]

    def test_length_and_miscleavages(self, peaks):
        FilterModifier(min_length=2, max_miscleavages=0)(peaks)

        assert [(p.start, p.length) for p in peaks] == [(0, 3)]

    def test_no_bounds_keeps_everything(self, peaks):
        FilterModifier()(peaks)

        assert len(peaks) == 5


class TestChainModifier:

    def test_order_of_application(self, peaks):
        ChainModifier(SortModifier("mass"), UnificationModifier())(peaks)

        assert [p.mass for p in peaks] == [10.0, 10.05, 30.0, 40.0]

    def test_with_fragmenter(self, toy_alphabet):
        """Sorted, unique fingerprint of a repetitive sequence."""
        fragmenter = PMFFragmenter(
            toy_alphabet, "K",
            modifier=ChainModifier(SortModifier(), UnificationModifier()),
        )
        fragmenter.max_miscleaves = 1

        peaks = fragmenter.predict_spectrum("AKAKAK")

        # AK=3, AKAK=6 repeated
        assert [p.mass for p in peaks] == [3, 6]
