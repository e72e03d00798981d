"""Tests for ORP (Optimal Recognition Point) calculator."""

import pytest

from readfast.services.tokenizer.orp import (
    EMPTY_SPLIT,
    FocalSplit,
    ORPCalculator,
    focal_split,
    orp_index,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def calculator():
    """Create an ORP calculator."""
    return ORPCalculator()


# =============================================================================
# ORP Calculation Tests
# =============================================================================


class TestORPCalculation:
    """Tests for the length-banded ORP policy."""

    @pytest.mark.parametrize(
        "word,expected_orp",
        [
            ("a", 0),
            ("cat", 1),
            ("reading", 2),
            ("wonderful", 3),
            ("comprehension", 4),
            ("internationalization", 5),
        ],
    )
    def test_reference_words(self, calculator, word, expected_orp):
        assert calculator.calculate(word) == expected_orp

    @pytest.mark.parametrize(
        "length,expected_orp",
        [
            (1, 0),
            # length <= 5 -> length // 2
            (2, 1),
            (3, 1),
            (4, 2),
            (5, 2),
            # length <= 9 -> length // 2 - 1
            (6, 2),
            (7, 2),
            (8, 3),
            (9, 3),
            # length <= 13 -> length // 3
            (10, 3),
            (11, 3),
            (12, 4),
            (13, 4),
            # longer -> length // 4
            (14, 3),
            (16, 4),
            (40, 10),
        ],
    )
    def test_band_boundaries(self, calculator, length, expected_orp):
        assert calculator.calculate("x" * length) == expected_orp

    def test_orp_within_word(self, calculator):
        """The ORP index is always a valid character position."""
        for length in range(1, 120):
            orp = calculator.calculate("a" * length)
            assert 0 <= orp < length, f"ORP {orp} out of range for length {length}"

    def test_empty_word_is_zero(self, calculator):
        assert calculator.calculate("") == 0

    def test_module_level_helper(self):
        assert orp_index("reading") == 2


# =============================================================================
# Display Split Tests
# =============================================================================


class TestSplitForDisplay:
    """Tests for splitting a word around its focal character."""

    @pytest.mark.parametrize(
        "word,expected",
        [
            ("a", ("", "a", "")),
            ("cat", ("c", "a", "t")),
            ("jumps", ("ju", "m", "ps")),
            ("reading", ("re", "a", "ding")),
            ("Hello,", ("He", "l", "lo,")),
        ],
    )
    def test_split(self, calculator, word, expected):
        split = calculator.split_for_display(word)
        assert (split.prefix, split.focal, split.suffix) == expected

    def test_split_reassembles_word(self, calculator):
        for word in ["x", "to", "speed", "paragraph", "understanding", "counterrevolutionaries"]:
            split = calculator.split_for_display(word)
            assert split.text == word
            assert split.orp_index == calculator.calculate(word)

    def test_empty_word(self, calculator):
        assert calculator.split_for_display("") == EMPTY_SPLIT
        assert EMPTY_SPLIT == FocalSplit("", "", "")

    def test_splits_are_cached(self):
        assert focal_split("comprehension") is focal_split("comprehension")
