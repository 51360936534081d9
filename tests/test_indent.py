"""Tests for indentation unit tracking."""

import pytest

from jasn import (
    IndentKind,
    IndentTracker,
    IndentUnit,
    InconsistentIndentStyleError,
    InvalidIndentCountError,
    MixedIndentError,
)


class TestIndentTracker:
    def test_no_indent_is_level_zero(self):
        tracker = IndentTracker()
        assert tracker.measure("") == 0
        assert tracker.unit is None

    @pytest.mark.parametrize(
        "first,unit",
        [
            ("  ", IndentUnit(2, IndentKind.SPACE)),
            ("    ", IndentUnit(4, IndentKind.SPACE)),
            ("\t", IndentUnit(1, IndentKind.TAB)),
        ],
    )
    def test_first_indent_sets_unit(self, first, unit):
        tracker = IndentTracker()
        assert tracker.measure(first) == 1
        assert tracker.unit == unit

    def test_levels_are_multiples_of_unit(self):
        tracker = IndentTracker()
        tracker.measure("   ")
        assert tracker.measure("      ") == 2
        assert tracker.measure("   ") == 1
        assert tracker.measure("") == 0

    def test_first_indent_may_be_deep(self):
        """The unit comes from the first indent seen, whatever its width."""
        tracker = IndentTracker()
        assert tracker.measure("\t\t") == 1
        assert tracker.measure("\t\t\t\t") == 2

    def test_width_not_a_multiple(self):
        tracker = IndentTracker()
        tracker.measure("  ")
        with pytest.raises(InvalidIndentCountError) as exc:
            tracker.measure("   ")
        assert (exc.value.unit, exc.value.got) == (2, 3)

    def test_tabs_after_spaces(self):
        tracker = IndentTracker()
        tracker.measure("  ")
        with pytest.raises(InconsistentIndentStyleError) as exc:
            tracker.measure("\t")
        assert "expected spaces, got tabs" in str(exc.value)

    def test_spaces_after_tabs(self):
        tracker = IndentTracker()
        tracker.measure("\t")
        with pytest.raises(InconsistentIndentStyleError):
            tracker.measure("  ")

    @pytest.mark.parametrize("indent", [" \t", "\t ", "  \t  "])
    def test_mixed_run(self, indent):
        with pytest.raises(MixedIndentError):
            IndentTracker().measure(indent)
