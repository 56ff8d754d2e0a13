"""Unit tests for scale normalization and nearest-value matching."""

from rhythmguard.scales import (
    is_on_scale,
    nearest_scale_values,
    normalize_scale,
    normalize_scale_by_unit,
)


class TestNormalizeScale:
    """Tests for pixel-space normalization."""

    def test_mixed_entries_sorted_and_deduped(self):
        """Test numbers, px and rem strings merge into one pixel scale."""
        scale = normalize_scale([0, "1rem", "8px", 4, "2vw", "0.5em"], 16)

        assert scale == [0, 4, 8, 16]

    def test_near_duplicates_collapse(self):
        """Test entries closer than epsilon collapse."""
        assert normalize_scale([4, 4.00001], 16) == [4]

    def test_booleans_are_not_numbers(self):
        """Test booleans are dropped rather than read as 0/1."""
        assert normalize_scale([True, 4], 16) == [4]

    def test_base_font_size_applies(self):
        """Test rem conversion uses the given base size."""
        assert normalize_scale(["1rem", "2rem"], 10) == [10, 20]

    def test_idempotent(self):
        """Test normalizing an already normalized scale changes nothing."""
        raw = [24.5, 0, "4px", "0.5rem", 8.00001, "1rem", 16, "3em", "2vw", 8.00012]
        once = normalize_scale(raw, 16)

        assert normalize_scale(once, 16) == once
        assert once == [0, 4, 8, 8.00012, 16, 24.5, 48]


class TestNormalizeScaleByUnit:
    """Tests for per-unit bucketing."""

    def test_buckets_by_literal_unit(self):
        """Test numbers and unitless strings land in px."""
        by_unit = normalize_scale_by_unit([0, "1rem", "2vw", "8px", 4, "12", "0.5rem"])

        assert by_unit == {"px": [0, 4, 8, 12], "rem": [0.5, 1], "vw": [2]}

    def test_invalid_entries_dropped(self):
        """Test unparsable strings are skipped."""
        assert normalize_scale_by_unit(["auto", "4px"]) == {"px": [4]}

    def test_buckets_idempotent(self):
        """Test re-normalizing each bucket returns it unchanged."""
        raw = ["1rem", 4, "0.5rem", "1.00001rem", "8px", 8.00001, "2vw", "2.5vw", "12"]
        by_unit = normalize_scale_by_unit(raw)

        assert by_unit == {"px": [4, 8, 12], "rem": [0.5, 1], "vw": [2, 2.5]}
        for values in by_unit.values():
            assert normalize_scale_by_unit(values) == {"px": values}


class TestNearestScaleValues:
    """Tests for nearest_scale_values."""

    SCALE = [0, 4, 8, 12, 16]

    def test_between_members(self):
        """Test bounds around an off-scale target."""
        nearest = nearest_scale_values(13, self.SCALE)

        assert (nearest.lower, nearest.upper, nearest.nearest) == (12, 16, 12)

    def test_closer_to_upper(self):
        """Test the upper bound wins when strictly closer."""
        assert nearest_scale_values(15, self.SCALE).nearest == 16

    def test_midpoint_prefers_lower(self):
        """Test ties resolve to the lower member."""
        assert nearest_scale_values(14, self.SCALE).nearest == 12

    def test_above_scale_clamps(self):
        """Test targets above the largest member."""
        nearest = nearest_scale_values(100, [0, 4, 8])

        assert (nearest.lower, nearest.upper, nearest.nearest) == (8, 8, 8)

    def test_below_scale_clamps(self):
        """Test targets below the smallest member."""
        nearest = nearest_scale_values(2, [4, 8])

        assert (nearest.lower, nearest.upper, nearest.nearest) == (4, 4, 4)

    def test_empty_scale(self):
        """Test an empty scale has no nearest value."""
        assert nearest_scale_values(3, []) is None


def test_is_on_scale_tolerance():
    """Test membership uses epsilon tolerance."""
    assert is_on_scale(12.00001, [4, 12])
    assert not is_on_scale(13, [4, 12])
