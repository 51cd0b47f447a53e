#!/usr/bin/env python3
"""Tests for fuel-entry flagging."""

import pytest

from fleet import (
    Flag,
    FlagThresholds,
    InvalidOdometerReading,
    compute_flags,
    compute_odo_delta,
)


class TestComputeOdoDelta:
    """Tests for compute_odo_delta."""

    def test_positive_delta(self):
        assert compute_odo_delta(25678, 25510) == 168

    def test_zero_delta_allowed(self):
        assert compute_odo_delta(1000, 1000) == 0

    def test_backwards_raises(self):
        with pytest.raises(InvalidOdometerReading) as exc:
            compute_odo_delta(900, 1000)
        assert exc.value.odo_km == 900
        assert exc.value.previous_odo_km == 1000


class TestComputeFlags:
    """Tests for compute_flags with the default thresholds."""

    def test_ordinary_submission_has_no_flags(self):
        result = compute_flags(40, 1200, 1000, 95)
        assert result.odo_delta_km == 200
        assert result.flags == ()
        assert not result.flagged

    def test_odo_delta_threshold_is_exclusive(self):
        """Exactly 300 km is fine, 301 km is flagged."""
        assert compute_flags(40, 1300, 1000, 95).flags == ()
        assert compute_flags(40, 1301, 1000, 95).flags == (Flag.ODO_DELTA_HIGH,)

    def test_fuel_threshold_is_exclusive(self):
        assert compute_flags(60, 1100, 1000, 95).flags == ()
        assert compute_flags(60.5, 1100, 1000, 95).flags == (Flag.FUEL_OVER_MAX,)

    def test_ocr_threshold_is_exclusive(self):
        assert compute_flags(40, 1100, 1000, 85).flags == ()
        assert compute_flags(40, 1100, 1000, 84.9).flags == (Flag.LOW_OCR,)

    def test_all_flags_in_stable_order(self):
        result = compute_flags(75, 1500, 1000, 50)
        assert result.flags == (Flag.ODO_DELTA_HIGH, Flag.FUEL_OVER_MAX, Flag.LOW_OCR)
        assert result.flagged

    def test_example_from_dashboard(self):
        """520 km since last fill with a clean photo only trips the distance check."""
        result = compute_flags(40, 1520, 1000, 95)
        assert result.odo_delta_km == 520
        assert result.flags == (Flag.ODO_DELTA_HIGH,)

    def test_backwards_odometer_raises(self):
        with pytest.raises(InvalidOdometerReading):
            compute_flags(40, 900, 1000, 95)

    def test_is_deterministic(self):
        assert compute_flags(61, 1400, 1000, 80) == compute_flags(61, 1400, 1000, 80)

    @pytest.mark.parametrize("fuel_l", [0, -5])
    def test_non_positive_fuel_raises(self, fuel_l):
        with pytest.raises(ValueError):
            compute_flags(fuel_l, 1100, 1000, 95)

    @pytest.mark.parametrize("ocr", [-1, 100.5])
    def test_ocr_out_of_range_raises(self, ocr):
        with pytest.raises(ValueError):
            compute_flags(40, 1100, 1000, ocr)


class TestCustomThresholds:
    """Tests for compute_flags with configured thresholds."""

    def test_lower_tank_capacity(self):
        limits = FlagThresholds(max_tank_capacity_l=40)
        assert compute_flags(45, 1100, 1000, 95, limits).flags == (Flag.FUEL_OVER_MAX,)

    def test_higher_distance_limit(self):
        limits = FlagThresholds(odo_delta_high_km=600)
        assert compute_flags(40, 1520, 1000, 95, limits).flags == ()

    def test_defaults(self):
        limits = FlagThresholds()
        assert limits.max_tank_capacity_l == 60
        assert limits.odo_delta_high_km == 300
        assert limits.ocr_confidence_min == 85
