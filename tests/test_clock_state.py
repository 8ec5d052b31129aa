"""Tests for clock state derivation and text formatting."""
from dataclasses import FrozenInstanceError

import pytest

from faces.clock_state import (
    ClockState,
    compute_state,
    format_date_label,
    format_time_text,
    to_hour12,
)

# 2024-07-04 00:00:00 UTC
JULY_4_2024_MS = 1_720_051_200_000


class TestHourMapping:

    def test_zero_maps_to_twelve(self):
        assert to_hour12(0) == 12

    @pytest.mark.parametrize("hour", range(1, 12))
    def test_other_hours_unchanged(self, hour):
        assert to_hour12(hour) == hour


class TestFormatting:

    def test_just_after_midnight(self):
        state = compute_state(5 * 60 * 1000, "UTC")
        assert format_time_text(state) == "12:05 AM"

    def test_afternoon(self):
        state = compute_state((13 * 3600 + 30 * 60) * 1000, "UTC")
        assert state.time_text == "1:30 PM"

    def test_noon_is_pm(self):
        state = compute_state(12 * 3600 * 1000, "UTC")
        assert state.time_text == "12:00 PM"
        assert state.hour == 0
        assert state.is_pm is True

    def test_date_label(self):
        state = compute_state(JULY_4_2024_MS, "UTC")
        assert state.date_label == "Jul 04"

    def test_format_date_label_pads_day(self):
        assert format_date_label(1, 9) == "Jan 09"
        assert format_date_label(12, 31) == "Dec 31"


class TestComputeState:

    def test_seconds_carry_milliseconds(self):
        state = compute_state(61_250, "UTC")
        assert state.minute == 1
        assert state.second == pytest.approx(1.25)

    def test_fields(self):
        state = compute_state(JULY_4_2024_MS + (15 * 3600 + 42 * 60 + 7) * 1000, "UTC")
        assert isinstance(state, ClockState)
        assert state.hour24 == 15
        assert state.hour == 3
        assert state.hour12 == 3
        assert state.minute == 42
        assert state.second == pytest.approx(7.0)
        assert (state.month, state.day) == (7, 4)

    def test_fixed_offset(self):
        state = compute_state(0, "UTC+5:30")
        assert state.time_text == "5:30 AM"

    def test_negative_offset_crosses_date(self):
        state = compute_state(0, "UTC-7")
        assert state.time_text == "5:00 PM"
        assert state.date_label == "Dec 31"

    def test_named_timezone(self):
        # BST in July: UTC+1
        state = compute_state(JULY_4_2024_MS, "Europe/London")
        assert state.hour24 == 1

    def test_unknown_timezone_falls_back_to_local(self):
        state = compute_state(JULY_4_2024_MS, "Mars/Olympus_Mons")
        local = compute_state(JULY_4_2024_MS, "local")
        assert state.hour24 == local.hour24
        assert state.minute == local.minute
        assert state.timezone == "Mars/Olympus_Mons"

    def test_state_is_frozen(self):
        state = compute_state(0, "UTC")
        with pytest.raises(FrozenInstanceError):
            state.minute = 10  # type: ignore[misc]
