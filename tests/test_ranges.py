"""Tests for preset resolution, day patterns and window splitting."""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from pywebfleet.exceptions import WebfleetRequestError
from pywebfleet.models import TimeRange
from pywebfleet.ranges import Preset, day_patterns, parse_preset, resolve_range, split_range

NOW = datetime(2025, 1, 15, 10, 0, 0, tzinfo=UTC)  # a Wednesday
AMSTERDAM = ZoneInfo("Europe/Amsterdam")


def _range(hours: float) -> TimeRange:
    start = datetime(2025, 1, 1, tzinfo=UTC)
    return TimeRange(start=start, end=start + timedelta(hours=hours))


# ------------------------------------------------------------------
# Range resolver
# ------------------------------------------------------------------


class TestResolveRange:
    def test_today_starts_at_local_midnight(self) -> None:
        resolved = resolve_range(preset="today", now=NOW)
        assert resolved.start == datetime(2025, 1, 15, tzinfo=UTC)
        assert resolved.end == NOW

    def test_yesterday_is_full_previous_day(self) -> None:
        resolved = resolve_range(preset="yesterday", now=NOW)
        assert resolved.start == datetime(2025, 1, 14, 0, 0, 0, tzinfo=UTC)
        assert resolved.end == datetime(2025, 1, 14, 23, 59, 59, tzinfo=UTC)

    def test_last7_is_seven_days_back(self) -> None:
        resolved = resolve_range(preset="last7", now=NOW)
        assert resolved.start == NOW - timedelta(days=7)
        assert resolved.end == NOW

    def test_week_current_starts_on_monday(self) -> None:
        resolved = resolve_range(preset="week_current", now=NOW)
        assert resolved.start == datetime(2025, 1, 13, tzinfo=UTC)
        assert resolved.start.weekday() == 0
        assert resolved.end == NOW

    def test_week_current_on_sunday_goes_back_six_days(self) -> None:
        sunday = datetime(2025, 1, 19, 12, 0, tzinfo=UTC)
        resolved = resolve_range(preset=Preset.WEEK_CURRENT, now=sunday)
        assert resolved.start == datetime(2025, 1, 13, tzinfo=UTC)

    def test_unknown_preset_falls_back_to_today(self) -> None:
        assert resolve_range(preset="fortnight", now=NOW) == resolve_range(preset="today", now=NOW)

    def test_missing_preset_means_today(self) -> None:
        assert resolve_range(now=NOW) == resolve_range(preset="today", now=NOW)

    def test_unknown_preset_rejected_when_strict(self) -> None:
        with pytest.raises(WebfleetRequestError, match="fortnight"):
            resolve_range(preset="fortnight", now=NOW, strict=True)

    def test_local_zone_defines_calendar_day(self) -> None:
        # 23:30 UTC is already 00:30 on the 16th in Amsterdam.
        late = datetime(2025, 1, 15, 23, 30, tzinfo=UTC)
        resolved = resolve_range(preset="today", now=late, tz=AMSTERDAM)
        assert resolved.start == datetime(2025, 1, 16, tzinfo=AMSTERDAM)
        assert resolved.start.astimezone(UTC) == datetime(2025, 1, 15, 23, 0, tzinfo=UTC)

    def test_explicit_pair_wins_over_preset(self) -> None:
        resolved = resolve_range(
            preset="last7",
            range_from="2025-01-10T08:00:00Z",
            range_to="2025-01-10T18:00:00Z",
            now=NOW,
        )
        assert resolved.start == datetime(2025, 1, 10, 8, tzinfo=UTC)
        assert resolved.end == datetime(2025, 1, 10, 18, tzinfo=UTC)

    def test_lone_bound_is_ignored(self) -> None:
        resolved = resolve_range(preset="yesterday", range_from="2025-01-10T08:00:00Z", now=NOW)
        assert resolved.start == datetime(2025, 1, 14, tzinfo=UTC)

    def test_naive_explicit_bounds_use_local_zone(self) -> None:
        resolved = resolve_range(
            range_from=datetime(2025, 1, 10, 8, 0),
            range_to=datetime(2025, 1, 10, 9, 0, 0, 500_000),
            tz=AMSTERDAM,
        )
        assert resolved.start.astimezone(UTC) == datetime(2025, 1, 10, 7, 0, tzinfo=UTC)
        assert resolved.end.microsecond == 0

    def test_reversed_explicit_range_is_rejected(self) -> None:
        with pytest.raises(WebfleetRequestError):
            resolve_range(range_from="2025-01-10T18:00:00Z", range_to="2025-01-10T08:00:00Z")

    def test_garbage_explicit_bound_is_rejected(self) -> None:
        with pytest.raises(WebfleetRequestError):
            resolve_range(range_from="yesterday-ish", range_to="2025-01-10T08:00:00Z")


class TestParsePreset:
    def test_case_insensitive(self) -> None:
        assert parse_preset(" Yesterday ") is Preset.YESTERDAY

    def test_none_is_today(self) -> None:
        assert parse_preset(None) is Preset.TODAY


# ------------------------------------------------------------------
# Day patterns
# ------------------------------------------------------------------


class TestDayPatterns:
    def test_today(self) -> None:
        assert day_patterns("today", now=NOW) == ["d0"]

    def test_yesterday(self) -> None:
        assert day_patterns("yesterday", now=NOW) == ["d-1"]

    def test_last7_most_recent_first(self) -> None:
        assert day_patterns("last7", now=NOW) == ["d0", "d-1", "d-2", "d-3", "d-4", "d-5", "d-6"]

    def test_week_current_covers_monday_to_today(self) -> None:
        assert day_patterns("week_current", now=NOW) == ["d0", "d-1", "d-2"]

    def test_week_current_on_monday_is_single_day(self) -> None:
        monday = datetime(2025, 1, 13, 7, 0, tzinfo=UTC)
        assert day_patterns("week_current", now=monday) == ["d0"]

    def test_unknown_falls_back_to_today(self) -> None:
        assert day_patterns("someday", now=NOW) == ["d0"]


# ------------------------------------------------------------------
# Window splitter
# ------------------------------------------------------------------


class TestSplitRange:
    @pytest.mark.parametrize("hours", [0.5, 1, 24, 47, 48])
    def test_range_within_span_is_one_identical_window(self, hours: float) -> None:
        time_range = _range(hours)
        assert split_range(time_range, timedelta(hours=48)) == [time_range]

    @pytest.mark.parametrize("hours", [50, 97, 120, 24 * 7])
    def test_long_range_window_count_and_coverage(self, hours: float) -> None:
        time_range = _range(hours)
        max_span = timedelta(hours=48)
        windows = split_range(time_range, max_span)

        assert len(windows) == math.ceil(time_range.span / max_span)
        assert windows[0].start == time_range.start
        assert windows[-1].end == time_range.end
        for window in windows:
            assert window.span <= max_span
        for previous, following in zip(windows, windows[1:]):
            assert following.start - previous.end == timedelta(seconds=1)

        covered = sum((w.span for w in windows), timedelta()) + timedelta(seconds=len(windows) - 1)
        assert covered == time_range.span

    def test_fifty_hours_splits_at_forty_eight(self) -> None:
        time_range = _range(50)
        first, second = split_range(time_range)
        assert first.end == time_range.start + timedelta(hours=48)
        assert second.start == first.end + timedelta(seconds=1)
        assert second.end == time_range.end

    def test_empty_range_yields_no_windows(self) -> None:
        assert split_range(_range(0)) == []

    def test_non_positive_span_rejected(self) -> None:
        with pytest.raises(ValueError):
            split_range(_range(5), timedelta(0))


class TestTimeRange:
    def test_reversed_bounds_rejected(self) -> None:
        with pytest.raises(ValueError):
            TimeRange(start=NOW, end=NOW - timedelta(seconds=1))

    def test_naive_bounds_rejected(self) -> None:
        with pytest.raises(ValueError):
            TimeRange(start=datetime(2025, 1, 1), end=datetime(2025, 1, 2))

    def test_microseconds_truncated(self) -> None:
        time_range = TimeRange(start=NOW.replace(microsecond=999_999), end=NOW + timedelta(minutes=1))
        assert time_range.start == NOW


# ------------------------------------------------------------------
# Daylight saving transitions
# ------------------------------------------------------------------


class TestDaylightSaving:
    def test_bounds_are_stored_in_utc(self) -> None:
        time_range = TimeRange(
            start=datetime(2025, 10, 25, tzinfo=AMSTERDAM),
            end=datetime(2025, 10, 27, tzinfo=AMSTERDAM),
        )
        assert time_range.start == datetime(2025, 10, 24, 22, tzinfo=UTC)
        assert time_range.start.utcoffset() == timedelta(0)
        assert time_range.span == timedelta(hours=49)

    def test_split_across_autumn_change_keeps_real_span(self) -> None:
        time_range = TimeRange(
            start=datetime(2025, 10, 25, tzinfo=AMSTERDAM),
            end=datetime(2025, 10, 28, tzinfo=AMSTERDAM),
        )
        windows = split_range(time_range, timedelta(hours=48))

        assert len(windows) == 2
        assert all(window.span <= timedelta(hours=48) for window in windows)
        assert windows[0].end == datetime(2025, 10, 26, 22, tzinfo=UTC)
        assert windows[-1].end == datetime(2025, 10, 27, 23, tzinfo=UTC)

    def test_spring_change_range_under_cap_is_one_window(self) -> None:
        time_range = TimeRange(
            start=datetime(2025, 3, 29, tzinfo=AMSTERDAM),
            end=datetime(2025, 3, 31, 0, 30, tzinfo=AMSTERDAM),
        )
        assert time_range.span == timedelta(hours=47, minutes=30)
        assert split_range(time_range, timedelta(hours=48)) == [time_range]

    def test_last7_is_elapsed_time_across_change(self) -> None:
        now = datetime(2025, 10, 29, 10, 0, tzinfo=UTC)
        resolved = resolve_range(preset="last7", now=now, tz=AMSTERDAM)
        assert resolved.start == datetime(2025, 10, 22, 10, 0, tzinfo=UTC)
        assert resolved.end == now
        assert resolved.span == timedelta(days=7)

    def test_naive_bounds_across_change_measure_real_hours(self) -> None:
        resolved = resolve_range(
            range_from="2025-10-25T00:00:00",
            range_to="2025-10-27T00:00:00",
            tz=AMSTERDAM,
        )
        assert resolved.span == timedelta(hours=49)
