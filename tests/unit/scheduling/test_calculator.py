"""Unit tests for Patch Tuesday schedule calculation."""

import pytest
from datetime import date, datetime, time, timedelta

from patchwindow.scheduling.calculator import (
    compute_patch_tuesday,
    resolve_current_cycle,
    compute_new_window,
    day_of_week,
    offset_from_patch_tuesday,
    precedes_patch_tuesday,
)
from patchwindow.scheduling.models import DayOfWeek, MaintenanceWindowSpec


def _all_months(start_year=2000, end_year=2040):
    for year in range(start_year, end_year + 1):
        for month in range(1, 13):
            yield year, month


class TestComputePatchTuesday:
    """Test Patch Tuesday resolution for a month."""

    def test_january_2020(self):
        """Day 12 is a Sunday, so Patch Tuesday is the 14th."""
        assert day_of_week(date(2020, 1, 12)) == DayOfWeek.SUNDAY
        assert compute_patch_tuesday(date(2020, 1, 1)) == date(2020, 1, 14)

    def test_february_2020(self):
        """Day 12 is a Wednesday, so Patch Tuesday is the 11th."""
        assert compute_patch_tuesday(date(2020, 2, 20)) == date(2020, 2, 11)

    def test_twelfth_on_tuesday(self):
        """When the 12th is itself a Tuesday it is Patch Tuesday."""
        assert compute_patch_tuesday(date(2021, 1, 31)) == date(2021, 1, 12)

    def test_only_month_matters(self):
        """Every day of a month resolves to the same Patch Tuesday."""
        results = {compute_patch_tuesday(date(2024, 3, day)) for day in range(1, 32)}
        assert results == {date(2024, 3, 12)}

    def test_always_second_tuesday(self):
        """Patch Tuesday is a Tuesday between the 8th and the 14th."""
        for year, month in _all_months():
            patch_tuesday = compute_patch_tuesday(date(year, month, 1))

            assert patch_tuesday.year == year
            assert patch_tuesday.month == month
            assert patch_tuesday.weekday() == 1  # Tuesday
            assert 8 <= patch_tuesday.day <= 14
            # Exactly one Tuesday earlier in the month
            assert (patch_tuesday.day - 1) // 7 == 1

    def test_accepts_datetime(self):
        assert compute_patch_tuesday(datetime(2020, 1, 20, 8, 30)) == date(2020, 1, 14)


class TestResolveCurrentCycle:
    """Test selection of the cycle a run aligns to."""

    def test_before_patch_tuesday(self):
        assert resolve_current_cycle(date(2020, 1, 10)) == date(2020, 1, 14)

    def test_on_patch_tuesday(self):
        """A run on Patch Tuesday itself stays in the current month."""
        assert resolve_current_cycle(date(2020, 1, 14)) == date(2020, 1, 14)

    def test_late_run_rolls_to_next_month(self):
        """A run on Jan 20 2020 aligns to February's Patch Tuesday."""
        assert resolve_current_cycle(date(2020, 1, 20)) == date(2020, 2, 11)

    def test_december_rolls_to_next_year(self):
        assert compute_patch_tuesday(date(2020, 12, 1)) == date(2020, 12, 8)
        assert resolve_current_cycle(date(2020, 12, 20)) == date(2021, 1, 12)

    def test_accepts_datetime(self):
        assert resolve_current_cycle(datetime(2020, 1, 14, 23, 59)) == date(2020, 1, 14)

    def test_never_in_the_past(self):
        """The resolved cycle is never before the run date and only moves
        to a later month when the run is after this month's Patch Tuesday."""
        day = date(2019, 1, 1)
        while day < date(2022, 1, 1):
            cycle = resolve_current_cycle(day)
            this_month = compute_patch_tuesday(day)

            assert cycle >= day
            assert cycle >= this_month
            if day > this_month:
                assert (cycle.year, cycle.month) > (day.year, day.month)
            else:
                assert cycle == this_month

            day += timedelta(days=1)


class TestComputeNewWindow:
    """Test mapping an existing window onto a Patch Tuesday cycle."""

    patch_tuesday = date(2020, 1, 14)

    def test_wednesday_window(self):
        spec = MaintenanceWindowSpec(
            start_day_of_week=DayOfWeek.WEDNESDAY,
            start_time=time(19, 0),
            duration_minutes=60
        )

        window = compute_new_window(self.patch_tuesday, spec)

        assert window.start == datetime(2020, 1, 15, 19, 0)
        assert window.end == datetime(2020, 1, 15, 20, 0)
        assert window.is_recurring is False

    def test_thursday_window(self):
        spec = MaintenanceWindowSpec(
            start_day_of_week=DayOfWeek.THURSDAY,
            start_time=time(2, 0),
            duration_minutes=120
        )

        window = compute_new_window(self.patch_tuesday, spec)

        assert window.start == datetime(2020, 1, 16, 2, 0)
        assert window.end == datetime(2020, 1, 16, 4, 0)

    def test_tuesday_window_stays_on_patch_tuesday(self):
        spec = MaintenanceWindowSpec(
            start_day_of_week=DayOfWeek.TUESDAY,
            start_time=time(22, 30),
            duration_minutes=45
        )

        window = compute_new_window(self.patch_tuesday, spec)

        assert window.start == datetime(2020, 1, 14, 22, 30)

    def test_monday_window_lands_before_patch_tuesday(self):
        spec = MaintenanceWindowSpec(
            start_day_of_week=DayOfWeek.MONDAY,
            start_time=time(23, 0),
            duration_minutes=90
        )

        window = compute_new_window(self.patch_tuesday, spec)

        assert window.start == datetime(2020, 1, 13, 23, 0)
        assert window.end == datetime(2020, 1, 14, 0, 30)

    def test_window_crossing_midnight(self):
        spec = MaintenanceWindowSpec(
            start_day_of_week=DayOfWeek.SATURDAY,
            start_time=time(22, 0),
            duration_minutes=240
        )

        window = compute_new_window(self.patch_tuesday, spec)

        assert window.start == datetime(2020, 1, 18, 22, 0)
        assert window.end == datetime(2020, 1, 19, 2, 0)

    def test_weekday_and_time_preserved(self):
        """Every weekday keeps its weekday, time of day and duration."""
        for year, month in _all_months(2019, 2021):
            patch_tuesday = compute_patch_tuesday(date(year, month, 1))
            for day in DayOfWeek:
                for duration in (0, 1, 59, 60, 1440):
                    spec = MaintenanceWindowSpec(
                        start_day_of_week=day,
                        start_time=time(3, 15),
                        duration_minutes=duration
                    )
                    window = compute_new_window(patch_tuesday, spec)

                    assert DayOfWeek.of(window.start) == day
                    assert window.start.time() == time(3, 15)
                    assert window.end - window.start == timedelta(minutes=duration)
                    assert window.duration_minutes == duration
                    assert abs((window.start.date() - patch_tuesday).days) <= 4

    def test_idempotent(self):
        spec = MaintenanceWindowSpec(
            start_day_of_week=DayOfWeek.FRIDAY,
            start_time=time(6, 0),
            duration_minutes=30
        )

        assert compute_new_window(self.patch_tuesday, spec) == compute_new_window(self.patch_tuesday, spec)


class TestDayOffsets:
    """Test weekday offsets relative to Patch Tuesday."""

    def test_offsets(self):
        assert offset_from_patch_tuesday(DayOfWeek.SUNDAY) == -2
        assert offset_from_patch_tuesday(DayOfWeek.MONDAY) == -1
        assert offset_from_patch_tuesday(DayOfWeek.TUESDAY) == 0
        assert offset_from_patch_tuesday(DayOfWeek.WEDNESDAY) == 1
        assert offset_from_patch_tuesday(DayOfWeek.SATURDAY) == 4

    def test_precedes_patch_tuesday(self):
        assert precedes_patch_tuesday(DayOfWeek.SUNDAY)
        assert precedes_patch_tuesday(DayOfWeek.MONDAY)
        assert not precedes_patch_tuesday(DayOfWeek.TUESDAY)
        assert not precedes_patch_tuesday(DayOfWeek.THURSDAY)
