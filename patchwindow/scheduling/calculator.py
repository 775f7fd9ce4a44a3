"""Patch-Tuesday-relative schedule calculation.

Patch Tuesday is the second Tuesday of a month. The 12th of any month always
lies in the same Sunday-started week as the second Tuesday, so shifting the
12th onto the Tuesday of its week yields the second Tuesday (day 8 to 14).

A maintenance window keeps its weekday relative to Patch Tuesday: a window on
Wednesday lands the day after Patch Tuesday, Thursday two days after, and so
on. Sunday and Monday windows land before Patch Tuesday in the same week.
"""

from datetime import date, datetime, timedelta

from .models import DayOfWeek, MaintenanceWindowSpec, ScheduledWindow


ANCHOR_DAY = 12


def day_of_week(value: date) -> DayOfWeek:
    """Get the Sunday-based day of week for a date."""
    return DayOfWeek.of(value)


def compute_patch_tuesday(reference_date: date) -> date:
    """Get Patch Tuesday for the month of ``reference_date``.

    Args:
        reference_date: Any date in the target month

    Returns:
        The second Tuesday of that month
    """
    base = date(reference_date.year, reference_date.month, ANCHOR_DAY)
    return base + timedelta(days=DayOfWeek.TUESDAY - day_of_week(base))


def resolve_current_cycle(today: date) -> date:
    """Get the Patch Tuesday that this run's windows should align to.

    Runs on or before this month's Patch Tuesday use it; later runs roll over
    to next month's, so the returned date is never before ``today``.

    Args:
        today: The run date

    Returns:
        Patch Tuesday of the current cycle
    """
    if isinstance(today, datetime):
        today = today.date()

    candidate = compute_patch_tuesday(today)
    if today > candidate:
        if today.month == 12:
            next_month = date(today.year + 1, 1, ANCHOR_DAY)
        else:
            next_month = date(today.year, today.month + 1, ANCHOR_DAY)
        candidate = compute_patch_tuesday(next_month)

    return candidate


def offset_from_patch_tuesday(day: DayOfWeek) -> int:
    """Get the signed day offset of a weekday from Patch Tuesday (-2 to +4)."""
    return int(day) - DayOfWeek.TUESDAY


def precedes_patch_tuesday(day: DayOfWeek) -> bool:
    """Whether windows on this weekday are scheduled before Patch Tuesday."""
    return offset_from_patch_tuesday(day) < 0


def compute_new_window(patch_tuesday: date, spec: MaintenanceWindowSpec) -> ScheduledWindow:
    """Compute the single occurrence of a window for a Patch Tuesday cycle.

    Args:
        patch_tuesday: Patch Tuesday the cycle aligns to
        spec: Weekday, time of day and duration of the existing window

    Returns:
        Non-recurring window on the same weekday and time of day
    """
    new_date = patch_tuesday + timedelta(days=offset_from_patch_tuesday(spec.start_day_of_week))
    start = datetime.combine(new_date, spec.start_time)
    end = start + timedelta(minutes=spec.duration_minutes)
    return ScheduledWindow(start=start, end=end)
