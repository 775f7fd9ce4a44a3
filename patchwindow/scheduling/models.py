"""Data models for maintenance-window rescheduling.

This module defines the narrow view of the management platform that the
schedule calculator works with: collections, their existing maintenance
windows, the weekday/time/duration description of a window, and the concrete
single-occurrence schedule computed for a cycle.
"""

from datetime import date, datetime, time, timedelta
from enum import IntEnum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class DayOfWeek(IntEnum):
    """Day of week with Sunday as ordinal 0."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def of(cls, value: Union[date, datetime]) -> "DayOfWeek":
        """Get the day of week for a date or datetime."""
        return cls(value.isoweekday() % 7)

    @classmethod
    def parse(cls, value: str) -> "DayOfWeek":
        """Parse a day name ("Wed", "wednesday") or ordinal ("3")."""
        text = value.strip()
        if text.isdigit():
            return cls(int(text))

        for day in cls:
            if day.name.lower().startswith(text.lower()) and len(text) >= 2:
                return day

        raise ValueError(f"Invalid day of week '{value}'")

    @property
    def short_name(self) -> str:
        return self.name[:3].capitalize()


class CollectionRef(BaseModel):
    """A named group of managed endpoints on the platform."""

    model_config = ConfigDict(frozen=True)

    collection_id: str = Field(description="Platform identifier of the collection")
    name: str = Field(description="Display name of the collection")


class MaintenanceWindowSpec(BaseModel):
    """Weekday, time of day and duration of an existing maintenance window."""

    model_config = ConfigDict(frozen=True)

    start_day_of_week: DayOfWeek = Field(description="Weekday the window starts on")
    start_time: time = Field(description="Time of day the window starts (hour, minute)")
    duration_minutes: int = Field(ge=0, description="Length of the window in minutes")

    @field_validator('start_time')
    @classmethod
    def validate_start_time(cls, v):
        """Only hour and minute are meaningful for a window start."""
        if v.second or v.microsecond:
            raise ValueError("start_time must not carry seconds")
        if v.tzinfo is not None:
            raise ValueError("start_time must be a naive time of day")
        return v


class ScheduledWindow(BaseModel):
    """A single, non-recurring occurrence of a maintenance window."""

    model_config = ConfigDict(frozen=True)

    start: datetime = Field(description="Start of the occurrence")
    end: datetime = Field(description="End of the occurrence")
    is_recurring: bool = Field(
        default=False,
        description="Always False; each cycle applies one concrete occurrence"
    )

    @model_validator(mode='after')
    def validate_bounds(self):
        if self.end < self.start:
            raise ValueError("end must not be before start")
        if self.is_recurring:
            raise ValueError("scheduled windows are single occurrences")
        return self

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def duration_minutes(self) -> int:
        return int(self.duration.total_seconds() // 60)


class ExistingWindow(BaseModel):
    """A maintenance window as currently configured on a collection."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Maintenance window name")
    start: datetime = Field(description="Start of the currently scheduled occurrence")
    duration_minutes: int = Field(ge=0, description="Length of the window in minutes")
    is_recurring: bool = Field(
        default=False,
        description="Whether the platform currently holds a recurrence rule"
    )

    def to_spec(self) -> MaintenanceWindowSpec:
        """Describe this window by weekday, time of day and duration."""
        return MaintenanceWindowSpec(
            start_day_of_week=DayOfWeek.of(self.start),
            start_time=self.start.time().replace(second=0, microsecond=0, tzinfo=None),
            duration_minutes=self.duration_minutes
        )
