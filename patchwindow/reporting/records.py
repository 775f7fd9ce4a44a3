"""Structured report records for a rescheduling run.

Each processed maintenance window (or each collection whose windows could not
be read) produces one record. Records are kept in processing order so the log
and email read as an audit trail of the run.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from ..scheduling.models import CollectionRef, ScheduledWindow


class RecordStatus(str, Enum):
    """Outcome of processing one maintenance window."""
    UPDATED = "updated"
    FAILED = "failed"
    SKIPPED = "skipped"


class ReportRecord(BaseModel):
    """Outcome for a single collection window."""

    status: RecordStatus = Field(description="Processing outcome")
    collection_id: str = Field(description="Platform identifier of the collection")
    collection_name: str = Field(description="Display name of the collection")
    window_name: Optional[str] = Field(default=None, description="Maintenance window name")

    original_start: Optional[datetime] = Field(
        default=None,
        description="Start of the window before this run"
    )
    new_start: Optional[datetime] = Field(default=None, description="Start of the applied window")
    new_end: Optional[datetime] = Field(default=None, description="End of the applied window")

    error: Optional[str] = Field(default=None, description="Failure message")
    reason: Optional[str] = Field(default=None, description="Why the collection was skipped")
    precedes_patch_tuesday: bool = Field(
        default=False,
        description="Window lands before Patch Tuesday (Sunday or Monday)"
    )

    @classmethod
    def updated(
        cls,
        collection: CollectionRef,
        window_name: str,
        original_start: datetime,
        schedule: ScheduledWindow,
        precedes_patch_tuesday: bool = False
    ) -> "ReportRecord":
        return cls(
            status=RecordStatus.UPDATED,
            collection_id=collection.collection_id,
            collection_name=collection.name,
            window_name=window_name,
            original_start=original_start,
            new_start=schedule.start,
            new_end=schedule.end,
            precedes_patch_tuesday=precedes_patch_tuesday
        )

    @classmethod
    def failed(
        cls,
        collection: CollectionRef,
        error: str,
        window_name: Optional[str] = None,
        original_start: Optional[datetime] = None
    ) -> "ReportRecord":
        return cls(
            status=RecordStatus.FAILED,
            collection_id=collection.collection_id,
            collection_name=collection.name,
            window_name=window_name,
            original_start=original_start,
            error=error
        )

    @classmethod
    def skipped(cls, collection: CollectionRef, reason: str) -> "ReportRecord":
        return cls(
            status=RecordStatus.SKIPPED,
            collection_id=collection.collection_id,
            collection_name=collection.name,
            reason=reason
        )

    @property
    def label(self) -> str:
        if self.window_name:
            return f"{self.collection_name} / {self.window_name}"
        return self.collection_name


@dataclass
class RunReport:
    """Ordered outcome of one rescheduling run."""

    run_date: date
    patch_tuesday: date
    site: Optional[str] = None
    dry_run: bool = False
    records: List[ReportRecord] = field(default_factory=list)

    def add(self, record: ReportRecord) -> None:
        self.records.append(record)

    def _count(self, status: RecordStatus) -> int:
        return sum(1 for record in self.records if record.status == status)

    @property
    def updated_count(self) -> int:
        return self._count(RecordStatus.UPDATED)

    @property
    def failed_count(self) -> int:
        return self._count(RecordStatus.FAILED)

    @property
    def skipped_count(self) -> int:
        return self._count(RecordStatus.SKIPPED)

    @property
    def is_empty(self) -> bool:
        return not self.records

    @property
    def has_failures(self) -> bool:
        return self.failed_count > 0

    def get_summary(self) -> str:
        """Get a one-line human-readable summary."""
        prefix = "[DRY RUN] " if self.dry_run else ""
        return (
            f"{prefix}Patch Tuesday {self.patch_tuesday.isoformat()}: "
            f"{self.updated_count} updated, {self.failed_count} failed, "
            f"{self.skipped_count} skipped"
        )
