"""Rescheduling run driver.

This module runs one monthly cycle: resolve Patch Tuesday for the run date,
walk the selected collections in discovery order, compute and apply each
window's new single occurrence, then persist and deliver the report. Each
collection is processed independently; a failure on one collection is
recorded and the run moves on to the next.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import IntEnum
from pathlib import Path
from typing import Optional

from ..notify import NotificationResult, notifier_registry
from ..platform import MaintenancePlatform, create_platform
from ..reporting import ReportLogWriter, ReportRecord, RunReport
from ..scheduling import (
    CollectionFilter,
    CollectionRef,
    compute_new_window,
    offset_from_patch_tuesday,
    precedes_patch_tuesday,
    resolve_current_cycle,
)
from .config import PatchWindowConfiguration


logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    """CLI exit codes.

    Per-collection failures are reported in the run report and do not change
    the exit code.
    """
    SUCCESS = 0
    CONFIG_ERROR = 3      # Configuration or setup error
    RUNTIME_ERROR = 4     # Platform unreachable or run aborted


class RescheduleRunner:
    """Applies the current cycle's schedule to every selected collection."""

    def __init__(
        self,
        platform: MaintenancePlatform,
        collection_filter: Optional[CollectionFilter] = None,
        dry_run: bool = False
    ):
        self.platform = platform
        self.collection_filter = collection_filter or CollectionFilter()
        self.dry_run = dry_run

    def run(self, today: date) -> RunReport:
        """Run one rescheduling cycle.

        Args:
            today: Run date used to resolve the Patch Tuesday cycle

        Returns:
            Report with one record per processed window, in discovery order

        Raises:
            PlatformError: If collections cannot be listed
        """
        patch_tuesday = resolve_current_cycle(today)
        report = RunReport(
            run_date=today,
            patch_tuesday=patch_tuesday,
            site=self.platform.site,
            dry_run=self.dry_run
        )
        logger.info(f"Run date {today.isoformat()}, aligning windows to Patch Tuesday {patch_tuesday.isoformat()}")

        collections = self.collection_filter.apply(self.platform.list_collections())
        logger.info(f"{len(collections)} collection(s) match '{self.collection_filter.pattern}'")

        for collection in collections:
            self._process_collection(collection, patch_tuesday, report)

        logger.info(report.get_summary())
        return report

    def _process_collection(self, collection: CollectionRef, patch_tuesday: date, report: RunReport) -> None:
        try:
            windows = self.platform.get_windows(collection)
        except Exception as e:
            logger.error(f"Could not read maintenance windows for '{collection.name}': {e}")
            report.add(ReportRecord.failed(collection, str(e)))
            return

        if not windows:
            logger.info(f"Collection '{collection.name}' has no maintenance window")
            report.add(ReportRecord.skipped(collection, "no maintenance window"))
            return

        for window in windows:
            spec = window.to_spec()
            schedule = compute_new_window(patch_tuesday, spec)
            early = precedes_patch_tuesday(spec.start_day_of_week)
            if early:
                logger.warning(
                    f"Window '{window.name}' on '{collection.name}' falls on "
                    f"{spec.start_day_of_week.short_name}, "
                    f"{abs(offset_from_patch_tuesday(spec.start_day_of_week))} day(s) before Patch Tuesday"
                )

            if not self.dry_run:
                try:
                    self.platform.apply_schedule(collection.collection_id, window.name, schedule)
                except Exception as e:
                    logger.error(f"Failed to update '{window.name}' on '{collection.name}': {e}")
                    report.add(ReportRecord.failed(
                        collection, str(e), window_name=window.name, original_start=window.start
                    ))
                    continue

            logger.info(
                f"'{collection.name}' / '{window.name}': {window.start.isoformat()} -> "
                f"{schedule.start.isoformat()} ({spec.duration_minutes} min)"
            )
            report.add(ReportRecord.updated(
                collection, window.name, window.start, schedule, precedes_patch_tuesday=early
            ))


@dataclass
class RunOutcome:
    """Everything a CLI run produced."""

    report: RunReport
    log_path: Optional[Path] = None
    log_error: Optional[str] = None
    notification: Optional[NotificationResult] = None


def build_platform(config: PatchWindowConfiguration) -> MaintenancePlatform:
    """Create the configured platform backend."""
    platform_config = {
        "site": config.site,
        "inventory_path": config.platform.inventory_path,
        "read_only": config.platform.read_only or config.execution.dry_run,
    }
    return create_platform(config.platform.type, platform_config)


def build_notifier_config(config: PatchWindowConfiguration) -> dict:
    notification = config.notification
    return {
        "enabled": notification.enabled,
        "smtp": notification.smtp.model_dump(),
        "email": {
            "from_email": notification.from_email,
            "from_name": notification.from_name,
            "to_emails": [notification.recipient] if notification.recipient else [],
            "subject_prefix": notification.subject_prefix,
        },
    }


def notify_report(config: PatchWindowConfiguration, report: RunReport) -> NotificationResult:
    """Deliver a report through the configured notifier.

    Notifier setup problems are returned as a failed result so that a run
    whose windows were already applied still completes.
    """
    notifier_type = config.notification.notifier if config.notification.enabled else "log"
    try:
        notifier = notifier_registry.create_notifier(notifier_type, build_notifier_config(config))
    except ValueError as e:
        return NotificationResult(
            notifier_type=notifier_type,
            success=False,
            error_message=f"Invalid {notifier_type} notifier configuration: {e}"
        )

    errors = notifier.validate_config()
    if errors:
        return NotificationResult(
            notifier_type=notifier.notifier_type,
            success=False,
            error_message="; ".join(errors)
        )

    return notifier.send(report)


def run_reschedule(
    config: PatchWindowConfiguration,
    today: date,
    platform: Optional[MaintenancePlatform] = None
) -> RunOutcome:
    """Run a full cycle from configuration: update, log and notify.

    Args:
        config: Effective configuration
        today: Run date
        platform: Platform backend (default: built from configuration)

    Returns:
        Run outcome with the report, log file path and notification result
    """
    platform = platform or build_platform(config)
    collection_filter = CollectionFilter(
        pattern=config.filter.pattern,
        exclude_patterns=config.filter.exclude_patterns
    )

    runner = RescheduleRunner(platform, collection_filter, dry_run=config.execution.dry_run)
    report = runner.run(today)
    outcome = RunOutcome(report=report)

    if config.report.log_dir:
        writer = ReportLogWriter(config.report.log_dir, config.report.log_filename)
        try:
            outcome.log_path = writer.write(report)
        except OSError as e:
            outcome.log_error = str(e)
            logger.error(f"Could not write report log in {config.report.log_dir}: {e}")

    outcome.notification = notify_report(config, report)
    if not outcome.notification.success:
        logger.error(f"Report notification failed: {outcome.notification.error_message}")

    return outcome
