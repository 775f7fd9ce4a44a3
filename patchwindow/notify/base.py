"""Base classes and interfaces for run report notification.

This module provides the foundation for notifier implementations: the
abstract notifier, its result model and the registry used to create
notifiers from configuration.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..reporting.records import RunReport
from ..reporting.renderers import HtmlReportRenderer, TextReportRenderer


class NotificationResult(BaseModel):
    """Result of a notification attempt."""

    notifier_type: str = Field(description="Type of notifier used")
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="Notification timestamp"
    )
    success: bool = Field(description="Whether notification succeeded")
    error_message: Optional[str] = Field(
        default=None,
        description="Error message if notification failed"
    )
    response_data: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Details returned by the transport"
    )
    attempt_number: int = Field(default=1, description="Attempt number")


class BaseNotifier(ABC):
    """Abstract base class for report notifiers."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.notifier_type = self.__class__.__name__
        self.enabled = config.get('enabled', True)
        self.text_renderer = TextReportRenderer()
        self.html_renderer = HtmlReportRenderer()

    @abstractmethod
    def send(self, report: RunReport) -> NotificationResult:
        """Send a run report.

        Args:
            report: Report to deliver

        Returns:
            Notification result with status and details
        """
        pass

    @abstractmethod
    def validate_config(self) -> List[str]:
        """Validate notifier configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        pass

    def build_subject(self, report: RunReport, prefix: str = "") -> str:
        subject = f"Maintenance windows for Patch Tuesday {report.patch_tuesday.isoformat()}"
        if report.site:
            subject += f" ({report.site})"
        if report.dry_run:
            subject = f"[DRY RUN] {subject}"
        if report.has_failures:
            subject += f" - {report.failed_count} failed"
        return f"{prefix} {subject}".strip()

    def _create_result(
        self,
        success: bool,
        error_message: Optional[str] = None,
        response_data: Optional[Dict[str, Any]] = None,
        attempt_number: int = 1
    ) -> NotificationResult:
        return NotificationResult(
            notifier_type=self.notifier_type,
            success=success,
            error_message=error_message,
            response_data=response_data,
            attempt_number=attempt_number
        )


class NotifierRegistry:
    """Registry for managing notifier types."""

    def __init__(self):
        self._notifiers: Dict[str, type] = {}

    def register(self, notifier_type: str, notifier_class: type) -> None:
        """Register a notifier class.

        Args:
            notifier_type: Type identifier for the notifier
            notifier_class: Notifier class to register
        """
        if not issubclass(notifier_class, BaseNotifier):
            raise ValueError(f"Notifier class must inherit from BaseNotifier: {notifier_class}")

        self._notifiers[notifier_type] = notifier_class

    def get_notifier_class(self, notifier_type: str) -> Optional[type]:
        return self._notifiers.get(notifier_type)

    def create_notifier(self, notifier_type: str, config: Dict[str, Any]) -> BaseNotifier:
        """Create notifier instance.

        Raises:
            ValueError: If notifier type is not registered
        """
        notifier_class = self.get_notifier_class(notifier_type)
        if not notifier_class:
            raise ValueError(f"Unknown notifier type: {notifier_type}")

        return notifier_class(config)

    def list_notifier_types(self) -> List[str]:
        return list(self._notifiers.keys())


# Global notifier registry
notifier_registry = NotifierRegistry()


def register_notifier(notifier_type: str):
    """Decorator to register a notifier class.

    Args:
        notifier_type: Type identifier for the notifier
    """
    def decorator(notifier_class: type) -> type:
        notifier_registry.register(notifier_type, notifier_class)
        return notifier_class

    return decorator
