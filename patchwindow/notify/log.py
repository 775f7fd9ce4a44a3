"""Log-only notifier used when email delivery is disabled."""

import logging
from typing import List

from ..reporting.records import RunReport
from .base import BaseNotifier, NotificationResult, register_notifier


logger = logging.getLogger(__name__)


@register_notifier("log")
class LogNotifier(BaseNotifier):
    """Writes the report to the application log instead of sending it."""

    def send(self, report: RunReport) -> NotificationResult:
        logger.info(self.build_subject(report))
        for line in self.text_renderer.render_lines(report):
            logger.info(line)
        return self._create_result(success=True)

    def validate_config(self) -> List[str]:
        return []
