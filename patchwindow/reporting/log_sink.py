"""Report log file persistence."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .records import RunReport
from .renderers import TextReportRenderer


logger = logging.getLogger(__name__)

DEFAULT_LOG_FILENAME = "patchwindow_%Y%m.log"


class ReportLogWriter:
    """Appends plain-text run reports to a dated log file."""

    def __init__(
        self,
        log_dir: Union[str, Path],
        filename_template: str = DEFAULT_LOG_FILENAME,
        renderer: Optional[TextReportRenderer] = None
    ):
        """Initialize the writer.

        Args:
            log_dir: Directory holding the report logs
            filename_template: strftime template applied to the run date
            renderer: Text renderer (default: TextReportRenderer)
        """
        self.log_dir = Path(log_dir)
        self.filename_template = filename_template
        self.renderer = renderer or TextReportRenderer()

    def path_for(self, report: RunReport) -> Path:
        return self.log_dir / report.run_date.strftime(self.filename_template)

    def write(self, report: RunReport, generated_at: Optional[datetime] = None) -> Path:
        """Append a report to its log file.

        Returns:
            Path of the log file written
        """
        self.log_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(report)

        lines = [self.renderer.render_header(report, generated_at)]
        lines.extend(self.renderer.render_lines(report))

        with open(path, 'a', encoding='utf-8') as f:
            f.write('\n'.join(lines) + '\n')

        logger.info(f"Report written to {path}")
        return path
