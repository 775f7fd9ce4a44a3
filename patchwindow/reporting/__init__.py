"""Run reporting: structured records, renderers and the log file sink."""

from .records import RecordStatus, ReportRecord, RunReport
from .renderers import (
    NO_MODIFICATIONS_MESSAGE,
    TextReportRenderer,
    HtmlReportRenderer,
)
from .log_sink import ReportLogWriter, DEFAULT_LOG_FILENAME

__all__ = [
    'RecordStatus',
    'ReportRecord',
    'RunReport',
    'NO_MODIFICATIONS_MESSAGE',
    'TextReportRenderer',
    'HtmlReportRenderer',
    'ReportLogWriter',
    'DEFAULT_LOG_FILENAME',
]
