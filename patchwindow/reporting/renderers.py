"""Plain-text and HTML renderings of a run report.

The log file takes the plain-text rendering and the notification email takes
the HTML one. Both render the same records independently; a report without
records renders as ``NO_MODIFICATIONS_MESSAGE``.
"""

import html
from datetime import datetime
from typing import List, Optional

from .records import RecordStatus, ReportRecord, RunReport


NO_MODIFICATIONS_MESSAGE = "No maintenance window modifications occurred."

DATETIME_FORMAT = "%Y-%m-%d %H:%M"


def _format_dt(value: Optional[datetime]) -> str:
    return value.strftime(DATETIME_FORMAT) if value else "n/a"


class TextReportRenderer:
    """Renders a report as plain text lines for the log file."""

    def render_record(self, record: ReportRecord) -> str:
        if record.status == RecordStatus.UPDATED:
            line = (
                f"{record.label}: original date {_format_dt(record.original_start)}, "
                f"new date {_format_dt(record.new_start)} - {_format_dt(record.new_end)}"
            )
            if record.precedes_patch_tuesday:
                line += " (before Patch Tuesday)"
            return line
        elif record.status == RecordStatus.FAILED:
            return f"{record.label}: ERROR {record.error}"
        else:
            return f"{record.label}: skipped ({record.reason})"

    def render_lines(self, report: RunReport) -> List[str]:
        if report.is_empty:
            return [NO_MODIFICATIONS_MESSAGE]
        return [self.render_record(record) for record in report.records]

    def render(self, report: RunReport) -> str:
        """Render the report body."""
        return '\n'.join(self.render_lines(report))

    def render_header(self, report: RunReport, generated_at: Optional[datetime] = None) -> str:
        generated_at = generated_at or datetime.now()
        site = f" site {report.site}" if report.site else ""
        return (
            f"=== Run {generated_at.strftime('%Y-%m-%d %H:%M:%S')}{site}: "
            f"{report.get_summary()} ==="
        )


class HtmlReportRenderer:
    """Renders a report as an HTML document for the notification email."""

    status_colors = {
        RecordStatus.UPDATED: '#28a745',
        RecordStatus.FAILED: '#dc3545',
        RecordStatus.SKIPPED: '#6c757d',
    }

    def render_record(self, record: ReportRecord) -> str:
        color = self.status_colors[record.status]
        if record.status == RecordStatus.UPDATED:
            detail = f'{_format_dt(record.new_start)} - {_format_dt(record.new_end)}'
            if record.precedes_patch_tuesday:
                detail += ' <em>(before Patch Tuesday)</em>'
        else:
            detail = html.escape(record.error or record.reason or '')

        return (
            '                <tr>'
            f'<td>{html.escape(record.collection_name)}</td>'
            f'<td>{html.escape(record.window_name or "")}</td>'
            f'<td>{_format_dt(record.original_start)}</td>'
            f'<td style="color: {color}">{record.status.value}</td>'
            f'<td>{detail}</td>'
            '</tr>'
        )

    def render(self, report: RunReport) -> str:
        """Render the report as a complete HTML document."""
        title = f"Maintenance windows for Patch Tuesday {report.patch_tuesday.isoformat()}"
        html_parts = [
            '<!DOCTYPE html>',
            '<html>',
            '<head>',
            '    <meta charset="utf-8">',
            f'    <title>{html.escape(title)}</title>',
            '    <style>',
            '        body { font-family: Arial, sans-serif; margin: 0; padding: 20px; }',
            '        .summary { margin-bottom: 16px; }',
            '        .records { width: 100%; border-collapse: collapse; }',
            '        .records th, .records td { padding: 6px 10px; text-align: left; border-bottom: 1px solid #dee2e6; }',
            '        .records th { background-color: #f8f9fa; }',
            '    </style>',
            '</head>',
            '<body>',
            f'    <h2>{html.escape(title)}</h2>',
        ]

        if report.is_empty:
            html_parts.append(f'    <p>{html.escape(NO_MODIFICATIONS_MESSAGE)}</p>')
        else:
            html_parts.extend([
                f'    <p class="summary">{html.escape(report.get_summary())}</p>',
                '    <table class="records">',
                '                <tr><th>Collection</th><th>Window</th><th>Original date</th>'
                '<th>Status</th><th>New date / detail</th></tr>',
            ])
            html_parts.extend(self.render_record(record) for record in report.records)
            html_parts.append('    </table>')

        html_parts.extend([
            '</body>',
            '</html>'
        ])

        return '\n'.join(html_parts)
