"""Email delivery of run reports.

The report goes out as one ``multipart/alternative`` message: the plain-text
rendering (identical to the log file) and the HTML table. Transient SMTP
failures are retried with a growing delay; rejected credentials are not.
"""

import logging
import smtplib
import time
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field

from ..reporting.records import RunReport
from .base import BaseNotifier, NotificationResult, register_notifier


logger = logging.getLogger(__name__)

RETRY_BACKOFF = 1.5


class SMTPConfig(BaseModel):
    """Mail relay used to submit the report."""

    host: str = Field(default="localhost", description="Relay hostname")
    port: int = Field(default=25, description="Relay port")
    use_tls: bool = Field(default=False, description="Upgrade the connection with STARTTLS")
    use_ssl: bool = Field(default=False, description="Connect with implicit TLS")
    username: Optional[str] = Field(default=None, description="Login name, if the relay requires one")
    password: Optional[str] = Field(default=None, description="Login password")
    timeout_seconds: float = Field(default=30.0, description="Socket timeout")
    max_retries: int = Field(default=2, ge=0, description="Extra attempts after the first")
    retry_delay_seconds: float = Field(default=10.0, ge=0, description="Delay before the first retry")


class EmailConfig(BaseModel):
    """Sender, recipients and subject of the report message."""

    from_email: EmailStr
    from_name: Optional[str] = None
    to_emails: List[EmailStr] = Field(default_factory=list)
    subject_prefix: str = "[Patch Window]"


@register_notifier("email")
class EmailNotifier(BaseNotifier):
    """Sends the run report to the configured recipients over SMTP."""

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.smtp_config = SMTPConfig(**config.get('smtp', {}))
        self.email_config = EmailConfig(**config.get('email', {}))

    def validate_config(self) -> List[str]:
        errors = []
        if not self.email_config.to_emails:
            errors.append("No report recipient configured")
        if self.smtp_config.use_ssl and self.smtp_config.use_tls:
            errors.append("use_ssl and use_tls are mutually exclusive")
        if not 0 < self.smtp_config.port < 65536:
            errors.append(f"Invalid SMTP port {self.smtp_config.port}")
        return errors

    def send(self, report: RunReport) -> NotificationResult:
        if not self.enabled:
            return self._create_result(success=False, error_message="Email notification is disabled")

        msg = self.build_message(report)
        attempts = self.smtp_config.max_retries + 1
        delay = self.smtp_config.retry_delay_seconds
        last_error = None

        for attempt in range(1, attempts + 1):
            try:
                self._submit(msg)
            except smtplib.SMTPAuthenticationError as e:
                logger.error(f"SMTP relay rejected credentials: {e}")
                return self._create_result(
                    success=False,
                    error_message=f"SMTP authentication failed: {e}",
                    attempt_number=attempt
                )
            except (smtplib.SMTPException, OSError) as e:
                last_error = e
                logger.warning(f"Report email attempt {attempt}/{attempts} failed: {e}")
                if attempt < attempts:
                    time.sleep(delay)
                    delay *= RETRY_BACKOFF
                continue

            logger.info(f"Report emailed to {', '.join(self.email_config.to_emails)}")
            return self._create_result(
                success=True,
                response_data={
                    "recipients_count": len(self.email_config.to_emails),
                    "message_id": msg['Message-ID']
                },
                attempt_number=attempt
            )

        logger.error(f"Giving up on report email after {attempts} attempts")
        return self._create_result(
            success=False,
            error_message=f"Failed after {attempts} attempts. Last error: {last_error}",
            attempt_number=attempts
        )

    def _submit(self, msg: MIMEMultipart) -> None:
        smtp = self.smtp_config
        connection_class = smtplib.SMTP_SSL if smtp.use_ssl else smtplib.SMTP

        with connection_class(smtp.host, smtp.port, timeout=smtp.timeout_seconds) as server:
            if smtp.use_tls and not smtp.use_ssl:
                server.starttls()
            if smtp.username and smtp.password:
                server.login(smtp.username, smtp.password)
            server.send_message(msg, to_addrs=list(self.email_config.to_emails))

    def build_message(self, report: RunReport) -> MIMEMultipart:
        """Build the report message with text and HTML parts."""
        sender = self.email_config.from_email
        msg = MIMEMultipart('alternative')
        msg['From'] = formataddr((self.email_config.from_name or "Patch Window", sender))
        msg['To'] = ', '.join(self.email_config.to_emails)
        msg['Subject'] = self.build_subject(report, self.email_config.subject_prefix)
        msg['Message-ID'] = make_msgid(domain=sender.split('@')[-1])

        msg.attach(MIMEText(self.text_renderer.render(report), 'plain', 'utf-8'))
        msg.attach(MIMEText(self.html_renderer.render(report), 'html', 'utf-8'))
        return msg
