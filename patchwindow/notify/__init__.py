"""Run report notification.

Importing this package registers the built-in notifiers (``email`` and
``log``) with the global notifier registry.
"""

from .base import (
    BaseNotifier,
    NotificationResult,
    NotifierRegistry,
    notifier_registry,
    register_notifier,
)

from .email import EmailNotifier, SMTPConfig, EmailConfig
from .log import LogNotifier

__all__ = [
    'BaseNotifier',
    'NotificationResult',
    'NotifierRegistry',
    'notifier_registry',
    'register_notifier',
    'EmailNotifier',
    'SMTPConfig',
    'EmailConfig',
    'LogNotifier',
]
