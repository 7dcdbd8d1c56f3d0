"""MailPilot connector framework.

Public API re-exported here for convenience::

    from mailpilot_connector import MailboxInterface, RawMessage, setup_logging
"""

from .config import LoggingConfig, RetryConfig
from .exceptions import ConfigurationError, MailPilotError
from .interface import MailboxInterface
from .logging import redact_secrets, setup_logging
from .models import RawMessage
from .retry import with_retry

__all__ = [
    "ConfigurationError",
    "LoggingConfig",
    "MailPilotError",
    "MailboxInterface",
    "RawMessage",
    "RetryConfig",
    "redact_secrets",
    "setup_logging",
    "with_retry",
]
