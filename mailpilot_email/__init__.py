"""MailPilot email ingestion: IMAP fetch, parse and keyword classification."""

from .classifier import ClassificationResult, KeywordClassifier
from .cleaner import CleanedBody, EmailCleaner
from .config import ImapConfig, IngestionConfig
from .exceptions import MailboxConnectionError, ParseError
from .health import create_health_app
from .imap_client import AsyncImapClient
from .parser import MessageParser, html_to_text
from .pipeline import BatchReport, IngestionPipeline, ItemResult, ItemStatus, MessageSink
from .rules import KeywordRules, load_rules

__all__ = [
    "AsyncImapClient",
    "BatchReport",
    "ClassificationResult",
    "CleanedBody",
    "EmailCleaner",
    "ImapConfig",
    "IngestionConfig",
    "IngestionPipeline",
    "ItemResult",
    "ItemStatus",
    "KeywordClassifier",
    "KeywordRules",
    "MailboxConnectionError",
    "MessageParser",
    "MessageSink",
    "ParseError",
    "create_health_app",
    "html_to_text",
    "load_rules",
]
