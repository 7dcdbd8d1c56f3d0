"""IngestionPipeline: connector to parser to classifier to persistence sink."""

from __future__ import annotations

from collections import Counter
from contextlib import aclosing
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

import structlog

from mailpilot_connector import MailboxInterface, RawMessage
from mailpilot_schema import Category, ClassifiedMessage

from .classifier import KeywordClassifier
from .cleaner import EmailCleaner
from .exceptions import ParseError
from .parser import MessageParser

logger = structlog.get_logger()


class MessageSink(Protocol):
    """Persistence collaborator that receives classified messages.

    Deduplication by ``message_id`` across runs is the sink's concern.
    """

    async def save(self, message: ClassifiedMessage) -> None: ...


class ItemStatus(str, Enum):
    CLASSIFIED = "classified"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ItemResult:
    """Outcome for one fetched message."""

    uid: str
    status: ItemStatus
    message: ClassifiedMessage | None = None
    reason: str | None = None


@dataclass
class BatchReport:
    """Per-item results of one refresh, in server order."""

    results: list[ItemResult] = field(default_factory=list)

    @property
    def messages(self) -> list[ClassifiedMessage]:
        return [r.message for r in self.results if r.message is not None]

    @property
    def skipped(self) -> list[ItemResult]:
        return [r for r in self.results if r.status is ItemStatus.SKIPPED]

    def category_counts(self) -> dict[Category, int]:
        """Number of classified messages per category, zero-filled."""
        counts = Counter(m.category for m in self.messages)
        return {category: counts.get(category, 0) for category in Category}


class IngestionPipeline:
    """Run one bounded mailbox refresh.

    Messages are processed one at a time in the order the server returns
    them.  A message that fails to parse is skipped and recorded in the
    report; a configuration or connection failure aborts the run, and in
    that case nothing reaches the sink because records are only handed
    over once the fetch has finished.

    Concurrent runs against the same account are not serialized here.
    """

    def __init__(
        self,
        mailbox: MailboxInterface,
        *,
        sink: MessageSink | None = None,
        parser: MessageParser | None = None,
        classifier: KeywordClassifier | None = None,
        cleaner: EmailCleaner | None = None,
    ) -> None:
        self._mailbox = mailbox
        self._sink = sink
        self._parser = parser or MessageParser()
        self._classifier = classifier or KeywordClassifier()
        self._cleaner = cleaner

    async def run(self, count: int) -> BatchReport:
        report = BatchReport()
        seen_ids: set[str] = set()

        async with aclosing(self._mailbox.fetch_recent(count)) as stream:
            index = 0
            async for raw in stream:
                result = self._process(raw, index, seen_ids)
                report.results.append(result)
                index += 1

        if self._sink is not None:
            for message in report.messages:
                await self._sink.save(message)

        logger.info(
            "ingestion_complete",
            classified=len(report.messages),
            skipped=len(report.skipped),
            rules_version=self._classifier.rules_version,
            **{c.value.lower(): n for c, n in report.category_counts().items()},
        )
        return report

    def _process(self, raw: RawMessage, index: int, seen_ids: set[str]) -> ItemResult:
        try:
            parsed = self._parser.parse(raw, index=index)
        except ParseError as exc:
            logger.warning("message_skipped", uid=raw.uid, reason=exc.reason)
            return ItemResult(uid=raw.uid, status=ItemStatus.SKIPPED, reason=exc.reason)

        if parsed.message_id in seen_ids:
            logger.info("message_skipped", uid=raw.uid, reason="duplicate message_id")
            return ItemResult(
                uid=raw.uid,
                status=ItemStatus.SKIPPED,
                reason=f"duplicate message_id {parsed.message_id}",
            )
        seen_ids.add(parsed.message_id)

        body = self._cleaner.clean(parsed.body).clean if self._cleaner else parsed.body
        sender = (
            f"{parsed.sender} <{parsed.sender_address}>"
            if parsed.sender_address
            else parsed.sender
        )
        decision = self._classifier.explain(parsed.subject, body, sender)
        logger.debug(
            "message_classified",
            uid=raw.uid,
            category=decision.category.value,
            keyword=decision.matched_keyword,
        )
        return ItemResult(
            uid=raw.uid,
            status=ItemStatus.CLASSIFIED,
            message=ClassifiedMessage.from_parsed(parsed, decision.category),
        )
