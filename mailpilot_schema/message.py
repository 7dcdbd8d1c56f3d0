"""Message schema: the records the ingestion pipeline hands to persistence."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Category(str, Enum):
    """Actionable category assigned to every ingested message.

    There is no "uncategorized" member: the classifier always resolves
    to one of these.
    """

    FYI = "FYI"
    DRAFT = "Draft"
    FORWARD = "Forward"


class ParsedMessage(BaseModel):
    """Structured fields extracted from a raw message, before classification."""

    message_id: str = Field(description="Stable dedup key (Message-ID header or generated)")
    subject: str = Field(description="Subject line")
    sender: str = Field(description="Sender display name")
    sender_address: str = Field(description="Sender email address, empty if unknown")
    date: datetime = Field(description="When the message was sent (UTC)")
    body: str = Field(description="Plain-text body, rendered from HTML when needed")


class ClassifiedMessage(ParsedMessage):
    """A parsed message annotated with its category.

    Created once by the ingestion pipeline; this core never mutates it.
    """

    category: Category = Field(description="FYI, Draft or Forward")

    @classmethod
    def from_parsed(cls, parsed: ParsedMessage, category: Category) -> ClassifiedMessage:
        return cls(**parsed.model_dump(), category=category)
