"""Keyword rule table for the classifier.

The three keyword sets are data, not code: the packaged table lives in
``data/keyword_rules.json`` and a replacement can be supplied as a file
with the same shape.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path

import structlog
from pydantic import BaseModel, Field, field_validator

logger = structlog.get_logger()

PACKAGED_RULES = "data/keyword_rules.json"


class KeywordRules(BaseModel):
    """Versioned keyword sets, one per category, matched as substrings."""

    version: str = Field(description="Identifier of this rule table revision")
    forward: list[str] = Field(description="Delegation and broadcast cues")
    draft: list[str] = Field(description="Action and urgency cues")
    fyi: list[str] = Field(description="Informational and automated-mail cues")

    @field_validator("forward", "draft", "fyi")
    @classmethod
    def _normalize_keywords(cls, keywords: list[str]) -> list[str]:
        normalized = [k.lower() for k in keywords if k.strip()]
        if not normalized:
            raise ValueError("keyword set must not be empty")
        return normalized


def load_rules(path: Path | None = None) -> KeywordRules:
    """Load a rule table from *path*, or the packaged table when omitted."""
    if path is None:
        text = resources.files("mailpilot_email").joinpath(PACKAGED_RULES).read_text("utf-8")
        source = PACKAGED_RULES
    else:
        text = path.read_text("utf-8")
        source = str(path)

    rules = KeywordRules.model_validate_json(text)
    logger.debug("keyword_rules_loaded", source=source, version=rules.version)
    return rules
