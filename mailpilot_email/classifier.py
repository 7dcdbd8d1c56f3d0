"""Deterministic keyword classifier."""

from __future__ import annotations

from dataclasses import dataclass

from mailpilot_schema import Category

from .rules import KeywordRules, load_rules

DEFAULT_CATEGORY = Category.DRAFT


@dataclass(frozen=True)
class ClassificationResult:
    category: Category
    matched_keyword: str | None = None


class KeywordClassifier:
    """Assign a :class:`Category` from subject, body and sender text.

    Keyword sets are tested in strict priority order (Forward, Draft,
    FYI).  One hit in a higher set wins outright, however many hits a
    lower set has.  Text matching nothing is treated as needing a reply
    and classified as Draft.
    """

    def __init__(self, rules: KeywordRules | None = None) -> None:
        self._rules = rules or load_rules()
        self._priority: tuple[tuple[Category, tuple[str, ...]], ...] = (
            (Category.FORWARD, tuple(self._rules.forward)),
            (Category.DRAFT, tuple(self._rules.draft)),
            (Category.FYI, tuple(self._rules.fyi)),
        )

    @property
    def rules_version(self) -> str:
        return self._rules.version

    def classify(self, subject: str, body: str, sender: str) -> Category:
        return self.explain(subject, body, sender).category

    def explain(self, subject: str, body: str, sender: str) -> ClassificationResult:
        """Like :meth:`classify`, also reporting the keyword that decided it."""
        content = f"{subject} {body} {sender}".lower()
        for category, keywords in self._priority:
            for keyword in keywords:
                if keyword in content:
                    return ClassificationResult(category, keyword)
        return ClassificationResult(DEFAULT_CATEGORY)
