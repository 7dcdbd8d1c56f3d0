"""Tests for mailpilot_email.classifier and mailpilot_email.rules."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from mailpilot_email.classifier import KeywordClassifier
from mailpilot_email.rules import KeywordRules, load_rules
from mailpilot_schema import Category


@pytest.fixture
def classifier() -> KeywordClassifier:
    return KeywordClassifier()


class TestKeywordRules:
    def test_packaged_rules_load(self):
        rules = load_rules()
        assert rules.version == "1"
        assert "please forward" in rules.forward
        assert "urgent" in rules.draft
        assert "newsletter" in rules.fyi

    def test_keywords_lowercased(self):
        rules = KeywordRules(version="t", forward=["Delegate"], draft=["ASAP"], fyi=["Digest", "  "])
        assert rules.forward == ["delegate"]
        assert rules.draft == ["asap"]
        assert rules.fyi == ["digest"]

    @pytest.mark.parametrize("empty_set", ["forward", "draft", "fyi"])
    def test_empty_set_rejected(self, empty_set: str):
        data = {"version": "t", "forward": ["a"], "draft": ["b"], "fyi": ["c"], empty_set: []}
        with pytest.raises(ValidationError):
            KeywordRules(**data)

    def test_load_from_file(self, tmp_path: Path):
        path = tmp_path / "rules.json"
        path.write_text(
            json.dumps({"version": "2025-06", "forward": ["delegate"], "draft": ["sign"], "fyi": ["memo"]}),
        )
        rules = load_rules(path)
        assert rules.version == "2025-06"
        assert rules.forward == ["delegate"]

    def test_load_invalid_file(self, tmp_path: Path):
        path = tmp_path / "rules.json"
        path.write_text('{"version": "x"}')
        with pytest.raises(ValidationError):
            load_rules(path)


class TestKeywordClassifier:
    def test_forward_beats_draft(self, classifier: KeywordClassifier):
        category = classifier.classify(
            "Please forward this",
            "It is urgent, deadline is today, need approval asap",
            "boss@example.com",
        )
        assert category is Category.FORWARD

    def test_draft_beats_fyi(self, classifier: KeywordClassifier):
        category = classifier.classify("Weekly newsletter", "Could you confirm?", "news@example.com")
        assert category is Category.DRAFT

    def test_fyi(self, classifier: KeywordClassifier):
        category = classifier.classify("Your receipt", "Thanks for shopping", "shop@example.com")
        assert category is Category.FYI

    def test_no_match_defaults_to_draft(self, classifier: KeywordClassifier):
        result = classifier.explain("Hello", "Hi there", "bob@example.com")
        assert result.category is Category.DRAFT
        assert result.matched_keyword is None

    def test_case_insensitive(self, classifier: KeywordClassifier):
        assert classifier.classify("URGENT", "", "bob@example.com") is Category.DRAFT

    def test_sender_is_matched(self, classifier: KeywordClassifier):
        assert classifier.classify("Hi", "Hi", "noreply@example.com") is Category.FYI

    def test_explain_reports_keyword(self, classifier: KeywordClassifier):
        result = classifier.explain("Fwd: lunch", "", "bob@example.com")
        assert result.category is Category.FORWARD
        assert result.matched_keyword == "fwd:"

    def test_deterministic(self, classifier: KeywordClassifier):
        args = ("Budget review", "Can you look at this?", "cfo@example.com")
        assert classifier.explain(*args) == classifier.explain(*args)

    def test_custom_rules(self):
        rules = KeywordRules(version="custom", forward=["delegate"], draft=["sign"], fyi=["memo"])
        classifier = KeywordClassifier(rules)
        assert classifier.rules_version == "custom"
        assert classifier.classify("Memo", "please sign", "x@example.com") is Category.DRAFT
        assert classifier.classify("Memo", "", "x@example.com") is Category.FYI
        assert classifier.classify("urgent", "", "x@example.com") is Category.DRAFT
