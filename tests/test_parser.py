"""Unit tests for ResponseParser.

Tests verify:
- Off-topic precedence over every other tag
- Tagged and untagged verdict extraction for URL input
- Answer/safety-tip extraction for questions
- Greeting prefixing and documented defaults
"""

import re

import pytest

from guardian_agent.parser import (
    DEFAULT_ANSWER,
    DEFAULT_NEXT_STEPS,
    DEFAULT_REASON,
    DEFAULT_SAFETY_TIP,
    OFF_TOPIC_NEXT_STEPS,
    OFF_TOPIC_REASON,
    FieldRule,
    ResponseParser,
)


@pytest.fixture
def parser() -> ResponseParser:
    return ResponseParser()


class TestOffTopic:
    """Off-topic replies short-circuit all other parsing."""

    def test_marker_wins_over_verdict_tokens(self, parser):
        raw = "TYPE: OFF_TOPIC\nRESPONSE: I only cover internet security.\nVERDICT: SAFE\nEXPLANATION: fine"
        result = parser.parse(raw, is_url_input=True)

        assert result.verdict == "OFF_TOPIC"
        assert result.is_off_topic is True
        assert result.reason == "I only cover internet security."
        assert result.next_steps == OFF_TOPIC_NEXT_STEPS
        assert result.kind == "URL_ANALYSIS"

    def test_missing_explanation_uses_redirect_message(self, parser):
        result = parser.parse("type: off_topic", is_url_input=False)

        assert result.verdict == "OFF_TOPIC"
        assert result.reason == OFF_TOPIC_REASON
        assert result.kind == "GENERAL_QUERY"


class TestUrlReplies:
    def test_fully_tagged_reply(self, parser):
        raw = (
            "VERDICT: RISKY\n"
            "EXPLANATION: known phishing kit.\n"
            "NEXT_STEPS: Do not enter credentials; report the domain."
        )
        result = parser.parse(raw, is_url_input=True)

        assert result.verdict == "RISKY"
        assert result.reason == "known phishing kit."
        assert result.next_steps == "Do not enter credentials; report the domain."
        assert result.kind == "URL_ANALYSIS"
        assert result.is_off_topic is False
        assert result.raw_model_text == raw

    def test_no_tags_resolves_to_defaults(self, parser):
        result = parser.parse("I could not find much information about this link.", is_url_input=True)

        assert result.verdict == "UNKNOWN"
        assert result.reason == DEFAULT_REASON
        assert result.next_steps == DEFAULT_NEXT_STEPS

    def test_tags_are_case_insensitive(self, parser):
        result = parser.parse("verdict: suspicious\nexplanation: odd redirects.\nnext_steps: wait; verify", True)

        assert result.verdict == "SUSPICIOUS"
        assert result.reason == "odd redirects."
        assert result.next_steps == "wait; verify"

    def test_multi_line_explanation(self, parser):
        raw = "VERDICT: SUSPICIOUS\nEXPLANATION: Line one.\nLine two.\nNEXT_STEPS: a; b"
        result = parser.parse(raw, is_url_input=True)

        assert result.reason == "Line one.\nLine two."
        assert result.next_steps == "a; b"

    def test_explanation_runs_to_end_without_next_steps(self, parser):
        result = parser.parse("VERDICT: SAFE\nEXPLANATION: All good.\nNothing else.", is_url_input=True)

        assert result.reason == "All good.\nNothing else."
        assert result.next_steps == DEFAULT_NEXT_STEPS

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("It could be risky, though it may be safe.", "SAFE"),
            ("Somewhat suspicious and arguably risky.", "RISKY"),
            ("Mildly suspicious hosting.", "SUSPICIOUS"),
            ("This site is unsafe.", "UNKNOWN"),
        ],
    )
    def test_untagged_verdict_scan_priority(self, parser, raw, expected):
        assert parser.parse(raw, is_url_input=True).verdict == expected

    def test_strict_tag_beats_untagged_words(self, parser):
        result = parser.parse("Not safe at all.\nVERDICT: RISKY", is_url_input=True)

        assert result.verdict == "RISKY"

    def test_greeting_is_prefixed(self, parser):
        raw = "GREETING: Welcome aboard!\nVERDICT: SAFE\nEXPLANATION: ok.\nNEXT_STEPS: a; b"
        result = parser.parse(raw, is_url_input=True)

        assert result.reason == "Welcome aboard!\n\nok."

    def test_greeting_words_do_not_drive_untagged_verdict(self, parser):
        raw = (
            "GREETING: Welcome to Internet Guardian! I'm here to help you stay safe online.\n"
            "This domain is risky: it hosts a known phishing kit."
        )
        result = parser.parse(raw, is_url_input=True)

        assert result.verdict == "RISKY"
        assert result.reason.startswith("Welcome to Internet Guardian!")

    def test_greeting_alone_gives_unknown_verdict(self, parser):
        result = parser.parse("GREETING: Stay safe online.", is_url_input=True)

        assert result.verdict == "UNKNOWN"

    def test_empty_reply(self, parser):
        result = parser.parse("", is_url_input=True)

        assert result.verdict == "UNKNOWN"
        assert result.reason == DEFAULT_REASON


class TestQuestionReplies:
    def test_answer_and_tip(self, parser):
        raw = "ANSWER: Use a password manager.\nSAFETY_TIP: Enable MFA everywhere."
        result = parser.parse(raw, is_url_input=False)

        assert result.verdict == "QUESTION_ANSWERED"
        assert result.kind == "GENERAL_QUERY"
        assert result.reason == "Use a password manager."
        assert result.next_steps == "Enable MFA everywhere."

    def test_untagged_reply_becomes_answer(self, parser):
        raw = "Phishing is a social engineering attack.\nIt often arrives by email."
        result = parser.parse(raw, is_url_input=False)

        assert result.reason == raw
        assert result.next_steps == DEFAULT_SAFETY_TIP

    def test_verdict_words_are_ignored_for_questions(self, parser):
        result = parser.parse("ANSWER: Public Wi-Fi is risky.", is_url_input=False)

        assert result.verdict == "QUESTION_ANSWERED"

    def test_greeting_not_duplicated_in_untagged_answer(self, parser):
        raw = "GREETING: Hi there\nPhishing tricks you into giving up secrets."
        result = parser.parse(raw, is_url_input=False)

        assert result.reason == "Hi there\n\nPhishing tricks you into giving up secrets."

    def test_empty_answer_uses_answer_default(self, parser):
        result = parser.parse("", is_url_input=False)

        assert result.reason == DEFAULT_ANSWER
        assert result.next_steps == DEFAULT_SAFETY_TIP


class TestFieldRule:
    def test_first_matching_pattern_wins(self):
        rule = FieldRule("x", (re.compile(r"A:(\w+)"), re.compile(r"B:(\w+)")), "none")

        assert rule.extract("B:two A:one") == "one"
        assert rule.extract("B:two") == "two"
        assert rule.extract("nothing") == "none"

    def test_blank_capture_falls_back_to_default(self):
        rule = FieldRule("x", (re.compile(r"A:(\s*)"),), "none")

        assert rule.extract("A:   ") == "none"
