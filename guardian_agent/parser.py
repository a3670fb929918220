"""
Turns the model's free-text reply into an AnalysisResult.

Extraction is table-driven: each field is a FieldRule holding an ordered
tuple of patterns (first hit wins) and the default used when none match.
parse() never raises.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from .models import AnalysisResult

OFF_TOPIC_REASON = "This question is outside my expertise. I focus on internet security and URL safety."
OFF_TOPIC_NEXT_STEPS = "Please ask me about URLs, phishing, malware, or other internet security topics."
DEFAULT_REASON = "Unable to determine safety status"
DEFAULT_NEXT_STEPS = "No recommendations available"
DEFAULT_SAFETY_TIP = "Stay vigilant about internet security!"
DEFAULT_ANSWER = "No answer available. Please try rephrasing your question."

_I = re.IGNORECASE
_IS = re.IGNORECASE | re.DOTALL


def _strip(value: str) -> str:
    return value.strip()


def _upper(value: str) -> str:
    return value.strip().upper()


@dataclass(frozen=True)
class FieldRule:
    name: str
    patterns: tuple[re.Pattern[str], ...]
    default: str | None
    normalize: Callable[[str], str] = _strip

    def extract(self, text: str) -> str | None:
        for pattern in self.patterns:
            match = pattern.search(text)
            if match:
                value = self.normalize(match.group(1))
                if value:
                    return value
        return self.default


def _line(tag: str) -> re.Pattern[str]:
    return re.compile(tag + r":\s*(.+?)(?:\n|$)", _I)


def _block(tag: str, until: str) -> re.Pattern[str]:
    return re.compile(tag + r":\s*(.+?)(?:" + until + r":|\Z)", _IS)


OFF_TOPIC_MARKER = re.compile(r"TYPE:\s*OFF_TOPIC", _I)

OFF_TOPIC_REASON_RULE = FieldRule("reason", (_line("RESPONSE"),), OFF_TOPIC_REASON)
GREETING_RULE = FieldRule("greeting", (_line("GREETING"),), None)

VERDICT_RULE = FieldRule(
    "verdict",
    (
        re.compile(r"VERDICT:\s*(SAFE|SUSPICIOUS|RISKY)", _I),
        # Untagged fallback, checked in this priority order.
        re.compile(r"\b(SAFE)\b", _I),
        re.compile(r"\b(RISKY)\b", _I),
        re.compile(r"\b(SUSPICIOUS)\b", _I),
    ),
    "UNKNOWN",
    _upper,
)
EXPLANATION_RULE = FieldRule("reason", (_block("EXPLANATION", "NEXT_STEPS"),), DEFAULT_REASON)
NEXT_STEPS_RULE = FieldRule("next_steps", (_line("NEXT_STEPS"),), DEFAULT_NEXT_STEPS)

ANSWER_RULE = FieldRule("reason", (_block("ANSWER", "SAFETY_TIP"),), None)
SAFETY_TIP_RULE = FieldRule("next_steps", (_line("SAFETY_TIP"),), DEFAULT_SAFETY_TIP)

URL_RULES: tuple[FieldRule, ...] = (VERDICT_RULE, EXPLANATION_RULE, NEXT_STEPS_RULE)
QUESTION_RULES: tuple[FieldRule, ...] = (ANSWER_RULE, SAFETY_TIP_RULE)


class ResponseParser:
    def __init__(
        self,
        url_rules: tuple[FieldRule, ...] = URL_RULES,
        question_rules: tuple[FieldRule, ...] = QUESTION_RULES,
    ):
        self._url_rules = url_rules
        self._question_rules = question_rules

    def parse(self, raw_text: str, is_url_input: bool) -> AnalysisResult:
        text = raw_text or ""
        kind = "URL_ANALYSIS" if is_url_input else "GENERAL_QUERY"

        if OFF_TOPIC_MARKER.search(text):
            return AnalysisResult(
                verdict="OFF_TOPIC",
                reason=OFF_TOPIC_REASON_RULE.extract(text) or OFF_TOPIC_REASON,
                next_steps=OFF_TOPIC_NEXT_STEPS,
                kind=kind,
                is_off_topic=True,
                raw_model_text=text,
            )

        greeting = GREETING_RULE.extract(text)
        # The greeting line is never evidence for a verdict or an answer.
        body = _without_greeting(text)

        if is_url_input:
            fields = self._apply(self._url_rules, body)
            verdict = fields.get("verdict") or "UNKNOWN"
            reason = fields.get("reason") or DEFAULT_REASON
        else:
            fields = self._apply(self._question_rules, body)
            verdict = "QUESTION_ANSWERED"
            reason = fields.get("reason") or body.strip() or DEFAULT_ANSWER

        if greeting:
            reason = f"{greeting}\n\n{reason}"

        return AnalysisResult(
            verdict=verdict,
            reason=reason,
            next_steps=fields.get("next_steps") or DEFAULT_NEXT_STEPS,
            kind=kind,
            is_off_topic=False,
            raw_model_text=text,
        )

    @staticmethod
    def _apply(rules: tuple[FieldRule, ...], text: str) -> dict[str, str | None]:
        return {rule.name: rule.extract(text) for rule in rules}


_GREETING_LINE = re.compile(r"^\s*GREETING:.*(?:\n|$)", _I | re.MULTILINE)


def _without_greeting(text: str) -> str:
    return _GREETING_LINE.sub("", text, count=1)
