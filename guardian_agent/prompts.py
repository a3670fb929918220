"""
Instruction text sent to the language model.
Pure functions: identical inputs always give an identical prompt.
"""
from __future__ import annotations

import json

from .models import Enrichment
from .query import Query, UrlQuery

_INTEL_MAX_CHARS = 600

_BASE_PROMPT = """You are Internet Guardian, an AI security expert for URL and internet safety analysis.

## ROLE
Analyze URLs for security threats and answer questions about internet security.
Scope: URL safety, phishing, malware, scams, security best practices, cyber threats.

## RESPONSE FORMAT
CRITICAL: Always use these exact formats. Do not deviate and do not add markdown.

### For URLs:
VERDICT: <SAFE|SUSPICIOUS|RISKY>
EXPLANATION: <2-3 sentence explanation a non-expert can follow>
NEXT_STEPS: <two recommended actions on one line, separated by a semicolon>

Verdict rules:
- SAFE: legitimate domain, sensible security headers, no malware or phishing indicators
- SUSPICIOUS: some security concerns, but not clearly malicious
- RISKY: high probability of phishing, malware, or another threat

### For internet security questions:
ANSWER: <clear, helpful answer>
SAFETY_TIP: <one practical tip on one line>

### For anything outside internet security (finance, weather, politics, cooking, ...):
TYPE: OFF_TOPIC
RESPONSE: <one line politely explaining you only handle internet security and URL safety>"""

_GREETING = """

## GREETING
This is the user's first message. Put this line before everything else:
GREETING: Welcome to Internet Guardian! I'm here to help you stay safe online."""


def _yes_no(flag: bool, yes: str = "Yes", no: str = "No") -> str:
    return yes if flag else no


def _url_context(enrichment: Enrichment) -> str:
    lines = [
        "",
        "",
        "## URL ANALYSIS CONTEXT",
        f"Domain: {enrichment.hostname or 'Unknown'}",
        f"HTTPS: {_yes_no(enrichment.https, 'Enabled', 'Not used')}",
        f"Reachable (HEAD probe): {_yes_no(enrichment.tls_verified)}",
        f"HSTS Header: {_yes_no(enrichment.hsts_present, 'Present', 'Not present')}",
        f"Cloudflare Protected: {_yes_no(enrichment.is_cloudflare_like)}",
    ]
    for name, value in sorted(enrichment.security_headers.items()):
        lines.append(f"Header {name}: {value}")
    if enrichment.external_intel:
        intel = json.dumps(enrichment.external_intel, sort_keys=True, default=str)
        lines.append(f"Domain intelligence: {intel[:_INTEL_MAX_CHARS]}")

    lines += [
        "",
        "Guidelines:",
        "1. Always start the response with VERDICT: (SAFE, SUSPICIOUS, or RISKY)",
        "2. Follow with EXPLANATION",
        "3. End with NEXT_STEPS (two actions separated by a semicolon)",
        "4. Be specific about what the signals above show",
    ]
    return "\n".join(lines)


def build_system_prompt(enrichment: Enrichment, is_url_input: bool, is_first_query: bool) -> str:
    prompt = _BASE_PROMPT
    if is_first_query:
        prompt += _GREETING
    if is_url_input:
        prompt += _url_context(enrichment)
    return prompt


def build_user_prompt(query: Query) -> str:
    if isinstance(query, UrlQuery):
        return f"Analyze this URL for security threats: {query.url}"
    return f"Answer this security-related question: {query.text}"
