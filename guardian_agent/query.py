from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from urllib.parse import urlparse

from .models import Enrichment


@dataclass(frozen=True)
class UrlQuery:
    url: str
    hostname: str

    is_url = True


@dataclass(frozen=True)
class TextQuery:
    text: str

    is_url = False


Query = UrlQuery | TextQuery


def classify_input(raw: str) -> Query:
    """Decide once whether the caller sent a URL or a free-text question."""
    value = raw.strip()
    if any(ch.isspace() for ch in value):
        return TextQuery(value)
    try:
        parsed = urlparse(value)
        hostname = parsed.hostname or ""
    except ValueError:
        return TextQuery(value)
    if parsed.scheme.lower() in ("http", "https") and hostname:
        return UrlQuery(url=value, hostname=hostname)
    return TextQuery(value)


def placeholder_enrichment(query: TextQuery) -> Enrichment:
    return Enrichment(url=query.text, hostname="", timestamp=datetime.now(timezone.utc).isoformat())
