from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Verdict = Literal["SAFE", "SUSPICIOUS", "RISKY", "UNKNOWN", "OFF_TOPIC", "QUESTION_ANSWERED"]
Kind = Literal["URL_ANALYSIS", "GENERAL_QUERY"]


class CamelModel(BaseModel):
    # Wire format is camelCase; snake_case names are accepted on input too.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalyzeRequest(CamelModel):
    url: str = Field(..., min_length=1)
    verification_token: str | None = None
    session_id: str | None = None

    @field_validator("url")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("url must not be blank")
        return value


class Enrichment(CamelModel):
    url: str
    hostname: str = ""
    https: bool = False
    tls_verified: bool = False
    hsts_present: bool = False
    security_headers: dict[str, str] = Field(default_factory=dict)
    is_cloudflare_like: bool = False
    # Mirrors tls_verified: a reachable probe stands in for DNS resolution.
    dns_resolvable: bool = False
    external_intel: dict[str, Any] | None = None
    timestamp: str


class EnrichmentSummary(CamelModel):
    hostname: str = ""
    https: bool = False
    hsts_present: bool = False
    is_cloudflare_like: bool = False

    @classmethod
    def of(cls, enrichment: Enrichment) -> EnrichmentSummary:
        return cls(
            hostname=enrichment.hostname,
            https=enrichment.https,
            hsts_present=enrichment.hsts_present,
            is_cloudflare_like=enrichment.is_cloudflare_like,
        )


class AnalysisResult(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    verdict: Verdict
    reason: str
    next_steps: str
    kind: Kind
    is_off_topic: bool = False
    raw_model_text: str = ""


class HistoryEntry(CamelModel):
    url: str
    verdict: Verdict
    reason: str
    next_steps: str
    timestamp: str
    verified: bool
    enrichment_summary: EnrichmentSummary


class ResponseSummary(CamelModel):
    """Enrichment facts echoed back to the caller (URL input only)."""

    https: bool
    hsts_present: bool
    is_cloudflare_like: bool


class AnalyzeResponse(CamelModel):
    kind: Kind
    verdict: Verdict
    reason: str
    next_steps: str
    is_off_topic: bool
    enrichment_summary: ResponseSummary | None = None
    timestamp: str


class HistoryResponse(CamelModel):
    history: list[HistoryEntry]


class ChallengeResult(CamelModel):
    success: bool
    error_codes: list[str] = Field(default_factory=list)
