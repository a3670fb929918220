"""
Per-request orchestration:
gate -> (verify) -> enrich -> prompt -> infer -> parse -> persist -> respond.

Only the gate can reject a request. Enrichment, parsing and persistence
degrade to defaults. A failed model call raises InferenceError, which the
HTTP layer turns into an error response.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import status

from .challenge import ChallengeVerifier
from .config import GuardianConfig
from .enricher import DomainEnricher
from .errors import RequestRejected
from .history import HistoryStore
from .llm import LanguageModel
from .models import (
    AnalysisResult,
    AnalyzeRequest,
    AnalyzeResponse,
    Enrichment,
    EnrichmentSummary,
    HistoryEntry,
    ResponseSummary,
)
from .parser import ResponseParser
from .prompts import build_system_prompt, build_user_prompt
from .query import UrlQuery, classify_input, placeholder_enrichment
from .session_gate import SessionGate

logger = logging.getLogger(__name__)


class AnalyzePipeline:
    def __init__(
        self,
        config: GuardianConfig,
        *,
        gate: SessionGate,
        verifier: ChallengeVerifier,
        enricher: DomainEnricher,
        model: LanguageModel,
        history: HistoryStore,
        parser: ResponseParser | None = None,
    ):
        self.config = config
        self._gate = gate
        self._verifier = verifier
        self._enricher = enricher
        self._model = model
        self._history = history
        self._parser = parser or ResponseParser()

    def check_gate(self, req: AnalyzeRequest) -> bool:
        """Pass or reject the caller. Returns True only for a session's first verified query."""
        if not self._gate.requires_challenge(req.session_id):
            return False

        if not req.verification_token:
            raise RequestRejected(status.HTTP_400_BAD_REQUEST, "Verification token is required for first query")

        secret = self.config.turnstile_secret
        if not secret:
            logger.error("TURNSTILE_SECRET not configured")
            raise RequestRejected(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server misconfiguration")

        result = self._verifier.verify(req.verification_token, secret)
        if not result.success:
            logger.warning("Challenge verification failed: %s", result.error_codes)
            raise RequestRejected(status.HTTP_403_FORBIDDEN, "Verification failed", result.error_codes)

        if not req.session_id:
            # No session to greet: each sessionless request stands alone.
            return False
        self._gate.mark_verified(req.session_id)
        return True

    def run(self, req: AnalyzeRequest) -> AnalyzeResponse:
        is_first_query = self.check_gate(req)

        query = classify_input(req.url)
        if isinstance(query, UrlQuery):
            enrichment = self._enricher.enrich(query.url)
        else:
            enrichment = placeholder_enrichment(query)

        system_prompt = build_system_prompt(enrichment, query.is_url, is_first_query)
        raw_text = self._model.generate(system_prompt, build_user_prompt(query))
        result = self._parser.parse(raw_text, query.is_url)

        timestamp = datetime.now(timezone.utc).isoformat()
        self._persist(req.url, result, enrichment, timestamp)

        summary = None
        if query.is_url:
            summary = ResponseSummary(
                https=enrichment.https,
                hsts_present=enrichment.hsts_present,
                is_cloudflare_like=enrichment.is_cloudflare_like,
            )
        return AnalyzeResponse(
            kind=result.kind,
            verdict=result.verdict,
            reason=result.reason,
            next_steps=result.next_steps,
            is_off_topic=result.is_off_topic,
            enrichment_summary=summary,
            timestamp=timestamp,
        )

    def _persist(self, url: str, result: AnalysisResult, enrichment: Enrichment, timestamp: str) -> None:
        entry = HistoryEntry(
            url=url,
            verdict=result.verdict,
            reason=result.reason,
            next_steps=result.next_steps,
            timestamp=timestamp,
            # Reaching this point means the session was verified or just passed the challenge.
            verified=True,
            enrichment_summary=EnrichmentSummary.of(enrichment),
        )
        try:
            self._history.append(entry)
        except Exception:
            logger.warning("History append failed; continuing without it", exc_info=True)
