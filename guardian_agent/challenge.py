"""
Human-verification (Cloudflare Turnstile) token check.
Failures never raise: every outcome resolves to a ChallengeResult.
"""
from __future__ import annotations

import logging

import httpx

from .config import TURNSTILE_VERIFY_URL
from .models import ChallengeResult

logger = logging.getLogger(__name__)

MISSING_TOKEN = "missing-input-response"
MISSING_SECRET = "missing-input-secret"
TRANSPORT_ERROR = "verification-unreachable"
BAD_RESPONSE = "verification-bad-response"


class ChallengeVerifier:
    def __init__(
        self,
        *,
        verify_url: str = TURNSTILE_VERIFY_URL,
        timeout_s: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._verify_url = verify_url
        self._timeout_s = timeout_s
        self._transport = transport

    def verify(self, token: str | None, secret: str | None) -> ChallengeResult:
        if not token:
            return ChallengeResult(success=False, error_codes=[MISSING_TOKEN])
        if not secret:
            return ChallengeResult(success=False, error_codes=[MISSING_SECRET])

        try:
            with httpx.Client(timeout=self._timeout_s, transport=self._transport) as client:
                res = client.post(self._verify_url, json={"secret": secret, "response": token})
        except httpx.HTTPError as e:
            logger.warning("Challenge verification unreachable: %s", e)
            return ChallengeResult(success=False, error_codes=[TRANSPORT_ERROR])

        if res.status_code < 200 or res.status_code >= 300:
            logger.warning("Challenge verification returned HTTP %s", res.status_code)
            return ChallengeResult(success=False, error_codes=[f"verification-http-{res.status_code}"])

        try:
            data = res.json()
        except ValueError:
            return ChallengeResult(success=False, error_codes=[BAD_RESPONSE])
        if not isinstance(data, dict):
            return ChallengeResult(success=False, error_codes=[BAD_RESPONSE])

        codes = data.get("error-codes") or data.get("error_codes") or []
        if not isinstance(codes, list):
            codes = [str(codes)]
        return ChallengeResult(success=data.get("success") is True, error_codes=[str(c) for c in codes])
