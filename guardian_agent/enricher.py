from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlparse

import httpx

from .config import RADAR_DOMAIN_URL
from .models import Enrichment

logger = logging.getLogger(__name__)

_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 InternetGuardian/2.0"
)

_CSP_MAX_CHARS = 100


def _hostname_of(url: str) -> str:
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


class DomainEnricher:
    """Collects externally observable security signals for a URL.

    enrich() never raises. A failed probe leaves every probe-derived field at
    its false/empty default; a failed intelligence lookup leaves
    external_intel as None.
    """

    def __init__(
        self,
        *,
        probe_timeout_s: float = 8.0,
        intel_api_key: str | None = None,
        intel_url: str = RADAR_DOMAIN_URL,
        intel_timeout_s: float = 5.0,
        user_agent: str = _USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ):
        self._probe_timeout_s = probe_timeout_s
        self._intel_api_key = intel_api_key
        self._intel_url = intel_url
        self._intel_timeout_s = intel_timeout_s
        self._user_agent = user_agent
        self._transport = transport

    def enrich(self, url: str) -> Enrichment:
        hostname = _hostname_of(url)
        enrichment = Enrichment(
            url=url,
            hostname=hostname,
            https=url.lower().startswith("https://"),
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

        res = self._probe(url)
        if res is not None:
            enrichment.tls_verified = res.status_code < 500
            server = (res.headers.get("server") or "").lower()
            enrichment.is_cloudflare_like = "cloudflare" in server or "cf-ray" in res.headers
            enrichment.hsts_present = bool(res.headers.get("strict-transport-security"))

            csp = res.headers.get("content-security-policy")
            if csp:
                enrichment.security_headers["csp"] = csp[:_CSP_MAX_CHARS]
            xframe = res.headers.get("x-frame-options")
            if xframe:
                enrichment.security_headers["x_frame_options"] = xframe

        if self._intel_api_key and hostname:
            enrichment.external_intel = self._lookup_intel(hostname)

        # Not a DNS query: a probe that got any answer implies the name resolved.
        enrichment.dns_resolvable = enrichment.tls_verified
        return enrichment

    def _probe(self, url: str) -> httpx.Response | None:
        try:
            with httpx.Client(
                timeout=self._probe_timeout_s,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                return client.head(url, headers={"user-agent": self._user_agent})
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.warning("HEAD probe failed for %s: %s", url, e)
            return None

    def _lookup_intel(self, hostname: str) -> dict[str, Any] | None:
        try:
            with httpx.Client(timeout=self._intel_timeout_s, transport=self._transport) as client:
                res = client.get(
                    self._intel_url,
                    params={"domain": hostname},
                    headers={
                        "authorization": f"Bearer {self._intel_api_key}",
                        "accept": "application/json",
                    },
                )
            if res.status_code < 200 or res.status_code >= 300:
                logger.warning("Domain intelligence lookup returned HTTP %s", res.status_code)
                return None
            data = res.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.warning("Domain intelligence lookup failed for %s: %s", hostname, e)
            return None

        result = data.get("result") if isinstance(data, dict) else None
        return result if isinstance(result, dict) else None
