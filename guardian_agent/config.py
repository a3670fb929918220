from __future__ import annotations

import os

from pydantic import BaseModel, Field

TURNSTILE_VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"
RADAR_DOMAIN_URL = "https://api.cloudflare.com/client/v4/radar/domain"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else default


def _env_str(name: str) -> str | None:
    raw = os.getenv(name, "").strip()
    return raw or None


class GuardianConfig(BaseModel):
    """Settings handed to the pipeline at construction."""

    history_cap: int = Field(10, ge=1)
    history_key: str = "analysis_history"
    session_ttl_s: int = Field(3600, ge=1)
    session_key_prefix: str = "session:"

    model: str = "gemini-2.5-flash"
    gemini_api_key: str | None = None
    turnstile_secret: str | None = None
    intel_api_key: str | None = None

    verify_url: str = TURNSTILE_VERIFY_URL
    intel_url: str = RADAR_DOMAIN_URL

    verify_timeout_s: float = Field(10.0, gt=0)
    probe_timeout_s: float = Field(8.0, gt=0)
    intel_timeout_s: float = Field(5.0, gt=0)
    inference_timeout_s: float = Field(30.0, gt=0)

    @classmethod
    def from_env(cls) -> GuardianConfig:
        return cls(
            model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            gemini_api_key=_env_str("GEMINI_API_KEY"),
            turnstile_secret=_env_str("TURNSTILE_SECRET"),
            intel_api_key=_env_str("RADAR_API_KEY"),
            verify_timeout_s=_env_float("GUARDIAN_VERIFY_TIMEOUT_S", 10.0),
            probe_timeout_s=_env_float("GUARDIAN_PROBE_TIMEOUT_S", 8.0),
            intel_timeout_s=_env_float("GUARDIAN_INTEL_TIMEOUT_S", 5.0),
            inference_timeout_s=_env_float("GUARDIAN_INFERENCE_TIMEOUT_S", 30.0),
        )
