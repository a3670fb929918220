"""
FastAPI dependencies.
One shared store and pipeline per process; tests swap them via
app.dependency_overrides.
"""
from __future__ import annotations

from functools import lru_cache

from .challenge import ChallengeVerifier
from .config import GuardianConfig
from .enricher import DomainEnricher
from .history import HistoryStore
from .kv_store import InMemoryKeyValueStore, KeyValueStore
from .llm import GeminiModel
from .pipeline import AnalyzePipeline
from .session_gate import SessionGate


@lru_cache()
def get_config() -> GuardianConfig:
    return GuardianConfig.from_env()


@lru_cache()
def get_store() -> KeyValueStore:
    return InMemoryKeyValueStore()


def get_history_store() -> HistoryStore:
    config = get_config()
    return HistoryStore(get_store(), key=config.history_key, cap=config.history_cap)


def build_pipeline(config: GuardianConfig, store: KeyValueStore) -> AnalyzePipeline:
    return AnalyzePipeline(
        config,
        gate=SessionGate(store, ttl_s=config.session_ttl_s, key_prefix=config.session_key_prefix),
        verifier=ChallengeVerifier(verify_url=config.verify_url, timeout_s=config.verify_timeout_s),
        enricher=DomainEnricher(
            probe_timeout_s=config.probe_timeout_s,
            intel_api_key=config.intel_api_key,
            intel_url=config.intel_url,
            intel_timeout_s=config.intel_timeout_s,
        ),
        model=GeminiModel(
            api_key=config.gemini_api_key,
            model=config.model,
            timeout_s=config.inference_timeout_s,
        ),
        history=HistoryStore(store, key=config.history_key, cap=config.history_cap),
    )


@lru_cache()
def get_pipeline() -> AnalyzePipeline:
    return build_pipeline(get_config(), get_store())
