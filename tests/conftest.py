import pytest

from guardian_agent.challenge import ChallengeVerifier
from guardian_agent.config import GuardianConfig
from guardian_agent.enricher import DomainEnricher
from guardian_agent.history import HistoryStore
from guardian_agent.kv_store import InMemoryKeyValueStore
from guardian_agent.pipeline import AnalyzePipeline
from guardian_agent.session_gate import SessionGate
from tests.helpers import FakeClock, FakeModel, probe_transport, turnstile_transport


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore(clock=clock)


@pytest.fixture
def config() -> GuardianConfig:
    return GuardianConfig(turnstile_secret="test-secret", gemini_api_key="test-key")


@pytest.fixture
def history(store, config) -> HistoryStore:
    return HistoryStore(store, key=config.history_key, cap=config.history_cap)


@pytest.fixture
def model() -> FakeModel:
    return FakeModel()


@pytest.fixture
def make_pipeline(config, store, clock, history, model):
    """Build an AnalyzePipeline from fakes; keyword args replace single parts."""

    def _make(**overrides) -> AnalyzePipeline:
        parts = {
            "gate": SessionGate(store, ttl_s=config.session_ttl_s, clock=clock),
            "verifier": ChallengeVerifier(transport=turnstile_transport()),
            "enricher": DomainEnricher(transport=probe_transport(headers={"server": "nginx"})),
            "model": model,
            "history": history,
        }
        cfg = overrides.pop("config", config)
        parts.update(overrides)
        return AnalyzePipeline(cfg, **parts)

    return _make
