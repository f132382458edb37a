"""Provider adapters and their live-path strategies."""

from agentmatrix.providers.adapter import LiveStrategy, ProviderAdapter, build_adapters
from agentmatrix.providers.credentials import sanitize_credential
from agentmatrix.providers.hosted import HostedStrategy
from agentmatrix.providers.mock import mock_record
from agentmatrix.providers.outcome import (
    EXHAUSTED_POLICY,
    FALLBACK_POLICY,
    FailureKind,
    FallbackAction,
    LiveOutcome,
    LivePayload,
    classify,
    resolve_action,
)
from agentmatrix.providers.simulation import SimulatedResult, SimulationStrategy

__all__ = [
    "ProviderAdapter",
    "LiveStrategy",
    "build_adapters",
    "sanitize_credential",
    "SimulationStrategy",
    "SimulatedResult",
    "HostedStrategy",
    "mock_record",
    "FailureKind",
    "FallbackAction",
    "FALLBACK_POLICY",
    "EXHAUSTED_POLICY",
    "LiveOutcome",
    "LivePayload",
    "classify",
    "resolve_action",
]
