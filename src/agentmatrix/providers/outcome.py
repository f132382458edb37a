"""Live-path outcomes and the fallback policy table.

A live attempt never raises: it returns a LiveOutcome carrying either a
payload or a tagged failure. What happens next is looked up in
FALLBACK_POLICY instead of being decided by nested exception handlers.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from pydantic import ValidationError

from agentmatrix.llm.errors import (
    LLMAuthError,
    LLMConnectionError,
    LLMRateLimitError,
    LLMResponseError,
    LLMStatusError,
    LLMTimeoutError,
)


class FailureKind(str, enum.Enum):
    """Why a live attempt failed."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    MALFORMED = "malformed"
    TIMEOUT = "timeout"
    NETWORK = "network"
    UNAVAILABLE = "unavailable"
    UPSTREAM = "upstream"


class FallbackAction(str, enum.Enum):
    """What the adapter does with a failed live attempt."""

    RETRY = "retry"
    MOCK = "mock"
    SURFACE = "surface"


FALLBACK_POLICY: dict[FailureKind, FallbackAction] = {
    FailureKind.AUTH: FallbackAction.MOCK,
    FailureKind.RATE_LIMIT: FallbackAction.MOCK,
    FailureKind.MALFORMED: FallbackAction.MOCK,
    FailureKind.TIMEOUT: FallbackAction.MOCK,
    FailureKind.NETWORK: FallbackAction.RETRY,
    FailureKind.UNAVAILABLE: FallbackAction.RETRY,
    FailureKind.UPSTREAM: FallbackAction.SURFACE,
}

# Resolution of RETRY kinds once the attempt budget is spent.
EXHAUSTED_POLICY: dict[FailureKind, FallbackAction] = {
    FailureKind.NETWORK: FallbackAction.MOCK,
    FailureKind.UNAVAILABLE: FallbackAction.SURFACE,
}

_RETRYABLE_STATUS_CODES = {502, 503, 504}


@dataclass(frozen=True)
class LivePayload:
    """Normalized success payload of a live attempt.

    ``reported_cost`` is set only when the upstream reports cost directly;
    otherwise the adapter prices ``tokens`` with the target model's rate.
    """

    output: str
    tokens: int
    steps: tuple[str, ...] = field(default_factory=tuple)
    quality: float = 85
    coverage: float = 90
    safety: float = 95
    reported_cost: float | None = None


@dataclass(frozen=True)
class LiveOutcome:
    """Either a LivePayload or a tagged failure, never both."""

    payload: LivePayload | None = None
    failure: FailureKind | None = None
    message: str = ""

    @classmethod
    def success(cls, payload: LivePayload) -> LiveOutcome:
        return cls(payload=payload)

    @classmethod
    def failed(cls, kind: FailureKind, message: str) -> LiveOutcome:
        return cls(failure=kind, message=message)

    @classmethod
    def from_exception(cls, exc: BaseException) -> LiveOutcome:
        return cls(failure=classify(exc), message=str(exc) or type(exc).__name__)

    @property
    def ok(self) -> bool:
        return self.payload is not None

    @property
    def action(self) -> FallbackAction | None:
        """Policy action for this outcome before exhaustion, None on success."""
        if self.failure is None:
            return None
        return FALLBACK_POLICY[self.failure]


def classify(exc: BaseException) -> FailureKind:
    """Map an exception raised on the live path to a FailureKind."""
    if isinstance(exc, LLMAuthError):
        return FailureKind.AUTH
    if isinstance(exc, LLMRateLimitError):
        return FailureKind.RATE_LIMIT
    if isinstance(exc, LLMTimeoutError):
        return FailureKind.TIMEOUT
    if isinstance(exc, LLMConnectionError):
        return FailureKind.NETWORK
    if isinstance(exc, LLMStatusError):
        if exc.status_code in _RETRYABLE_STATUS_CODES:
            return FailureKind.UNAVAILABLE
        return FailureKind.UPSTREAM
    # ValidationError subclasses ValueError, as does json.JSONDecodeError.
    if isinstance(exc, (LLMResponseError, ValidationError, ValueError)):
        return FailureKind.MALFORMED
    return FailureKind.UPSTREAM


def should_retry(outcome: LiveOutcome) -> bool:
    return outcome.action is FallbackAction.RETRY


def resolve_action(outcome: LiveOutcome) -> FallbackAction:
    """Final action for a failed outcome whose retries (if any) are spent.

    Raises:
        ValueError: If called with a successful outcome.
    """
    if outcome.failure is None:
        raise ValueError("resolve_action() requires a failed outcome")
    action = FALLBACK_POLICY[outcome.failure]
    if action is FallbackAction.RETRY:
        action = EXHAUSTED_POLICY[outcome.failure]
    return action
