"""Provider adapter: one per framework.

``ProviderAdapter.execute()`` never raises. Every path resolves into a
ResultRecord:

- absent credential   -> mock path, no network attempt
- live success        -> live record priced at the target model's rate
- live failure        -> FALLBACK_POLICY decides: retry, mock, or surface
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from typing import Protocol

import httpx
import tenacity

from agentmatrix.frameworks import FrameworkPersona, FrameworkRegistry
from agentmatrix.models.config import AdapterConfig, AdapterMode, MatrixConfig
from agentmatrix.models.records import RecordSource, ResultRecord
from agentmatrix.pricing import PricingTable
from agentmatrix.providers.credentials import sanitize_credential
from agentmatrix.providers.hosted import HostedStrategy
from agentmatrix.providers.mock import mock_record
from agentmatrix.providers.outcome import (
    FallbackAction,
    LiveOutcome,
    LivePayload,
    resolve_action,
    should_retry,
)
from agentmatrix.providers.simulation import SimulationStrategy

logger = logging.getLogger(__name__)

_MAX_BACKOFF_SECONDS = 10


class LiveStrategy(Protocol):
    """A live path: one attempt at producing a payload for a combination."""

    def attempt(
        self,
        persona: FrameworkPersona,
        task: str,
        model_id: str,
        credential: str,
    ) -> LiveOutcome: ...


class ProviderAdapter:
    """Translate a task into a normalized ResultRecord for one framework.

    Usage::

        adapter = ProviderAdapter(persona, AdapterConfig(api_key="sk-..."), PricingTable.default())
        record = adapter.execute("Summarize AI agents", "gpt-41")
    """

    def __init__(
        self,
        persona: FrameworkPersona,
        config: AdapterConfig,
        pricing: PricingTable,
        *,
        strategy: LiveStrategy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the adapter.

        Args:
            persona: Framework this adapter stands for.
            config: Credential, retry and mock settings.
            pricing: Shared read-only pricing table.
            strategy: Live path. Defaults to the one selected by ``config.mode``.
            sleep: Sleep function for mock latency and retry backoff.
        """
        self._persona = persona
        self._config = config
        self._pricing = pricing
        self._strategy = strategy or _default_strategy(config)
        self._sleep = sleep

    @property
    def persona(self) -> FrameworkPersona:
        return self._persona

    @property
    def framework_id(self) -> str:
        return self._persona.id

    def execute(self, task: str, model_id: str) -> ResultRecord:
        """Produce the ResultRecord for ``(this framework, model_id)``."""
        try:
            return self._execute(task, model_id)
        except Exception as exc:  # adapter boundary: never propagate
            logger.exception("Unexpected failure in %s adapter", self._persona.name)
            return self._unavailable(str(exc) or type(exc).__name__)

    def _execute(self, task: str, model_id: str) -> ResultRecord:
        credential = sanitize_credential(
            self._config.api_key, prefix=self._config.credential_prefix
        )
        if credential is None:
            logger.info(
                "Using mock for %s (key: %s)",
                self._persona.name,
                "present but invalid" if self._config.api_key else "missing",
            )
            return self._mock(task, "no valid API key was configured")

        outcome = self._attempt_live(task, model_id, credential)
        if outcome.payload is not None:
            return self._live_record(outcome.payload, model_id)

        action = resolve_action(outcome)
        if action is FallbackAction.MOCK:
            logger.warning(
                "%s live call failed (%s). Falling back to mock. Error: %s",
                self._persona.name,
                outcome.failure.value,
                outcome.message,
            )
            return self._mock(task, f"the live call failed ({outcome.failure.value})")

        logger.error(
            "%s live call failed (%s): %s",
            self._persona.name,
            outcome.failure.value,
            outcome.message,
        )
        return self._unavailable(outcome.message)

    def _attempt_live(self, task: str, model_id: str, credential: str) -> LiveOutcome:
        retryer = tenacity.Retrying(
            retry=tenacity.retry_if_result(should_retry),
            wait=tenacity.wait_exponential(
                multiplier=self._config.retry_backoff, max=_MAX_BACKOFF_SECONDS
            ),
            stop=tenacity.stop_after_attempt(self._config.max_attempts),
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
            retry_error_callback=lambda state: state.outcome.result(),
            sleep=self._sleep,
        )
        return retryer(self._strategy.attempt, self._persona, task, model_id, credential)

    def _live_record(self, payload: LivePayload, model_id: str) -> ResultRecord:
        if payload.reported_cost is not None:
            cost = payload.reported_cost
        else:
            cost = self._pricing.estimate_cost(model_id, payload.tokens)
        return ResultRecord(
            output=payload.output,
            tokens=payload.tokens,
            cost=cost,
            steps=payload.steps,
            quality=payload.quality,
            coverage=payload.coverage,
            safety=payload.safety,
            source=RecordSource.LIVE,
        )

    def _mock(self, task: str, reason: str) -> ResultRecord:
        if self._config.mock_latency:
            self._sleep(self._config.mock_latency)
        return mock_record(self._persona, task, reason)

    def _unavailable(self, detail: str) -> ResultRecord:
        return ResultRecord.unavailable(
            f"{self._persona.name} unavailable: {detail}",
            output=f"{self._persona.name} unavailable",
        )


def _default_strategy(
    config: AdapterConfig,
    transport: httpx.BaseTransport | None = None,
) -> LiveStrategy:
    if config.mode is AdapterMode.HOSTED:
        return HostedStrategy.from_config(config, transport=transport)
    return SimulationStrategy.from_config(config, transport=transport)


def build_adapters(
    config: MatrixConfig,
    registry: FrameworkRegistry,
    pricing: PricingTable,
    *,
    transport: httpx.BaseTransport | None = None,
) -> Mapping[str, ProviderAdapter]:
    """Create one adapter per registered framework, in registry order."""
    adapters: dict[str, ProviderAdapter] = {}
    for persona in registry:
        adapter_config = config.adapter_config(persona.id)
        adapters[persona.id] = ProviderAdapter(
            persona,
            adapter_config,
            pricing,
            strategy=_default_strategy(adapter_config, transport=transport),
        )
    return adapters
