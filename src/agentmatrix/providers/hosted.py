"""Hosted strategy: call a framework's own run API.

Hosted APIs report token usage and, sometimes, cost directly. Reported
cost takes precedence over the pricing table.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from agentmatrix.frameworks import FrameworkPersona
from agentmatrix.llm.errors import LLMClientError, LLMResponseError
from agentmatrix.llm.hosted import HostedFrameworkClient
from agentmatrix.models.config import AdapterConfig, HostedEndpoint
from agentmatrix.providers.outcome import LiveOutcome, LivePayload
from agentmatrix.providers.simulation import (
    DEFAULT_COVERAGE,
    DEFAULT_QUALITY,
    DEFAULT_SAFETY,
)

logger = logging.getLogger(__name__)


class HostedUsage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    tokens: int = Field(ge=0)
    cost: Optional[float] = Field(default=None, ge=0)


class HostedResult(BaseModel):
    """Schema of a hosted run response, minus the framework-specific output field."""

    model_config = ConfigDict(extra="ignore")

    usage: HostedUsage
    steps: Optional[list[str]] = None
    quality: Optional[float] = Field(default=None, ge=0, le=100)
    coverage: Optional[float] = Field(default=None, ge=0, le=100)
    safety: Optional[float] = Field(default=None, ge=0, le=100)


class HostedStrategy:
    """Live path that submits the task to a hosted framework endpoint."""

    def __init__(
        self,
        endpoint: HostedEndpoint,
        client_factory: Callable[[str], HostedFrameworkClient],
    ) -> None:
        self._endpoint = endpoint
        self._client_factory = client_factory

    @classmethod
    def from_config(
        cls,
        config: AdapterConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> HostedStrategy:
        if config.hosted is None:
            raise ValueError("HostedStrategy requires a hosted endpoint in the adapter config")
        endpoint = config.hosted

        def factory(api_key: str) -> HostedFrameworkClient:
            return HostedFrameworkClient(
                endpoint.url,
                api_key=api_key,
                timeout=config.timeout,
                transport=transport,
            )

        return cls(endpoint, factory)

    def attempt(
        self,
        persona: FrameworkPersona,
        task: str,
        model_id: str,
        credential: str,
    ) -> LiveOutcome:
        """Run the task on the hosted endpoint. Never raises for upstream failures."""
        try:
            with self._client_factory(credential) as client:
                body = client.run(task, model=model_id, input_field=self._endpoint.input_field)
            return LiveOutcome.success(self.parse_body(body, persona))
        except (LLMClientError, ValueError) as exc:
            logger.debug("Hosted run of %s failed: %s", persona.name, exc)
            return LiveOutcome.from_exception(exc)

    def parse_body(self, body: dict[str, Any], persona: FrameworkPersona) -> LivePayload:
        """Normalize a hosted response body.

        Raises:
            LLMResponseError: If the output field holds a non-string value.
            ValidationError: If usage is missing or malformed.
        """
        result = HostedResult.model_validate(body)
        output = body.get(self._endpoint.output_field) or ""
        if not isinstance(output, str):
            raise LLMResponseError(
                f"Field '{self._endpoint.output_field}' is not text: {type(output).__name__}"
            )
        steps = result.steps or ["Parsed task", f"Executed {persona.name}"]
        return LivePayload(
            output=output,
            tokens=result.usage.tokens,
            steps=tuple(steps),
            quality=DEFAULT_QUALITY if result.quality is None else result.quality,
            coverage=DEFAULT_COVERAGE if result.coverage is None else result.coverage,
            safety=DEFAULT_SAFETY if result.safety is None else result.safety,
            reported_cost=result.usage.cost,
        )
