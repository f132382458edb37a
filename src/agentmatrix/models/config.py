"""Configuration models for agentmatrix.

AdapterConfig holds the settings of one provider adapter.
MatrixConfig holds the defaults, per-framework overrides and pricing
overrides for a whole engine. Configuration is an explicit value handed to
each adapter; adapters never read process state themselves.
"""

from __future__ import annotations

import enum
import os
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from agentmatrix.exceptions import ConfigError

ENV_PREFIX = "AGENTMATRIX_"


class AdapterMode(str, enum.Enum):
    """How an adapter reaches its upstream on the live path."""

    SIMULATE = "simulate"
    HOSTED = "hosted"


class HostedEndpoint(BaseModel):
    """Request/response field names of a framework's hosted run API."""

    url: str
    input_field: str = "input"
    output_field: str = "output"


# Field mapping of the public hosted APIs each framework advertises.
HOSTED_ENDPOINTS: dict[str, HostedEndpoint] = {
    "autogen": HostedEndpoint(
        url="https://api.autogen.com/v1/task", input_field="input", output_field="output_text"
    ),
    "crewai": HostedEndpoint(
        url="https://api.crewai.com/v1/run", input_field="prompt", output_field="result"
    ),
    "llamaindex": HostedEndpoint(
        url="https://api.llamaindex.com/v1/query", input_field="query", output_field="answer"
    ),
}


class AdapterConfig(BaseModel):
    """Settings of one provider adapter."""

    api_key: Optional[str] = None
    credential_prefix: str = "sk-"
    base_url: Optional[str] = None
    simulator_model: str = "gpt-4o"
    max_tokens: int = Field(default=1000, gt=0)
    timeout: float = Field(default=30.0, gt=0)
    max_attempts: int = Field(default=2, ge=1)
    retry_backoff: float = Field(default=0.5, ge=0)
    mock_latency: float = Field(default=0.1, ge=0)
    mode: AdapterMode = AdapterMode.SIMULATE
    hosted: Optional[HostedEndpoint] = None


class MatrixConfig(BaseModel):
    """Engine-wide configuration.

    Example::

        config = MatrixConfig(defaults=AdapterConfig(api_key="sk-..."))
        config.adapter_config("crewai").api_key  # "sk-..."
    """

    defaults: AdapterConfig = Field(default_factory=AdapterConfig)
    frameworks: dict[str, dict[str, Any]] = Field(default_factory=dict)
    pricing: dict[str, float] = Field(default_factory=dict)
    fallback_rate: float = Field(default=0.002, ge=0)
    max_workers: Optional[int] = Field(default=None, gt=0)
    log_level: str = "WARNING"

    def adapter_config(self, framework_id: str) -> AdapterConfig:
        """Merge the overrides for ``framework_id`` onto the defaults.

        In hosted mode the credential belongs to the framework's vendor: it
        is taken only from the framework's own overrides, never inherited
        from the defaults, and carries no "sk-" prefix requirement unless
        one is set explicitly. Hosted mode without an explicit endpoint
        picks up the framework's advertised endpoint, if any.

        Raises:
            ConfigError: If the merged settings are invalid.
        """
        override = self.frameworks.get(framework_id, {})
        merged = self.defaults.model_dump()
        merged.update(override)
        try:
            config = AdapterConfig.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(f"Invalid settings for framework '{framework_id}': {exc}") from exc
        if config.mode is not AdapterMode.HOSTED:
            return config

        update: dict[str, Any] = {
            "api_key": override.get("api_key"),
            "credential_prefix": override.get("credential_prefix", ""),
        }
        if config.hosted is None:
            endpoint = HOSTED_ENDPOINTS.get(framework_id)
            if endpoint is None:
                raise ConfigError(
                    f"Framework '{framework_id}' is in hosted mode but has no endpoint"
                )
            update["hosted"] = endpoint
        return config.model_copy(update=update)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        framework_ids: list[str] | tuple[str, ...] = (),
    ) -> MatrixConfig:
        """Build a config from environment variables.

        Variables:
            AGENTMATRIX_OPENAI_API_KEY (falls back to OPENAI_API_KEY)
            AGENTMATRIX_OPENAI_BASE_URL
            AGENTMATRIX_SIMULATOR_MODEL
            AGENTMATRIX_TIMEOUT, AGENTMATRIX_MAX_ATTEMPTS,
            AGENTMATRIX_MOCK_LATENCY, AGENTMATRIX_MAX_WORKERS
            AGENTMATRIX_FALLBACK_RATE, AGENTMATRIX_LOG_LEVEL
            AGENTMATRIX_<FRAMEWORK>_API_KEY / _MODE / _ENDPOINT per framework
                (in hosted mode the framework key is the only credential used)

        Raises:
            ConfigError: If a numeric variable cannot be parsed.
        """
        env = os.environ if environ is None else environ

        defaults: dict[str, Any] = {}
        api_key = env.get(f"{ENV_PREFIX}OPENAI_API_KEY") or env.get("OPENAI_API_KEY")
        if api_key:
            defaults["api_key"] = api_key
        if env.get(f"{ENV_PREFIX}OPENAI_BASE_URL"):
            defaults["base_url"] = env[f"{ENV_PREFIX}OPENAI_BASE_URL"]
        if env.get(f"{ENV_PREFIX}SIMULATOR_MODEL"):
            defaults["simulator_model"] = env[f"{ENV_PREFIX}SIMULATOR_MODEL"]
        for name, key, cast in (
            ("TIMEOUT", "timeout", float),
            ("MAX_ATTEMPTS", "max_attempts", int),
            ("MOCK_LATENCY", "mock_latency", float),
        ):
            raw = env.get(f"{ENV_PREFIX}{name}")
            if raw:
                defaults[key] = _parse(f"{ENV_PREFIX}{name}", raw, cast)

        frameworks: dict[str, dict[str, Any]] = {}
        for framework_id in framework_ids:
            prefix = f"{ENV_PREFIX}{framework_id.upper()}_"
            override: dict[str, Any] = {}
            if env.get(f"{prefix}API_KEY"):
                override["api_key"] = env[f"{prefix}API_KEY"]
            if env.get(f"{prefix}MODE"):
                override["mode"] = env[f"{prefix}MODE"].lower()
            if env.get(f"{prefix}ENDPOINT"):
                endpoint = HOSTED_ENDPOINTS.get(framework_id, HostedEndpoint(url=""))
                override["hosted"] = endpoint.model_copy(
                    update={"url": env[f"{prefix}ENDPOINT"]}
                ).model_dump()
            if override:
                frameworks[framework_id] = override

        settings: dict[str, Any] = {"defaults": defaults, "frameworks": frameworks}
        raw_workers = env.get(f"{ENV_PREFIX}MAX_WORKERS")
        if raw_workers:
            settings["max_workers"] = _parse(f"{ENV_PREFIX}MAX_WORKERS", raw_workers, int)
        raw_rate = env.get(f"{ENV_PREFIX}FALLBACK_RATE")
        if raw_rate:
            settings["fallback_rate"] = _parse(f"{ENV_PREFIX}FALLBACK_RATE", raw_rate, float)
        if env.get(f"{ENV_PREFIX}LOG_LEVEL"):
            settings["log_level"] = env[f"{ENV_PREFIX}LOG_LEVEL"].upper()

        try:
            return cls.model_validate(settings)
        except ValidationError as exc:
            raise ConfigError(f"Invalid environment configuration: {exc}") from exc


def _parse(name: str, raw: str, cast: type) -> Any:
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a {cast.__name__}, got {raw!r}") from None
