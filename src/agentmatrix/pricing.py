"""Model catalog and pricing table.

The pricing table maps a model identifier to its cost per 1000 tokens.
It is immutable once built and is shared read-only by every concurrent
adapter invocation.
"""

from __future__ import annotations

import numbers
import types
from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from agentmatrix.exceptions import PricingError

DEFAULT_FALLBACK_RATE = 0.002


@dataclass(frozen=True)
class ModelInfo:
    """A selectable target model."""

    id: str
    name: str
    vendor: str
    cost_per_1k: float
    style: str = ""


DEFAULT_MODELS: tuple[ModelInfo, ...] = (
    ModelInfo("gpt-41", "GPT-4.1", "OpenAI", 0.004, "analysis"),
    ModelInfo("claude-37", "Claude 3.7 Sonnet", "Anthropic", 0.0035, "reasoned"),
    ModelInfo("llama-33", "Llama 3.3 70B", "Meta", 0.0015, "open-weight"),
    ModelInfo("gemini-20", "Gemini 2.0 Flash", "Google", 0.002, "speed"),
)


def get_model(model_id: str) -> ModelInfo | None:
    """Look up a default catalog entry, or None if unknown."""
    for model in DEFAULT_MODELS:
        if model.id == model_id:
            return model
    return None


def _check_rate(model_id: str, rate: object) -> float:
    if isinstance(rate, bool) or not isinstance(rate, numbers.Real) or rate < 0:
        raise PricingError(model_id, rate)
    return float(rate)


class PricingTable:
    """Read-only mapping of model identifier -> cost per 1000 tokens.

    Unknown identifiers resolve to ``fallback_rate`` instead of raising,
    so a single unrecognised model never aborts a batch.

    Example::

        table = PricingTable.default()
        table.rate_for("gpt-41")          # 0.004
        table.rate_for("mystery-model")   # 0.002 (fallback)
        table.estimate_cost("gpt-41", 1500)  # 0.006
    """

    def __init__(
        self,
        rates: Mapping[str, float],
        fallback_rate: float = DEFAULT_FALLBACK_RATE,
    ) -> None:
        checked = {model_id: _check_rate(model_id, rate) for model_id, rate in rates.items()}
        self._rates: Mapping[str, float] = types.MappingProxyType(checked)
        self._fallback_rate = _check_rate("<fallback>", fallback_rate)

    @classmethod
    def default(cls) -> PricingTable:
        """Build the table from the default model catalog."""
        return cls({m.id: m.cost_per_1k for m in DEFAULT_MODELS})

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, object],
        fallback_rate: float = DEFAULT_FALLBACK_RATE,
        *,
        base: PricingTable | None = None,
    ) -> PricingTable:
        """Build a table from a config mapping, optionally layered over ``base``.

        Raises:
            PricingError: If any rate is negative or not a number.
        """
        rates: dict[str, object] = dict(base.rates) if base is not None else {}
        rates.update(mapping)
        return cls(rates, fallback_rate=fallback_rate)  # type: ignore[arg-type]

    @property
    def rates(self) -> Mapping[str, float]:
        return self._rates

    @property
    def fallback_rate(self) -> float:
        return self._fallback_rate

    def rate_for(self, model_id: str) -> float:
        """Return the cost per 1000 tokens for ``model_id``."""
        return self._rates.get(model_id, self._fallback_rate)

    def estimate_cost(self, model_id: str, tokens: int) -> float:
        """Cost of ``tokens`` tokens at ``model_id``'s rate, rounded to 6 places."""
        return round(tokens / 1000 * self.rate_for(model_id), 6)

    def model_ids(self) -> list[str]:
        return list(self._rates)

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._rates

    def __iter__(self) -> Iterator[str]:
        return iter(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def __repr__(self) -> str:
        return f"PricingTable(models={len(self._rates)}, fallback_rate={self._fallback_rate})"
