"""Result and batch models.

Provides Combination, ResultRecord, CombinationRun, BatchRequest,
BatchResult and Highlights. Records are created fresh per batch and never
mutated afterwards.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, field_validator


class RecordSource(str, enum.Enum):
    """Which code path produced a ResultRecord."""

    LIVE = "live"
    MOCK = "mock"
    ERROR = "error"


@dataclass(frozen=True)
class Combination:
    """One (framework, model) pair evaluated within a batch."""

    framework_id: str
    model_id: str

    @property
    def key(self) -> str:
        return f"{self.framework_id}-{self.model_id}"


def _check_score(name: str, value: float) -> None:
    if not 0 <= value <= 100:
        raise ValueError(f"{name} must be within [0, 100], got {value}")


@dataclass(frozen=True)
class ResultRecord:
    """Normalized output of one combination.

    Frozen: records are immutable once an adapter returns them.

    Attributes:
        output: Text shown to the user.
        tokens: Token usage (non-negative).
        cost: Currency amount (non-negative).
        steps: Short descriptions of the internal process, in order.
        quality: Reported quality score in [0, 100].
        coverage: Reported coverage score in [0, 100].
        safety: Reported safety score in [0, 100].
        error: Failure message when the combination failed, else None.
        source: Which path produced the record.
    """

    output: str
    tokens: int = 0
    cost: float = 0.0
    steps: tuple[str, ...] = field(default_factory=tuple)
    quality: float = 0
    coverage: float = 0
    safety: float = 0
    error: str | None = None
    source: RecordSource = RecordSource.LIVE

    def __post_init__(self) -> None:
        if not isinstance(self.steps, tuple):
            object.__setattr__(self, "steps", tuple(self.steps))
        if self.tokens < 0:
            raise ValueError(f"tokens must be non-negative, got {self.tokens}")
        if self.cost < 0:
            raise ValueError(f"cost must be non-negative, got {self.cost}")
        _check_score("quality", self.quality)
        _check_score("coverage", self.coverage)
        _check_score("safety", self.safety)

    @property
    def failed(self) -> bool:
        return self.error is not None

    @classmethod
    def unavailable(cls, message: str, *, output: str = "Error") -> ResultRecord:
        """Zero-metric record for a combination that could not produce a result."""
        return cls(
            output=output,
            tokens=0,
            cost=0.0,
            steps=(),
            quality=0,
            coverage=0,
            safety=0,
            error=message or "Failed",
            source=RecordSource.ERROR,
        )

    def to_dict(self) -> dict[str, Any]:
        """External Result Record shape; ``error`` is omitted when unset."""
        data: dict[str, Any] = {
            "output": self.output,
            "tokens": self.tokens,
            "cost": self.cost,
            "quality": self.quality,
            "coverage": self.coverage,
            "safety": self.safety,
            "steps": list(self.steps),
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class CombinationRun:
    """One settled combination of a batch.

    Attributes:
        index: Position in the batch's combination list.
        combination: The (framework, model) pair.
        record: The adapter's (or dispatcher's) result.
        latency: Wall-clock seconds from submission to settlement.
    """

    index: int
    combination: Combination
    record: ResultRecord
    latency: float = 0.0

    @property
    def failed(self) -> bool:
        return self.record.failed

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.combination.key,
            "framework_id": self.combination.framework_id,
            "model_id": self.combination.model_id,
            "latency": self.latency,
            "source": self.record.source.value,
            **self.record.to_dict(),
        }


def _unique(ids: list[str]) -> list[str]:
    return list(dict.fromkeys(ids))


class BatchRequest(BaseModel):
    """A task plus the selected frameworks and models.

    Selections behave as ordered sets: duplicates collapse onto their first
    occurrence, so the combination count is always
    ``len(framework_ids) * len(model_ids)``.
    """

    task: str
    framework_ids: list[str]
    model_ids: list[str]

    @field_validator("framework_ids", "model_ids")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return _unique(value)

    def combinations(self) -> list[Combination]:
        """Framework-major, model-minor cartesian product."""
        return [
            Combination(framework_id, model_id)
            for framework_id in self.framework_ids
            for model_id in self.model_ids
        ]


@dataclass(frozen=True)
class BatchResult:
    """Atomic result of one batch: exactly one run per requested combination."""

    request: BatchRequest
    runs: tuple[CombinationRun, ...] = ()

    @property
    def records(self) -> list[ResultRecord]:
        return [run.record for run in self.runs]

    @property
    def succeeded(self) -> list[CombinationRun]:
        return [run for run in self.runs if not run.failed]

    @property
    def failed(self) -> list[CombinationRun]:
        return [run for run in self.runs if run.failed]

    def to_dict(self) -> dict[str, Any]:
        return {
            "task": self.request.task,
            "runs": [run.to_dict() for run in self.runs],
        }

    def __iter__(self) -> Iterator[CombinationRun]:
        return iter(self.runs)

    def __len__(self) -> int:
        return len(self.runs)


@dataclass(frozen=True)
class Highlights:
    """Batch-level summary over successful runs."""

    fastest: CombinationRun
    cheapest: CombinationRun
    highest_quality: CombinationRun
    average_tokens: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "fastest": {"id": self.fastest.combination.key, "latency": self.fastest.latency},
            "cheapest": {"id": self.cheapest.combination.key, "cost": self.cheapest.record.cost},
            "highest_quality": {
                "id": self.highest_quality.combination.key,
                "quality": self.highest_quality.record.quality,
            },
            "average_tokens": self.average_tokens,
        }
