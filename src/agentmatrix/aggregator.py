"""Batch-level highlights over successful combination runs."""

from __future__ import annotations

import math
from collections.abc import Iterable

from agentmatrix.models.records import CombinationRun, Highlights


def summarize(runs: Iterable[CombinationRun]) -> Highlights | None:
    """Compute highlights for a batch.

    Failed runs are ignored. Returns None when no successful run remains,
    so callers never see a Highlights with undefined fields.

    Ties go to the run encountered first. ``average_tokens`` is the mean
    over successful runs, rounded half-up.

    Pure: the input is only iterated, never mutated.
    """
    valid = [run for run in runs if not run.failed]
    if not valid:
        return None

    fastest = cheapest = highest = valid[0]
    for run in valid[1:]:
        if run.latency < fastest.latency:
            fastest = run
        if run.record.cost < cheapest.record.cost:
            cheapest = run
        if run.record.quality > highest.record.quality:
            highest = run

    mean_tokens = sum(run.record.tokens for run in valid) / len(valid)
    return Highlights(
        fastest=fastest,
        cheapest=cheapest,
        highest_quality=highest,
        average_tokens=math.floor(mean_tokens + 0.5),
    )
