"""Mock path: the network-free substitute response.

Shape and metrics are fixed; the narrative varies with the task through a
stable seed, so identical inputs always produce identical text.
"""

from __future__ import annotations

import zlib

from agentmatrix.frameworks import FrameworkPersona
from agentmatrix.models.records import RecordSource, ResultRecord

MOCK_TOKENS = 250
MOCK_COST = 0.0025
MOCK_QUALITY = 95
MOCK_COVERAGE = 98
MOCK_SAFETY = 100

_SNIPPET_LIMIT = 120

OUTPUT_ANGLES: tuple[str, ...] = (
    "Framed the objective and success guardrails, then aligned agent roles.",
    "Leaned on high-coverage retrieval to ground the answer and prune hallucinations.",
    "Ran a two-pass critique to stress test the proposed approach.",
    "Optimized for speed-first execution while tracking risk triggers.",
)

CLOSING_NOTES: tuple[str, ...] = (
    "Next move: validate critical paths with a dry-run tool call and tighten any cost outliers.",
    "Highlight: reused context across tools to cut latency without losing rigor.",
    "Risk: watch for stale data; schedule a refresh cadence before launch.",
    "Bonus: snapshot intermediate traces for quick human-in-the-loop review.",
)


def task_snippet(task: str) -> str:
    """Shorten ``task`` to at most 120 characters for display."""
    if len(task) > _SNIPPET_LIMIT:
        return f"{task[: _SNIPPET_LIMIT - 3]}..."
    return task


def _seed(persona: FrameworkPersona, task: str) -> int:
    return zlib.crc32(f"{persona.id}:{task}".encode("utf-8", "surrogatepass"))


def mock_record(persona: FrameworkPersona, task: str, reason: str) -> ResultRecord:
    """Build the mock ResultRecord for ``persona`` and ``task``.

    Args:
        persona: Framework being stood in for.
        task: The submitted task text (any length, may be empty).
        reason: Why no live result is available, shown in the output.
    """
    seed = _seed(persona, task)
    angle = OUTPUT_ANGLES[(seed + 1) % len(OUTPUT_ANGLES)]
    closer = CLOSING_NOTES[(seed + 2) % len(CLOSING_NOTES)]
    output = (
        f'[MOCK {persona.name} OUTPUT for "{task_snippet(task)}"]\n\n'
        f"This is a simulated response because {reason}.\n\n"
        f"{angle} {closer}\n\n"
        "Simulated reasoning:\n"
        f"- Step 1: Mapped task to {persona.name} nodes.\n"
        "- Step 2: Executed graph.\n"
        "- Step 3: Verified output."
    )
    return ResultRecord(
        output=output,
        tokens=MOCK_TOKENS,
        cost=MOCK_COST,
        steps=(
            f"Initialized {persona.name}",
            "Processed Input",
            "Generated Response",
            "Finalized",
        ),
        quality=MOCK_QUALITY,
        coverage=MOCK_COVERAGE,
        safety=MOCK_SAFETY,
        source=RecordSource.MOCK,
    )
