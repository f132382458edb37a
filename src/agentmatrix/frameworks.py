"""Framework personas and the ordered framework registry.

Each framework identifier maps to one persona. The persona's traits and
process hint only bias the simulated narrative; they never change how a
result is measured.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from agentmatrix.exceptions import FrameworkError, UnknownFrameworkError


@dataclass(frozen=True)
class FrameworkPersona:
    """Descriptive persona for one agent framework.

    Attributes:
        id: Stable identifier used in batch requests (e.g. ``"langgraph"``).
        name: Display name (e.g. ``"LangGraph"``).
        description: One-line summary shown to users.
        strengths: Short strength tags shown to users.
        traits: Style traits fed to the simulator prompt.
        process_hint: Typical internal process fed to the simulator prompt.
    """

    id: str
    name: str
    description: str = ""
    strengths: tuple[str, ...] = field(default_factory=tuple)
    traits: tuple[str, ...] = field(default_factory=tuple)
    process_hint: str = ""


DEFAULT_FRAMEWORKS: tuple[FrameworkPersona, ...] = (
    FrameworkPersona(
        id="langgraph",
        name="LangGraph",
        description="Graph-first control with tool-calling and guardrails.",
        strengths=("branch-safe", "memory aware", "deterministic"),
        traits=("Graph-structured", "Cyclic", "Stateful", "Precise control flow"),
        process_hint=(
            "Define Graph State -> Node: Retrieve -> Node: Grade check -> "
            "Node: Generate -> Edge: End"
        ),
    ),
    FrameworkPersona(
        id="autogen",
        name="AutoGen",
        description="Conversational multi-agent orchestration with swappable runtimes.",
        strengths=("negotiation", "lightweight", "multi-round"),
        traits=("Conversational", "Multi-agent chat", "Negotiation", "Verbose"),
        process_hint=(
            "UserProxy initiates -> Assistant replies -> UserProxy critiques -> "
            "Assistant refines -> Termination"
        ),
    ),
    FrameworkPersona(
        id="crewai",
        name="CrewAI",
        description="Role-based agent crews with task decomposition and reviews.",
        strengths=("role clarity", "reviews", "handoffs"),
        traits=("Role-playing", "Task delegation", "Hierarchical", "Structured"),
        process_hint=(
            "Researcher gathers info -> Manager delegates -> Writer compiles -> "
            "Reviewer approves"
        ),
    ),
    FrameworkPersona(
        id="llamaindex",
        name="LlamaIndex",
        description="Retrieval-centric agent graphs with observability hooks.",
        strengths=("retrieval", "evaluations", "schema aware"),
        traits=("Data-centric", "Retrieval-augmented", "Query engine", "Synthesizer"),
        process_hint=(
            "Query breakdown -> Retrieve nodes -> Rerank results -> Synthesize response"
        ),
    ),
)


class FrameworkRegistry:
    """Ordered registry of framework personas.

    Iteration order is registration order, which is also the default
    display order.
    """

    def __init__(self, personas: tuple[FrameworkPersona, ...] | list[FrameworkPersona] = ()) -> None:
        self._personas: dict[str, FrameworkPersona] = {}
        for persona in personas:
            self.register(persona)

    def register(self, persona: FrameworkPersona) -> None:
        """Add a persona.

        Raises:
            FrameworkError: If the id is empty or already registered.
        """
        if not persona.id:
            raise FrameworkError("Framework persona must have a non-empty id")
        if persona.id in self._personas:
            raise FrameworkError(f"Framework already registered: {persona.id}")
        self._personas[persona.id] = persona

    def get(self, framework_id: str) -> FrameworkPersona:
        """Return the persona for ``framework_id``.

        Raises:
            UnknownFrameworkError: If nothing is registered under that id.
        """
        try:
            return self._personas[framework_id]
        except KeyError:
            raise UnknownFrameworkError(framework_id) from None

    def ids(self) -> list[str]:
        return list(self._personas)

    def __contains__(self, framework_id: object) -> bool:
        return framework_id in self._personas

    def __iter__(self) -> Iterator[FrameworkPersona]:
        return iter(self._personas.values())

    def __len__(self) -> int:
        return len(self._personas)


def default_registry() -> FrameworkRegistry:
    """Return a fresh registry holding the built-in frameworks."""
    return FrameworkRegistry(DEFAULT_FRAMEWORKS)
