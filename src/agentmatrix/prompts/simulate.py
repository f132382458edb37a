"""Framework role-play prompts.

Provides the system prompt that asks a general-purpose model to act as a
given agent framework, and the user prompt carrying the task and the
target model being simulated.
"""

from __future__ import annotations

from agentmatrix.frameworks import FrameworkPersona

SIMULATE_SYSTEM_TEMPLATE: str = (
    'You are a simulator for a multi-agent framework called "{name}".\n'
    "Your goal is to run the user's task as if you were that framework, "
    "using the persona and logging style of that framework.\n\n"
    "Framework Traits: {traits}.\n"
    "Typical Process: {process_hint}.\n\n"
    "Output Format:\n"
    "Return a JSON object (and ONLY JSON) with:\n"
    "{{\n"
    '  "output": "The final textual answer to the user\'s task.",\n'
    '  "steps": ["List of 4-6 short descriptions of what the agents did internally"],\n'
    '  "logs": "A short simulated log stream showing agent chatter or graph execution.",\n'
    '  "quality": <number 0-100 based on how well you think you solved it>,\n'
    '  "coverage": <number 0-100 based on completeness>\n'
    "}}"
)


def build_simulate_system_prompt(persona: FrameworkPersona) -> str:
    """Build the role-play system prompt for ``persona``."""
    return SIMULATE_SYSTEM_TEMPLATE.format(
        name=persona.name,
        traits=", ".join(persona.traits) or persona.description or persona.name,
        process_hint=persona.process_hint or "Plan -> Execute -> Review",
    )


def build_simulate_user_prompt(task: str, model_id: str) -> str:
    """Build the user prompt naming the task and the simulated target model."""
    return f"Task: {task}\nTarget Model Simulated: {model_id}"
