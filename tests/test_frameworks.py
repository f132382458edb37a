"""Tests for framework personas and the registry."""

from __future__ import annotations

import pytest

from agentmatrix.exceptions import FrameworkError, UnknownFrameworkError
from agentmatrix.frameworks import FrameworkPersona, FrameworkRegistry, default_registry


class TestDefaultRegistry:
    def test_default_order(self, registry):
        assert registry.ids() == ["langgraph", "autogen", "crewai", "llamaindex"]

    def test_persona_fields(self, registry):
        crewai = registry.get("crewai")
        assert crewai.name == "CrewAI"
        assert "Task delegation" in crewai.traits
        assert "Reviewer approves" in crewai.process_hint

    def test_fresh_registry_each_call(self):
        first = default_registry()
        first.register(FrameworkPersona(id="smolagents", name="smolagents"))
        assert "smolagents" not in default_registry()


class TestRegistration:
    def test_register_extends_in_order(self):
        reg = FrameworkRegistry()
        reg.register(FrameworkPersona(id="b", name="B"))
        reg.register(FrameworkPersona(id="a", name="A"))
        assert reg.ids() == ["b", "a"]
        assert len(reg) == 2
        assert [p.name for p in reg] == ["B", "A"]

    def test_duplicate_rejected(self, registry):
        with pytest.raises(FrameworkError, match="already registered"):
            registry.register(FrameworkPersona(id="langgraph", name="Again"))

    def test_empty_id_rejected(self):
        with pytest.raises(FrameworkError):
            FrameworkRegistry().register(FrameworkPersona(id="", name="Nameless"))

    def test_unknown_lookup(self, registry):
        with pytest.raises(UnknownFrameworkError) as exc_info:
            registry.get("semantic-kernel")
        assert exc_info.value.framework_id == "semantic-kernel"
