"""Tests for provider adapters and their live-path strategies.

Tests cover:
- sanitize_credential: stripping, placeholder and prefix rules
- policy table: classification and resolution of every failure kind
- SimulationStrategy: prompt shape and strict response parsing
- HostedStrategy: field mapping and reported cost
- ProviderAdapter: mock path, live path, fallback and surfaced failures
"""

from __future__ import annotations

import json

import httpx
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from agentmatrix.frameworks import default_registry
from agentmatrix.llm.errors import (
    LLMAuthError,
    LLMConnectionError,
    LLMRateLimitError,
    LLMResponseError,
    LLMStatusError,
    LLMTimeoutError,
)
from agentmatrix.models.config import AdapterConfig, HostedEndpoint, MatrixConfig
from agentmatrix.models.records import RecordSource
from agentmatrix.pricing import PricingTable
from agentmatrix.providers import (
    FALLBACK_POLICY,
    FailureKind,
    FallbackAction,
    HostedStrategy,
    LiveOutcome,
    ProviderAdapter,
    SimulationStrategy,
    build_adapters,
    classify,
    mock_record,
    resolve_action,
    sanitize_credential,
)
from agentmatrix.providers.mock import task_snippet
from tests.conftest import VALID_KEY, RecordingSleep, chat_response, simulated_content


def _assert_mock_shape(record) -> None:
    assert record.error is None
    assert record.source is RecordSource.MOCK
    assert record.tokens == 250
    assert record.cost == 0.0025
    assert record.quality == 95
    assert record.coverage == 98
    assert record.safety == 100


# ===========================================================================
# Credentials
# ===========================================================================

class TestSanitizeCredential:
    def test_strips_disallowed_characters(self):
        assert sanitize_credential(' "sk-abc_123"\n') == "sk-abc123"

    @pytest.mark.parametrize("raw", [None, "", "   ", "'\"", "sk-placeholder", "SK-PLACEHOLDER-KEY", "my placeholder"])
    def test_absent(self, raw):
        assert sanitize_credential(raw) is None

    def test_prefix_required(self):
        assert sanitize_credential("abc-123") is None
        assert sanitize_credential("abc-123", prefix="") == "abc-123"
        assert sanitize_credential("crew-1", prefix="crew-") == "crew-1"


# ===========================================================================
# Policy table
# ===========================================================================

class TestPolicy:
    @pytest.mark.parametrize(
        "exc,kind",
        [
            (LLMAuthError("no"), FailureKind.AUTH),
            (LLMRateLimitError("slow down"), FailureKind.RATE_LIMIT),
            (LLMTimeoutError("late"), FailureKind.TIMEOUT),
            (LLMConnectionError("down"), FailureKind.NETWORK),
            (LLMStatusError(503), FailureKind.UNAVAILABLE),
            (LLMStatusError(500), FailureKind.UPSTREAM),
            (LLMStatusError(404), FailureKind.UPSTREAM),
            (LLMResponseError("bad"), FailureKind.MALFORMED),
            (json.JSONDecodeError("x", "doc", 0), FailureKind.MALFORMED),
            (RuntimeError("surprise"), FailureKind.UPSTREAM),
        ],
    )
    def test_classify(self, exc, kind):
        assert classify(exc) is kind

    def test_every_kind_has_a_policy(self):
        assert set(FALLBACK_POLICY) == set(FailureKind)

    @pytest.mark.parametrize(
        "kind,action",
        [
            (FailureKind.AUTH, FallbackAction.MOCK),
            (FailureKind.RATE_LIMIT, FallbackAction.MOCK),
            (FailureKind.MALFORMED, FallbackAction.MOCK),
            (FailureKind.TIMEOUT, FallbackAction.MOCK),
            (FailureKind.NETWORK, FallbackAction.MOCK),
            (FailureKind.UNAVAILABLE, FallbackAction.SURFACE),
            (FailureKind.UPSTREAM, FallbackAction.SURFACE),
        ],
    )
    def test_resolved_action(self, kind, action):
        assert resolve_action(LiveOutcome.failed(kind, "x")) is action

    def test_resolve_rejects_success(self):
        outcome = LiveOutcome.success(SimulationStrategy.parse_response(chat_response(simulated_content())))
        assert outcome.ok
        with pytest.raises(ValueError):
            resolve_action(outcome)


# ===========================================================================
# SimulationStrategy parsing
# ===========================================================================

class TestSimulationParse:
    def test_logs_appended_to_output(self):
        payload = SimulationStrategy.parse_response(chat_response(simulated_content()))
        assert payload.output == (
            "Agents plan, act and reflect.\n\n---\nLOGS:\n"
            "[node:retrieve] 3 docs\n[node:generate] done"
        )
        assert payload.tokens == 1234
        assert payload.steps[0] == "Defined graph state"
        assert (payload.quality, payload.coverage, payload.safety) == (80, 88, 95)

    def test_no_logs_leaves_output_untouched(self):
        payload = SimulationStrategy.parse_response(chat_response(simulated_content(logs="")))
        assert payload.output == "Agents plan, act and reflect."

    def test_missing_scores_use_defaults(self):
        content = simulated_content()
        del content["quality"]
        del content["coverage"]
        payload = SimulationStrategy.parse_response(chat_response(content))
        assert (payload.quality, payload.coverage, payload.safety) == (85, 90, 95)

    def test_explicit_zero_score_is_kept(self):
        payload = SimulationStrategy.parse_response(chat_response(simulated_content(quality=0)))
        assert payload.quality == 0

    def test_non_json_content(self):
        with pytest.raises(LLMResponseError):
            SimulationStrategy.parse_response(chat_response("Sure! Here is your answer."))

    def test_missing_usage(self):
        with pytest.raises(LLMResponseError, match="usage"):
            SimulationStrategy.parse_response(chat_response(simulated_content(), total_tokens=None))

    @pytest.mark.parametrize(
        "overrides",
        [
            {"output": None},
            {"steps": []},
            {"steps": ["plan", "act", "check"]},
            {"steps": [f"step {i}" for i in range(7)]},
            {"steps": "one step"},
            {"quality": 140},
            {"coverage": "lots"},
        ],
    )
    def test_schema_violations(self, overrides):
        with pytest.raises(ValidationError):
            SimulationStrategy.parse_response(chat_response(simulated_content(**overrides)))

    @pytest.mark.parametrize("count", [4, 5, 6])
    def test_step_count_bounds(self, count):
        steps = [f"step {i}" for i in range(count)]
        payload = SimulationStrategy.parse_response(chat_response(simulated_content(steps=steps)))
        assert len(payload.steps) == count


# ===========================================================================
# ProviderAdapter: mock path
# ===========================================================================

class TestMockPath:
    @pytest.mark.parametrize("api_key", [None, "", "sk-placeholder", "not-a-key"])
    def test_absent_credential_never_touches_network(self, make_adapter, sleep, api_key):
        adapter = make_adapter(api_key=api_key)
        record = adapter.execute("Summarize AI agents", "gpt-41")

        _assert_mock_shape(record)
        assert "LangGraph" in record.output
        assert "Summarize AI agents" in record.output
        assert record.steps == ("Initialized LangGraph", "Processed Input", "Generated Response", "Finalized")
        assert sleep.calls == [0.1]

    def test_zero_mock_latency_skips_sleep(self, make_adapter, sleep):
        make_adapter(api_key=None, mock_latency=0).execute("t", "gpt-41")
        assert sleep.calls == []

    @settings(max_examples=50, deadline=None)
    @given(task=st.text(max_size=2000), model_id=st.text(max_size=20))
    def test_mock_shape_for_any_task(self, task, model_id):
        persona = default_registry().get("autogen")
        adapter = ProviderAdapter(
            persona,
            AdapterConfig(api_key=None, mock_latency=0),
            PricingTable.default(),
        )
        _assert_mock_shape(adapter.execute(task, model_id))

    def test_mock_output_is_stable_and_task_dependent(self, langgraph):
        first = mock_record(langgraph, "task one", "reason")
        again = mock_record(langgraph, "task one", "reason")
        assert first == again
        outputs = {mock_record(langgraph, f"task {i}", "reason").output for i in range(12)}
        assert len(outputs) == 12

    def test_long_task_is_truncated(self):
        snippet = task_snippet("x" * 500)
        assert len(snippet) == 120
        assert snippet.endswith("...")
        assert task_snippet("short") == "short"


# ===========================================================================
# ProviderAdapter: live path
# ===========================================================================

class TestLivePath:
    def test_success_priced_at_target_model_rate(self, make_adapter, pricing):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=chat_response(simulated_content(), total_tokens=1234))

        record = make_adapter(handler).execute("Summarize AI agents", "claude-37")

        assert record.source is RecordSource.LIVE
        assert record.error is None
        assert record.tokens == 1234
        assert record.cost == round(1234 / 1000 * 0.0035, 6)
        assert record.cost != round(1234 / 1000 * pricing.rate_for("gpt-4o"), 6)
        assert record.quality == 80
        assert record.coverage == 88
        assert record.safety == 95
        assert len(record.steps) == 4

    def test_unknown_model_priced_at_fallback(self, make_adapter):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=chat_response(simulated_content(), total_tokens=1000))

        record = make_adapter(handler).execute("t", "mystery-model")
        assert record.cost == 0.002

    def test_request_role_plays_framework(self, make_adapter):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["payload"] = json.loads(request.content)
            captured["auth"] = request.headers["authorization"]
            return httpx.Response(200, json=chat_response(simulated_content()))

        make_adapter(handler).execute("Summarize AI agents", "gpt-41")

        payload = captured["payload"]
        system, user = payload["messages"]
        assert payload["model"] == "gpt-4o"
        assert payload["response_format"] == {"type": "json_object"}
        assert payload["max_tokens"] == 1000
        assert '"LangGraph"' in system["content"]
        assert "Graph-structured, Cyclic, Stateful, Precise control flow" in system["content"]
        assert "Node: Grade check" in system["content"]
        assert user["content"] == "Task: Summarize AI agents\nTarget Model Simulated: gpt-41"
        assert captured["auth"] == f"Bearer {VALID_KEY}"


class TestLiveFallback:
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(401, json={"error": "invalid key"}),
            httpx.Response(403, text="forbidden"),
            httpx.Response(429, json={"error": "quota exceeded"}),
            httpx.Response(400, json={"error": {"code": "invalid_api_key"}}),
            httpx.Response(200, json=chat_response("not json at all")),
            httpx.Response(200, json=chat_response(simulated_content(), total_tokens=None)),
            httpx.Response(200, json=chat_response(simulated_content(steps=[]))),
        ],
        ids=["401", "403", "429", "invalid_api_key", "non-json", "no-usage", "bad-schema"],
    )
    def test_safe_failures_fall_back_to_mock(self, make_adapter, response):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return response

        record = make_adapter(handler).execute("Summarize AI agents", "gpt-41")

        _assert_mock_shape(record)
        assert len(calls) == 1

    def test_timeout_falls_back_to_mock(self, make_adapter):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        _assert_mock_shape(make_adapter(handler).execute("t", "gpt-41"))

    def test_network_error_retried_then_mocked(self, make_adapter, sleep):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("refused", request=request)

        record = make_adapter(handler, max_attempts=3).execute("t", "gpt-41")

        _assert_mock_shape(record)
        assert len(calls) == 3
        # two backoff sleeps, then the mock latency
        assert sleep.calls == [0, 0, 0.1]

    def test_network_error_recovers_on_retry(self, make_adapter):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("blip", request=request)
            return httpx.Response(200, json=chat_response(simulated_content()))

        record = make_adapter(handler).execute("t", "gpt-41")
        assert record.source is RecordSource.LIVE
        assert len(calls) == 2


class TestSurfacedFailures:
    def test_http_500_is_error_record(self, make_adapter):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500, json={"error": "internal server error"})

        record = make_adapter(handler).execute("Summarize AI agents", "gpt-41")

        assert record.error
        assert "LangGraph unavailable" in record.error
        assert record.source is RecordSource.ERROR
        assert (record.tokens, record.cost, record.quality, record.coverage, record.safety) == (0, 0, 0, 0, 0)
        assert record.steps == ()
        assert len(calls) == 1

    def test_503_retried_then_surfaced(self, make_adapter):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503, text="overloaded")

        record = make_adapter(handler, max_attempts=2).execute("t", "gpt-41")
        assert record.failed
        assert len(calls) == 2

    def test_unexpected_strategy_exception_never_escapes(self, langgraph, pricing):
        class ExplodingStrategy:
            def attempt(self, persona, task, model_id, credential):
                raise RuntimeError("kaboom")

        adapter = ProviderAdapter(
            langgraph,
            AdapterConfig(api_key=VALID_KEY, mock_latency=0),
            pricing,
            strategy=ExplodingStrategy(),
        )
        record = adapter.execute("t", "gpt-41")
        assert record.failed
        assert "kaboom" in record.error


# ===========================================================================
# HostedStrategy
# ===========================================================================

class TestHostedStrategy:
    def _adapter(self, handler, registry, pricing, endpoint: HostedEndpoint) -> ProviderAdapter:
        config = AdapterConfig(
            api_key="crew-key",
            credential_prefix="",
            mode="hosted",
            hosted=endpoint,
            retry_backoff=0,
            mock_latency=0,
        )
        return ProviderAdapter(
            registry.get("crewai"),
            config,
            pricing,
            strategy=HostedStrategy.from_config(config, transport=httpx.MockTransport(handler)),
            sleep=RecordingSleep(),
        )

    def test_reported_cost_takes_precedence(self, registry, pricing):
        def handler(request: httpx.Request) -> httpx.Response:
            assert json.loads(request.content) == {"model": "gpt-41", "prompt": "Plan"}
            return httpx.Response(
                200,
                json={
                    "result": "Crew finished",
                    "usage": {"tokens": 900, "cost": 0.05},
                    "steps": ["Researcher", "Writer"],
                    "quality": 70,
                },
            )

        endpoint = HostedEndpoint(url="http://crew/v1/run", input_field="prompt", output_field="result")
        record = self._adapter(handler, registry, pricing, endpoint).execute("Plan", "gpt-41")

        assert record.output == "Crew finished"
        assert record.tokens == 900
        assert record.cost == 0.05
        assert record.steps == ("Researcher", "Writer")
        assert (record.quality, record.coverage, record.safety) == (70, 90, 95)

    def test_cost_computed_when_not_reported(self, registry, pricing):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"answer": "42", "usage": {"tokens": 2000}})

        endpoint = HostedEndpoint(url="http://llama/v1/query", input_field="query", output_field="answer")
        record = self._adapter(handler, registry, pricing, endpoint).execute("Why?", "llama-33")

        assert record.cost == 0.003
        assert record.steps == ("Parsed task", "Executed CrewAI")

    def test_missing_usage_falls_back_to_mock(self, registry, pricing):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"result": "no usage here"})

        endpoint = HostedEndpoint(url="http://crew/v1/run", input_field="prompt", output_field="result")
        _assert_mock_shape(self._adapter(handler, registry, pricing, endpoint).execute("t", "gpt-41"))


# ===========================================================================
# build_adapters
# ===========================================================================

class TestBuildAdapters:
    def test_one_adapter_per_framework(self, registry, pricing):
        adapters = build_adapters(MatrixConfig(), registry, pricing)
        assert list(adapters) == registry.ids()
        assert adapters["autogen"].persona.name == "AutoGen"

    def test_shared_transport_reaches_every_adapter(self, registry, pricing):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content)["messages"][0]["content"])
            return httpx.Response(200, json=chat_response(simulated_content()))

        config = MatrixConfig(defaults=AdapterConfig(api_key=VALID_KEY, mock_latency=0))
        adapters = build_adapters(config, registry, pricing, transport=httpx.MockTransport(handler))
        for adapter in adapters.values():
            assert adapter.execute("t", "gpt-41").source is RecordSource.LIVE
        assert len(seen) == 4
        assert any('"LlamaIndex"' in prompt for prompt in seen)
