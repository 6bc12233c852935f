"""Tests for the insight engine's remote/local resolution"""
import json
import asyncio

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from ingest.dataset import build_dataset
from ingest.models import PatternType, VisualizationType
from insight.config import Settings
from insight.engine import (
    DEGRADED_CONFIDENCE, RAW_SUMMARY_LIMIT, UNPARSED_WARNING,
    InsightEngine, ResolutionKind, strip_code_fences,
)
from insight.heuristics import LOCAL_MODEL_ID
from insight.llm import build_llm

REMOTE_PAYLOAD = {
    "summary": "Revenue grows steadily.",
    "confidence": 82,
    "patterns": [{
        "type": "trend",
        "description": "Revenue increases month over month",
        "confidence": 80,
        "visualization": {"type": "line", "config": {"xAxis": "month", "yAxis": "revenue"}},
    }],
}

class FakeLLM:
    """Returns a canned reply from invoke/ainvoke and records the prompt."""

    def __init__(self, content="", usage=None, error=None):
        self.content = content
        self.usage = usage
        self.error = error
        self.calls = []

    def _reply(self, messages):
        self.calls.append(messages)
        if self.error:
            raise self.error
        return AIMessage(content=self.content, usage_metadata=self.usage)

    def invoke(self, messages):
        return self._reply(messages)

    async def ainvoke(self, messages):
        return self._reply(messages)

class SlowLLM:
    async def ainvoke(self, messages):
        await asyncio.sleep(5)

def _dataset():
    return build_dataset([{"month": f"2024-{m:02d}-01", "revenue": 100 + m * 7} for m in range(1, 13)])

def _engine(llm, **settings):
    return InsightEngine(llm=llm, settings=Settings(**settings))

class TestStripCodeFences:
    def test_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_fences_inside_payload_untouched(self):
        payload = json.dumps({"summary": "Use ```code``` here", "confidence": 70})
        assert strip_code_fences(payload) == payload

    def test_unterminated_fence(self):
        assert strip_code_fences('```json\n{"a": 1}') == '{"a": 1}'

    def test_plain_text_untouched(self):
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'

class TestRemoteGate:
    def test_no_api_key_means_no_client(self):
        engine = InsightEngine(settings=Settings(api_key=None))
        assert engine.llm is None

        resolution = engine.resolve("show the trend", _dataset())
        assert resolution.kind == ResolutionKind.LOCAL
        assert resolution.insight.metadata.model_used == LOCAL_MODEL_ID

    def test_use_llm_false_disables_remote(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("USE_LLM", "false")
        settings = Settings.from_env()
        assert settings.api_key == "sk-test"
        assert not settings.remote_enabled

        engine = InsightEngine(settings=settings)
        assert engine.llm is None
        insight = engine.ask("show the trend", _dataset())
        assert insight.metadata.model_used == LOCAL_MODEL_ID

    def test_key_and_flag_build_a_single_attempt_client(self):
        llm = build_llm(Settings(api_key="sk-test", model_name="test-model", remote_timeout=5.0))
        assert llm is not None
        assert llm.model_name == "test-model"
        assert llm.max_retries == 0

    def test_invalid_timeout_falls_back_to_default(self, monkeypatch):
        monkeypatch.setenv("REMOTE_TIMEOUT_SECONDS", "soon")
        assert Settings.from_env().remote_timeout == 30.0

class TestResolution:
    def test_no_client_uses_local_heuristic(self):
        resolution = _engine(None).resolve("show the trend", _dataset())
        assert resolution.kind == ResolutionKind.LOCAL
        assert resolution.insight.metadata.model_used == LOCAL_MODEL_ID
        assert resolution.insight.metadata.processing_time is not None

    def test_failing_client_falls_back_locally(self):
        llm = FakeLLM(error=RuntimeError("connection refused"))
        resolution = _engine(llm).resolve("show the trend", _dataset())
        assert resolution.kind == ResolutionKind.LOCAL
        assert "connection refused" in resolution.reason
        assert resolution.insight.patterns[0].type == PatternType.TREND

    def test_fenced_json_reply_is_remote(self):
        reply = "```json\n" + json.dumps(REMOTE_PAYLOAD) + "\n```"
        llm = FakeLLM(reply, usage={"input_tokens": 100, "output_tokens": 20, "total_tokens": 120})
        insight = _engine(llm, model_name="test-model").ask("how is revenue trending?", _dataset())

        assert insight.summary == "Revenue grows steadily."
        assert insight.confidence == 82
        assert insight.suggested_viz == VisualizationType.LINE
        assert insight.metadata.model_used == "test-model"
        assert insight.metadata.tokens_used == 120

    def test_unparseable_reply_is_degraded(self):
        reply = "I think revenue is going up. " * 40
        resolution = _engine(FakeLLM(reply)).resolve("trend?", _dataset())

        assert resolution.kind == ResolutionKind.DEGRADED
        insight = resolution.insight
        assert insight.summary == reply[:RAW_SUMMARY_LIMIT]
        assert insight.confidence == DEGRADED_CONFIDENCE
        assert insight.patterns == []
        assert insight.warnings == [UNPARSED_WARNING]

    def test_backticks_inside_fields_stay_remote(self):
        reply = json.dumps({"summary": "Use ```code``` here", "confidence": 70, "patterns": []})
        resolution = _engine(FakeLLM(reply)).resolve("trend?", _dataset())
        assert resolution.kind == ResolutionKind.REMOTE
        assert resolution.insight.summary == "Use ```code``` here"

    def test_reply_failing_validation_is_degraded(self):
        reply = json.dumps({"summary": "x", "confidence": 250})
        resolution = _engine(FakeLLM(reply)).resolve("trend?", _dataset())
        assert resolution.kind == ResolutionKind.DEGRADED

    def test_prompt_carries_context_and_question(self):
        llm = FakeLLM(json.dumps(REMOTE_PAYLOAD))
        _engine(llm).ask("What changed in March?", _dataset())

        system, human = llm.calls[0]
        assert isinstance(system, SystemMessage)
        assert isinstance(human, HumanMessage)
        assert "User Question: What changed in March?" in human.content
        assert '"sampleRows"' in human.content

class TestAsyncResolution:
    def test_async_remote(self):
        llm = FakeLLM(json.dumps(REMOTE_PAYLOAD))
        resolution = asyncio.run(_engine(llm).aresolve("trend?", _dataset()))
        assert resolution.kind == ResolutionKind.REMOTE

    def test_timeout_falls_back_locally(self):
        engine = _engine(SlowLLM(), remote_timeout=0.05)
        resolution = asyncio.run(engine.aresolve("show the trend", _dataset()))
        assert resolution.kind == ResolutionKind.LOCAL
        assert resolution.insight.metadata.model_used == LOCAL_MODEL_ID
