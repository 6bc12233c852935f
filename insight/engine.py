"""Insight engine: one remote attempt, local heuristic fallback"""
import json
import time
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import ValidationError

from ingest.context import serialize_context
from ingest.models import Dataset, Insight, InsightMetadata
from .config import Settings
from .heuristics import local_insight
from .llm import build_llm
from .prompts import INSIGHT_SYSTEM_PROMPT, INSIGHT_USER_TEMPLATE

logger = logging.getLogger(__name__)

RAW_SUMMARY_LIMIT = 500
DEGRADED_CONFIDENCE = 50
UNPARSED_WARNING = "Unable to parse structured response. Showing raw AI output."

_UNSET: Any = object()


class ResolutionKind(str, Enum):
    REMOTE = "remote"
    DEGRADED = "degraded"
    LOCAL = "local"


@dataclass(frozen=True)
class Resolution:
    kind: ResolutionKind
    insight: Insight
    reason: Optional[str] = None


def strip_code_fences(text: str) -> str:
    """Unwrap a reply fenced as a whole; fences inside the payload are left alone."""
    t = text.strip()
    if t.startswith("```"):
        t = t[3:]
        if t[:4].lower() == "json":
            t = t[4:]
        t = t.rstrip()
        # an unterminated fence only loses its opening marker
        if t.endswith("```"):
            t = t[:-3]
    return t.strip()


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 1)


class InsightEngine:
    """Answers questions about a Dataset.

    Without an llm argument the client comes from build_llm(settings), which is
    None when no API key is configured. llm=None disables the remote tier; any
    object with invoke/ainvoke can be passed as the client.
    """

    def __init__(self, llm: Any = _UNSET, settings: Optional[Settings] = None):
        self.settings = settings or Settings.from_env()
        self.llm = build_llm(self.settings) if llm is _UNSET else llm

    @property
    def model_name(self) -> str:
        return getattr(self.llm, "model_name", None) or self.settings.model_name

    def build_messages(self, question: str, dataset: Dataset):
        user_prompt = INSIGHT_USER_TEMPLATE.format(
            context=serialize_context(dataset),
            question=question,
        )
        return [
            SystemMessage(content=INSIGHT_SYSTEM_PROMPT),
            HumanMessage(content=user_prompt),
        ]

    # ---- resolution ---------------------------------------------------------

    def resolve(self, question: str, dataset: Dataset) -> Resolution:
        start = time.perf_counter()
        if self.llm is None:
            return self._local(question, dataset, start, "remote unavailable")

        try:
            response = self.llm.invoke(self.build_messages(question, dataset))
        except Exception as e:
            logger.error(f"Remote insight call failed: {e}")
            return self._local(question, dataset, start, f"remote error: {e}")

        return self._from_response(response, start)

    async def aresolve(self, question: str, dataset: Dataset) -> Resolution:
        start = time.perf_counter()
        if self.llm is None:
            return self._local(question, dataset, start, "remote unavailable")

        try:
            response = await asyncio.wait_for(
                self.llm.ainvoke(self.build_messages(question, dataset)),
                timeout=self.settings.remote_timeout,
            )
        except Exception as e:
            logger.error(f"Remote insight call failed: {e!r}")
            return self._local(question, dataset, start, f"remote error: {e!r}")

        return self._from_response(response, start)

    def ask(self, question: str, dataset: Dataset) -> Insight:
        return self.resolve(question, dataset).insight

    async def aask(self, question: str, dataset: Dataset) -> Insight:
        return (await self.aresolve(question, dataset)).insight

    # ---- terminal paths -----------------------------------------------------

    def _local(self, question: str, dataset: Dataset, start: float, reason: str) -> Resolution:
        logger.info(f"Falling back to local heuristic ({reason})")
        insight = local_insight(question, dataset)
        insight.metadata.processing_time = _elapsed_ms(start)
        return Resolution(ResolutionKind.LOCAL, insight, reason)

    def _from_response(self, response: Any, start: float) -> Resolution:
        text = self._response_text(response)
        try:
            parsed = json.loads(strip_code_fences(text))
            insight = Insight.model_validate(parsed)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Failed to parse remote insight: {e}")
            return Resolution(ResolutionKind.DEGRADED, self._degraded(text, start), str(e))

        if insight.suggested_viz is None and insight.patterns and insight.patterns[0].visualization:
            insight.suggested_viz = insight.patterns[0].visualization.type
        insight.metadata.processing_time = _elapsed_ms(start)
        insight.metadata.model_used = self.model_name
        if insight.metadata.tokens_used is None:
            insight.metadata.tokens_used = self._tokens_used(response)
        return Resolution(ResolutionKind.REMOTE, insight)

    def _degraded(self, text: str, start: float) -> Insight:
        return Insight(
            summary=text[:RAW_SUMMARY_LIMIT],
            confidence=DEGRADED_CONFIDENCE,
            patterns=[],
            warnings=[UNPARSED_WARNING],
            metadata=InsightMetadata(processing_time=_elapsed_ms(start), model_used=self.model_name),
        )

    @staticmethod
    def _response_text(response: Any) -> str:
        content = getattr(response, "content", response)
        if isinstance(content, list):
            # content blocks: keep the text parts
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block) for block in content
            )
        return content if isinstance(content, str) else str(content)

    @staticmethod
    def _tokens_used(response: Any) -> Optional[int]:
        usage = getattr(response, "usage_metadata", None) or {}
        total = usage.get("total_tokens") if isinstance(usage, dict) else None
        return int(total) if total is not None else None
