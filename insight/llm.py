import logging
from typing import Optional

from langchain_openai import ChatOpenAI

from .config import Settings

logger = logging.getLogger(__name__)


def build_llm(settings: Optional[Settings] = None) -> Optional[ChatOpenAI]:
    """Build a ChatOpenAI from settings (MODEL_NAME, MODEL_TEMPERATURE, ...).
    Returns None when no API key is configured or USE_LLM is off, so callers
    go straight to the local heuristic."""
    settings = settings or Settings.from_env()

    if not settings.remote_enabled:
        logger.warning("OPENAI_API_KEY not set or USE_LLM=false; insights will use the local heuristic.")
        return None

    # Single place to configure the LLM client; exactly one attempt per question
    return ChatOpenAI(
        model=settings.model_name,
        temperature=settings.temperature,
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout=settings.remote_timeout,
        max_retries=0,
    )
