"""Runtime settings read from the environment (optionally a .env file)"""
import os
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}; using {default}")
        return default


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model_name: str = "gpt-4o-mini"
    temperature: float = 0.0
    remote_timeout: float = 30.0
    use_llm: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_key=os.getenv("OPENAI_API_KEY") or None,
            base_url=os.getenv("OPENAI_BASE_URL") or None,
            model_name=os.getenv("MODEL_NAME", "gpt-4o-mini").strip(),
            temperature=_env_float("MODEL_TEMPERATURE", 0.0),
            remote_timeout=_env_float("REMOTE_TIMEOUT_SECONDS", 30.0),
            use_llm=os.getenv("USE_LLM", "true").lower() == "true",
        )

    @property
    def remote_enabled(self) -> bool:
        return self.use_llm and bool(self.api_key)
