"""Question intent classification by literal pattern tables"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class Intent(str, Enum):
    TREND = "trend"
    CORRELATION = "correlation"
    COMPARISON = "comparison"
    DISTRIBUTION = "distribution"


INTENT_PATTERNS: List[Tuple[Intent, re.Pattern]] = [
    (Intent.TREND, re.compile(r"trend|over time|change|growth|increase|decrease", re.IGNORECASE)),
    (Intent.CORRELATION, re.compile(r"correlat|relationship|connect|affect|impact", re.IGNORECASE)),
    (Intent.COMPARISON, re.compile(r"compar|versus|vs|difference|between", re.IGNORECASE)),
    (Intent.DISTRIBUTION, re.compile(r"distribut|spread|range|average|mean|median", re.IGNORECASE)),
]

# Order in which signals select a pattern branch; comparison has no branch of its own
PATTERN_PRIORITY: List[Intent] = [Intent.TREND, Intent.CORRELATION, Intent.DISTRIBUTION]


@dataclass(frozen=True)
class IntentSignals:
    trend: bool = False
    correlation: bool = False
    comparison: bool = False
    distribution: bool = False

    def has(self, intent: Intent) -> bool:
        return getattr(self, intent.value)

    @property
    def detected(self) -> List[Intent]:
        return [intent for intent, _ in INTENT_PATTERNS if self.has(intent)]


def classify_intent(question: str) -> IntentSignals:
    """Independent, non-exclusive flags for each intent matched in the question."""
    return IntentSignals(**{
        intent.value: bool(pattern.search(question or ""))
        for intent, pattern in INTENT_PATTERNS
    })
