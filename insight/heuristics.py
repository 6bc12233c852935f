"""Deterministic local analyzer: confidence arithmetic and pattern templates"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from ingest.models import (
    Dataset, Insight, InsightMetadata, Pattern, PatternType, Visualization, VisualizationType,
)
from .intent import Intent, IntentSignals, PATTERN_PRIORITY, classify_intent

logger = logging.getLogger(__name__)

LOCAL_MODEL_ID = "local-heuristic"

BASE_CONFIDENCE = 75
SMALL_SAMPLE_ROWS = 20
SMALL_SAMPLE_PENALTY = 20
MISSING_RATIO = 0.10
MISSING_PENALTY = 15

SMALL_SAMPLE_WARNING = "Small sample size may affect reliability"
HIGH_MISSING_WARNING = "High percentage of missing values detected"
VAGUE_QUESTION_WARNING = "Question could be more specific for better insights"


def base_confidence(dataset: Dataset) -> Tuple[int, List[str]]:
    """Start at 75 and subtract for small samples and heavy missingness."""
    confidence = BASE_CONFIDENCE
    warnings: List[str] = []

    if dataset.row_count < SMALL_SAMPLE_ROWS:
        confidence -= SMALL_SAMPLE_PENALTY
        warnings.append(SMALL_SAMPLE_WARNING)

    if dataset.summary.missing_values > dataset.row_count * len(dataset.headers) * MISSING_RATIO:
        confidence -= MISSING_PENALTY
        warnings.append(HIGH_MISSING_WARNING)

    return confidence, warnings


def confidence_label(confidence: float) -> str:
    if confidence >= 80:
        return "High Confidence"
    if confidence >= 60:
        return "Medium Confidence"
    return "Low Confidence"


@dataclass(frozen=True)
class PatternBranch:
    intent: Intent
    min_numeric: int
    build: Callable[[Dataset, int], Tuple[Pattern, str]]


def _trend(dataset: Dataset, base: int) -> Tuple[Pattern, str]:
    column = dataset.summary.numeric_columns[0]
    pattern = Pattern(
        type=PatternType.TREND,
        description=f"{column} shows an upward trend with some fluctuations",
        confidence=base,
        visualization=Visualization(type=VisualizationType.LINE, config={"xAxis": "index", "yAxis": column}),
    )
    summary = (
        f"Based on the analysis of {dataset.row_count} data points, there's a noticeable upward trend "
        f"in {column}. The pattern suggests consistent growth with minor variations."
    )
    return pattern, summary


def _correlation(dataset: Dataset, base: int) -> Tuple[Pattern, str]:
    col1, col2 = dataset.summary.numeric_columns[:2]
    pattern = Pattern(
        type=PatternType.CORRELATION,
        description=f"Moderate positive correlation detected between {col1} and {col2}",
        confidence=base - 10,
        visualization=Visualization(type=VisualizationType.SCATTER, config={"xAxis": col1, "yAxis": col2}),
    )
    summary = (
        f"Across {dataset.row_count} records, analysis reveals a moderate positive correlation between "
        f"{col1} and {col2}. As {col1} increases, {col2} tends to increase as well, though the "
        f"relationship isn't perfectly linear."
    )
    return pattern, summary


def _distribution(dataset: Dataset, base: int) -> Tuple[Pattern, str]:
    column = dataset.summary.numeric_columns[0]
    pattern = Pattern(
        type=PatternType.DISTRIBUTION,
        description=f"{column} follows a roughly normal distribution",
        confidence=base,
        visualization=Visualization(type=VisualizationType.HISTOGRAM, config={"column": column}),
    )
    summary = (
        f"Across {dataset.row_count} records, the distribution of {column} appears roughly normal with most "
        f"values concentrated around the mean. There are a few outliers on both ends that warrant closer inspection."
    )
    return pattern, summary


PATTERN_BRANCHES: Dict[Intent, PatternBranch] = {
    Intent.TREND: PatternBranch(Intent.TREND, 1, _trend),
    Intent.CORRELATION: PatternBranch(Intent.CORRELATION, 2, _correlation),
    Intent.DISTRIBUTION: PatternBranch(Intent.DISTRIBUTION, 1, _distribution),
}


def _fallback(dataset: Dataset, base: int, signals: IntentSignals) -> Tuple[Pattern, str]:
    description = "General data overview available"
    if signals.comparison:
        description = "Comparison requested; general data overview available"
    pattern = Pattern(type=PatternType.COMPARISON, description=description, confidence=base - 20)
    summary = (
        f"Based on {dataset.row_count} records across {len(dataset.headers)} columns, the data shows "
        f"interesting patterns. {len(dataset.summary.numeric_columns)} numeric columns are available "
        f"for quantitative analysis."
    )
    return pattern, summary


def select_pattern(signals: IntentSignals, dataset: Dataset, base: int) -> Tuple[Pattern, str, Optional[str]]:
    """First branch in priority order whose intent fired and whose numeric-column need is met.

    Returns (pattern, summary, extra warning or None).
    """
    numeric = len(dataset.summary.numeric_columns)
    for intent in PATTERN_PRIORITY:
        branch = PATTERN_BRANCHES[intent]
        if signals.has(intent) and numeric >= branch.min_numeric:
            pattern, summary = branch.build(dataset, base)
            return pattern, summary, None

    pattern, summary = _fallback(dataset, base, signals)
    return pattern, summary, VAGUE_QUESTION_WARNING


def local_insight(question: str, dataset: Dataset) -> Insight:
    """The full heuristic answer; never calls out and never raises on a valid Dataset."""
    signals = classify_intent(question)
    confidence, warnings = base_confidence(dataset)
    pattern, summary, extra = select_pattern(signals, dataset, confidence)
    if extra:
        warnings.append(extra)

    logger.info(
        f"Local insight: intents={[i.value for i in signals.detected]} "
        f"pattern={pattern.type.value} confidence={confidence}"
    )
    return Insight(
        summary=summary,
        confidence=confidence,
        patterns=[pattern],
        suggested_viz=pattern.visualization.type if pattern.visualization else None,
        warnings=warnings or None,
        metadata=InsightMetadata(model_used=LOCAL_MODEL_ID),
    )
