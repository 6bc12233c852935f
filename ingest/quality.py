"""Data quality checks over a finished Dataset"""
import logging
from typing import List, Optional, Tuple

import numpy as np

from .models import Dataset, IssueType, QualityIssue, Severity
from .schema import to_number

logger = logging.getLogger(__name__)


class QualityAssessor:
    """Reports missing data, small samples and IQR outliers, in that order."""

    def __init__(self):
        self.missing_pct_threshold = 5.0
        self.missing_pct_high = 20.0
        self.min_rows = 10
        self.outlier_ratio_threshold = 0.05

    def assess(self, dataset: Dataset) -> List[QualityIssue]:
        issues: List[QualityIssue] = []

        missing = self._check_missing(dataset)
        if missing:
            issues.append(missing)

        if dataset.row_count < self.min_rows:
            issues.append(QualityIssue(
                type=IssueType.INVALID,
                severity=Severity.HIGH,
                description=f"Sample size is very small (< {self.min_rows} rows). Insights may not be reliable.",
            ))

        for column in dataset.summary.numeric_columns:
            outlier = self._check_outliers(dataset, column)
            if outlier:
                issues.append(outlier)

        logger.info(f"Quality assessment found {len(issues)} issue(s)")
        return issues

    def _check_missing(self, dataset: Dataset) -> Optional[QualityIssue]:
        cells = dataset.row_count * len(dataset.headers)
        if cells == 0:
            return None
        pct = dataset.summary.missing_values / cells * 100
        if pct <= self.missing_pct_threshold:
            return None
        return QualityIssue(
            type=IssueType.MISSING,
            severity=Severity.HIGH if pct > self.missing_pct_high else Severity.MEDIUM,
            description=f"{pct:.1f}% of data points are missing",
        )

    def _check_outliers(self, dataset: Dataset, column: str) -> Optional[QualityIssue]:
        positions, values = _numeric_values(dataset, column)
        if values.size == 0:
            return None

        mask = iqr_outlier_mask(values)
        count = int(mask.sum())
        ratio = count / values.size
        if count == 0 or ratio <= self.outlier_ratio_threshold:
            return None

        return QualityIssue(
            type=IssueType.OUTLIER,
            severity=Severity.MEDIUM,
            description=f"{column} has {count} outliers ({ratio * 100:.1f}%)",
            affected_rows=[int(p) for p in positions[mask]],
            affected_columns=[column],
        )


def _numeric_values(dataset: Dataset, column: str) -> Tuple[np.ndarray, np.ndarray]:
    """Row positions and values of the cells in column that coerce to numbers."""
    pairs = [(i, to_number(row.get(column))) for i, row in enumerate(dataset.rows)]
    pairs = [(i, v) for i, v in pairs if v is not None]
    positions = np.array([i for i, _ in pairs], dtype=int)
    values = np.array([v for _, v in pairs], dtype=float)
    return positions, values


def iqr_outlier_mask(values: np.ndarray) -> np.ndarray:
    """Tukey fences with quartiles taken at floor(n*0.25) / floor(n*0.75) of the sorted values."""
    ordered = np.sort(values)
    n = ordered.size
    q1 = ordered[int(n * 0.25)]
    q3 = ordered[int(n * 0.75)]
    iqr = q3 - q1
    lower = q1 - 1.5 * iqr
    upper = q3 + 1.5 * iqr
    return (values < lower) | (values > upper)


def assess_quality(dataset: Dataset) -> List[QualityIssue]:
    return QualityAssessor().assess(dataset)
