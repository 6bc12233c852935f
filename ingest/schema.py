"""Column type inference over a bounded sample of each column"""
import re
import math
import warnings
import logging
from typing import Dict, List, Optional, Sequence

import pandas as pd

from .models import CellValue, ColumnType
from .normalizer import is_missing

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 10

# A parseable string is only a date if it also looks like one
_DATE_SHAPE = re.compile(r"\d{4}-\d{2}-\d{2}|\d{1,2}/\d{1,2}/\d{2,4}")


def to_number(value: CellValue) -> Optional[float]:
    """Finite float for numeric cells and numeric strings, else None."""
    if value is None:
        return None
    if isinstance(value, (bool, int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        # float() also accepts digit separators like "1_000"
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def is_date_like(value: CellValue) -> bool:
    if not isinstance(value, str) or not _DATE_SHAPE.search(value):
        return False
    with warnings.catch_warnings():
        # pandas warns when it has to guess the format of a single string
        warnings.simplefilter("ignore")
        try:
            parsed = pd.to_datetime(value, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return False
    return not pd.isna(parsed)


def infer_column_type(sample: Sequence[CellValue]) -> ColumnType:
    """Classify a column from its sampled, non-missing values.

    An empty sample would vacuously pass the numeric test; such all-null
    columns are reported as strings instead.
    """
    if not sample:
        return ColumnType.STRING
    if all(to_number(v) is not None for v in sample):
        return ColumnType.NUMBER
    if any(is_date_like(v) for v in sample):
        return ColumnType.DATE
    return ColumnType.STRING


def column_sample(rows: Sequence[Dict[str, CellValue]], header: str, size: int = SAMPLE_SIZE) -> List[CellValue]:
    return [row.get(header) for row in rows[:size] if not is_missing(row.get(header))]


def infer_schema(headers: Sequence[str], rows: Sequence[Dict[str, CellValue]]) -> Dict[str, ColumnType]:
    """Map every header to its inferred ColumnType, in header order."""
    column_types = {h: infer_column_type(column_sample(rows, h)) for h in headers}
    logger.debug("Inferred column types: %s", [t.value for t in column_types.values()])
    return column_types
