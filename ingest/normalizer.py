"""Row normalization: one header list, every row exposes every header"""
import math
import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Dict, List, Sequence, Tuple

from .errors import EmptyInputError, MalformedInputError
from .models import CellValue

logger = logging.getLogger(__name__)


def to_cell(value: Any) -> CellValue:
    """Coerce whatever a decoder produced into a CellValue."""
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) else value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    # numpy / pandas scalars expose .item()
    if hasattr(value, "item"):
        try:
            return to_cell(value.item())
        except (TypeError, ValueError):
            pass
    return str(value)


def is_missing(value: CellValue) -> bool:
    """Null and empty-string cells both count as missing."""
    if value is None or value == "":
        return True
    return isinstance(value, float) and math.isnan(value)


def normalize_rows(records: Sequence[Mapping[str, Any]]) -> Tuple[List[str], List[Dict[str, CellValue]]]:
    """Return (headers, rows) where headers are the first record's keys.

    Later records may carry extra keys (dropped) or lack some (filled with None).
    The caller's records are never modified.
    """
    if not records:
        raise EmptyInputError("No data found")

    first = records[0]
    if not isinstance(first, Mapping):
        raise MalformedInputError(f"Expected records as mappings, got {type(first).__name__}")

    headers = [str(key) for key in first.keys()]
    if not headers:
        raise MalformedInputError("First record has no columns")

    rows: List[Dict[str, CellValue]] = []
    for position, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise MalformedInputError(f"Record {position} is not a mapping ({type(record).__name__})")
        keyed = {str(k): v for k, v in record.items()}
        rows.append({h: to_cell(keyed.get(h)) for h in headers})

    logger.debug(f"Normalized {len(rows)} rows over {len(headers)} columns")
    return headers, rows
