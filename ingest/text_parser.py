"""Turn unstructured text (document extraction, OCR output) into raw records"""
import io
import logging
from typing import Any, Dict, List

import pandas as pd

from .errors import EmptyInputError, MalformedInputError

logger = logging.getLogger(__name__)

DELIMITER_CANDIDATES = [",", "\t", "|", ";"]

# Only empty cells are missing; tokens like "NA" or "null" stay as text
NA_OPTIONS = {"keep_default_na": False, "na_values": [""]}


def detect_delimiter(line: str) -> str:
    """Candidate that splits the line into the most fields; earlier candidates win ties."""
    best, max_fields = DELIMITER_CANDIDATES[0], 0
    for delimiter in DELIMITER_CANDIDATES:
        fields = len(line.split(delimiter))
        if fields > max_fields:
            best, max_fields = delimiter, fields
    return best


def frame_to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Records with NaN replaced by None and numpy scalars unwrapped."""
    df = df.astype(object).where(pd.notna(df), None)
    df.columns = [str(c) for c in df.columns]
    return df.to_dict("records")


def parse_text_table(text: str) -> List[Dict[str, Any]]:
    """Re-tokenize delimited text with the delimiter detected on its first line."""
    lines = [line for line in (text or "").splitlines() if line.strip()]
    if len(lines) < 2:
        raise MalformedInputError(
            "Could not find enough data. Please ensure the file contains tabular information."
        )

    delimiter = detect_delimiter(lines[0])
    logger.info(f"Detected delimiter {delimiter!r} over {len(lines)} lines")

    try:
        df = pd.read_csv(
            io.StringIO("\n".join(lines)), sep=delimiter, engine="python", skipinitialspace=True,
            index_col=False, **NA_OPTIONS,
        )
    except pd.errors.EmptyDataError as e:
        raise EmptyInputError("No data could be extracted") from e
    except (pd.errors.ParserError, ValueError) as e:
        raise MalformedInputError(f"Could not tokenize text with delimiter {delimiter!r}: {e}") from e

    if df.empty:
        raise EmptyInputError("No data could be extracted")
    return frame_to_records(df)
