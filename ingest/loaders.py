"""Source-format loaders producing raw records, and one-call ingestion"""
import io
import json
import logging
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence, Union

import pandas as pd

from .dataset import build_dataset
from .errors import EmptyInputError, MalformedInputError
from .models import Dataset
from .text_parser import NA_OPTIONS, frame_to_records, parse_text_table

logger = logging.getLogger(__name__)

Source = Union[str, Path, bytes, io.IOBase]

SUPPORTED_EXTENSIONS = (".csv", ".json", ".xlsx", ".txt")


def _as_buffer(source: Source):
    if isinstance(source, bytes):
        return io.BytesIO(source)
    return source


def load_csv(source: Source) -> List[Dict[str, Any]]:
    """Header row plus typed values; blank lines skipped."""
    try:
        df = pd.read_csv(_as_buffer(source), skip_blank_lines=True, index_col=False, **NA_OPTIONS)
    except pd.errors.EmptyDataError as e:
        raise EmptyInputError("No data found") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise MalformedInputError(f"Invalid CSV: {e}") from e
    return frame_to_records(df)


def load_json(text: Union[str, bytes]) -> List[Dict[str, Any]]:
    """A JSON array of objects, or a single object treated as one row."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedInputError("Invalid JSON format") from e

    rows = data if isinstance(data, list) else [data]
    if any(not isinstance(row, dict) for row in rows):
        raise MalformedInputError("Invalid JSON format")
    return rows


def load_excel(source: Source) -> List[Dict[str, Any]]:
    """First sheet only; empty cells become None."""
    try:
        df = pd.read_excel(_as_buffer(source), sheet_name=0, engine="openpyxl", **NA_OPTIONS)
    except (ValueError, KeyError, OSError, zipfile.BadZipFile) as e:
        raise MalformedInputError(f"Failed to read Excel file: {e}") from e
    if df.empty:
        raise EmptyInputError("Excel file is empty")
    return frame_to_records(df)


def load_text(text: Union[str, bytes]) -> List[Dict[str, Any]]:
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    return parse_text_table(text)


def load_file(filename: str, content: bytes) -> List[Dict[str, Any]]:
    """Dispatch on the file extension."""
    suffix = Path(filename).suffix.lower()
    if suffix == ".csv":
        return load_csv(content)
    if suffix == ".json":
        return load_json(content)
    if suffix == ".xlsx":
        return load_excel(content)
    if suffix == ".txt":
        return load_text(content)
    raise MalformedInputError(
        f"Unsupported file type {suffix or filename!r}; expected one of {', '.join(SUPPORTED_EXTENSIONS)}"
    )


def ingest_records(records: Sequence[Mapping[str, Any]]) -> Dataset:
    return build_dataset(records)


def ingest_file(filename: str, content: bytes) -> Dataset:
    records = load_file(filename, content)
    logger.info(f"Loaded {len(records)} records from {filename}")
    return build_dataset(records)


def ingest_text(text: str) -> Dataset:
    return build_dataset(parse_text_table(text))
