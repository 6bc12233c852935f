"""Build the immutable, schema-annotated Dataset from raw records"""
import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Sequence

from .models import CellValue, ColumnType, Dataset, Summary
from .normalizer import is_missing, normalize_rows
from .schema import infer_schema

logger = logging.getLogger(__name__)


def count_missing(headers: Sequence[str], rows: Sequence[Dict[str, CellValue]]) -> int:
    return sum(1 for row in rows for h in headers if is_missing(row.get(h)))


def summarize(headers: List[str], rows: List[Dict[str, CellValue]], column_types: Dict[str, ColumnType]) -> Summary:
    return Summary(
        total_rows=len(rows),
        total_columns=len(headers),
        missing_values=count_missing(headers, rows),
        numeric_columns=[h for h in headers if column_types[h] == ColumnType.NUMBER],
        text_columns=[h for h in headers if column_types[h] == ColumnType.STRING],
        date_columns=[h for h in headers if column_types[h] == ColumnType.DATE],
    )


def build_dataset(records: Sequence[Mapping[str, Any]]) -> Dataset:
    """Normalize, type and summarize raw records.

    Raises EmptyInputError / MalformedInputError; nothing partial is returned.
    """
    headers, rows = normalize_rows(records)
    column_types = infer_schema(headers, rows)
    summary = summarize(headers, rows, column_types)

    dataset = Dataset(
        headers=headers,
        rows=rows,
        row_count=len(rows),
        column_types=column_types,
        summary=summary,
    )
    logger.info(
        f"Dataset built: {dataset.row_count} rows, {len(headers)} columns, "
        f"{summary.missing_values} missing cells"
    )
    return dataset
