"""Size-bounded structural digest of a Dataset for the insight engine"""
from .models import ColumnSchema, ContextDigest, Dataset, DigestSchema

HEAD_ROWS = 5
TAIL_ROWS = 5
TAIL_MIN_ROWS = 10  # tail rows are only added above this many rows


def build_context(dataset: Dataset) -> ContextDigest:
    """Schema, row count and summary plus the first and last few rows."""
    sample = list(dataset.rows[:HEAD_ROWS])
    if dataset.row_count > TAIL_MIN_ROWS:
        sample += dataset.rows[-TAIL_ROWS:]

    return ContextDigest(
        structure=DigestSchema(
            columns=[ColumnSchema(name=h, type=dataset.column_types[h]) for h in dataset.headers],
            row_count=dataset.row_count,
            summary=dataset.summary,
        ),
        sample_rows=[dict(row) for row in sample],
    )


def serialize_context(dataset: Dataset) -> str:
    return build_context(dataset).model_dump_json(by_alias=True, indent=2)


def parse_context(text: str) -> ContextDigest:
    return ContextDigest.model_validate_json(text)
