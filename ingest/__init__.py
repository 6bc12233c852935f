"""Ingestion: raw records to typed, quality-annotated datasets"""
from .errors import IngestionError, EmptyInputError, MalformedInputError
from .models import (
    CellValue, ColumnType, Dataset, Summary, QualityIssue, IssueType, Severity,
    Pattern, PatternType, Visualization, VisualizationType, Insight, InsightMetadata,
    ContextDigest,
)
from .dataset import build_dataset
from .quality import QualityAssessor, assess_quality
from .context import build_context, serialize_context, parse_context
from .loaders import ingest_file, ingest_records, ingest_text, load_file

__all__ = [
    'IngestionError', 'EmptyInputError', 'MalformedInputError',
    'CellValue', 'ColumnType', 'Dataset', 'Summary', 'QualityIssue', 'IssueType', 'Severity',
    'Pattern', 'PatternType', 'Visualization', 'VisualizationType', 'Insight', 'InsightMetadata',
    'ContextDigest',
    'build_dataset', 'QualityAssessor', 'assess_quality',
    'build_context', 'serialize_context', 'parse_context',
    'ingest_file', 'ingest_records', 'ingest_text', 'load_file',
]
