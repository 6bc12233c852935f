"""Pydantic models shared by ingestion, quality checks and insight generation"""
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Loosely-typed scalar found in a raw record once it crossed the ingestion boundary
CellValue = Union[None, bool, int, float, str]


class ColumnType(str, Enum):
    NUMBER = "number"
    DATE = "date"
    STRING = "string"


class IssueType(str, Enum):
    MISSING = "missing"
    OUTLIER = "outlier"
    DUPLICATE = "duplicate"  # reserved, no rule produces it yet
    INVALID = "invalid"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PatternType(str, Enum):
    TREND = "trend"
    CORRELATION = "correlation"
    OUTLIER = "outlier"
    DISTRIBUTION = "distribution"
    COMPARISON = "comparison"


class VisualizationType(str, Enum):
    LINE = "line"
    BAR = "bar"
    SCATTER = "scatter"
    AREA = "area"
    PIE = "pie"
    HISTOGRAM = "histogram"


class WireModel(BaseModel):
    """snake_case attributes, camelCase on the wire; both accepted on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Summary(WireModel):
    total_rows: int
    total_columns: int
    missing_values: int
    numeric_columns: List[str]
    text_columns: List[str]
    date_columns: List[str]


class Dataset(WireModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    headers: List[str]
    rows: List[Dict[str, CellValue]]
    row_count: int
    column_types: Dict[str, ColumnType]
    summary: Summary


class QualityIssue(WireModel):
    type: IssueType
    severity: Severity
    description: str
    affected_rows: Optional[List[int]] = None
    affected_columns: Optional[List[str]] = None


class Visualization(WireModel):
    type: VisualizationType
    config: Dict[str, Any] = Field(default_factory=dict)


class Pattern(WireModel):
    type: PatternType
    description: str
    confidence: float = Field(ge=0, le=100)
    data_points: Optional[List[Any]] = None
    visualization: Optional[Visualization] = None


class InsightMetadata(WireModel):
    tokens_used: Optional[int] = None
    processing_time: Optional[float] = None  # milliseconds
    model_used: Optional[str] = None


class Insight(WireModel):
    summary: str
    confidence: float = Field(ge=0, le=100)
    patterns: List[Pattern] = Field(default_factory=list)
    suggested_viz: Optional[VisualizationType] = None
    warnings: Optional[List[str]] = None
    metadata: InsightMetadata = Field(default_factory=InsightMetadata)


class ColumnSchema(WireModel):
    name: str
    type: ColumnType


class DigestSchema(WireModel):
    columns: List[ColumnSchema]
    row_count: int
    summary: Summary


class ContextDigest(WireModel):
    # "schema" clashes with a BaseModel attribute, so it only lives on the wire
    structure: DigestSchema = Field(alias="schema")
    sample_rows: List[Dict[str, CellValue]]
