"""Pydantic models for API requests and responses"""
from typing import Dict, List, Optional
from pydantic import BaseModel

from ingest.models import ColumnType, QualityIssue, Summary, WireModel
from insight.session import FeedbackType

class TextIngestRequest(BaseModel):
    text: str

class QuestionRequest(BaseModel):
    question: str
    parent_id: Optional[str] = None

class FeedbackRequest(BaseModel):
    question_id: str
    type: FeedbackType
    comment: Optional[str] = None

class DatasetInfo(WireModel):
    source: Optional[str] = None
    row_count: int
    headers: List[str]
    column_types: Dict[str, ColumnType]
    summary: Summary
    quality_issues: List[QualityIssue]
