"""Business logic services for the web backend"""
import os
import re
import logging
from typing import Optional

from fastapi import UploadFile

from ingest import Dataset, assess_quality, ingest_file, ingest_text
from insight import InsightEngine, Question, Session
from .models import DatasetInfo

logger = logging.getLogger(__name__)

class StaleQuestionError(RuntimeError):
    """The answer belongs to a dataset that is no longer active."""

class DatasetService:
    def __init__(self, session: Session):
        self.session = session

    def sanitize_filename(self, filename: str) -> str:
        """Sanitize uploaded filename"""
        # Remove path components
        filename = os.path.basename(filename or "")
        # Remove or replace dangerous characters
        filename = re.sub(r'[^\w\-_\.]', '_', filename)
        # Ensure reasonable length
        if len(filename) > 100:
            name, ext = os.path.splitext(filename)
            filename = name[:90] + ext
        return filename

    async def ingest_upload(self, file: UploadFile) -> DatasetInfo:
        """Parse an uploaded file and make it the session's active dataset"""
        filename = self.sanitize_filename(file.filename)
        content = await file.read()
        dataset = ingest_file(filename, content)
        self.session.load(dataset)
        return self.describe(dataset, source=filename)

    def ingest_text(self, text: str) -> DatasetInfo:
        dataset = ingest_text(text)
        self.session.load(dataset)
        return self.describe(dataset, source="text")

    def current(self) -> Dataset:
        if self.session.dataset is None:
            raise LookupError("No dataset loaded")
        return self.session.dataset

    def describe(self, dataset: Dataset, source: Optional[str] = None) -> DatasetInfo:
        return DatasetInfo(
            source=source,
            row_count=dataset.row_count,
            headers=dataset.headers,
            column_types=dataset.column_types,
            summary=dataset.summary,
            quality_issues=assess_quality(dataset),
        )

class AnalysisService:
    def __init__(self, engine: InsightEngine, session: Session):
        self.engine = engine
        self.session = session

    async def ask(self, text: str, parent_id: Optional[str] = None) -> Question:
        """Answer one question against the dataset that was active when it was asked"""
        question = self.session.begin_question(text, parent_id=parent_id)
        dataset = self.session.dataset
        resolution = await self.engine.aresolve(text, dataset)
        logger.info(f"Question {question.id} resolved via {resolution.kind.value}")
        if not self.session.complete(question, resolution.insight):
            raise StaleQuestionError(f"Dataset was replaced while answering question {question.id}")
        return question
