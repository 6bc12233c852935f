"""Caller-owned session state: active dataset, question history, feedback"""
import uuid
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import Field

from ingest.models import Dataset, Insight, WireModel

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Question(WireModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    text: str
    timestamp: datetime = Field(default_factory=_now)
    response: Optional[Insight] = None
    refinements: List["Question"] = Field(default_factory=list)
    generation: int = Field(default=0, exclude=True)
    parent_id: Optional[str] = Field(default=None, exclude=True)


Question.model_rebuild()


class FeedbackType(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    UNCLEAR = "unclear"


class FeedbackItem(WireModel):
    question_id: str
    type: FeedbackType
    comment: Optional[str] = None
    timestamp: datetime = Field(default_factory=_now)


@dataclass
class Session:
    """Single active dataset per session; replacing it drops the history."""
    dataset: Optional[Dataset] = None
    history: List[Question] = field(default_factory=list)
    feedback: List[FeedbackItem] = field(default_factory=list)
    generation: int = 0

    def load(self, dataset: Dataset) -> None:
        self.dataset = dataset
        self.history = []
        self.feedback = []
        self.generation += 1
        logger.info(f"Session dataset replaced (generation {self.generation}, {dataset.row_count} rows)")

    def begin_question(self, text: str, parent_id: Optional[str] = None) -> Question:
        """Stamp a new question with the current dataset generation."""
        if self.dataset is None:
            raise LookupError("No dataset loaded")
        if parent_id and self.find(parent_id) is None:
            raise LookupError(f"Unknown question {parent_id}")
        return Question(text=text, generation=self.generation, parent_id=parent_id)

    def complete(self, question: Question, insight: Insight) -> bool:
        """Attach the answer unless the dataset changed while it was computed."""
        if question.generation != self.generation:
            logger.info(f"Discarding stale insight for question {question.id}")
            return False
        question.response = insight
        parent = self.find(question.parent_id) if question.parent_id else None
        if parent is not None:
            parent.refinements.append(question)
        else:
            self.history.append(question)
        return True

    def find(self, question_id: str) -> Optional[Question]:
        """Search top-level questions and their refinements, depth first."""
        pending = list(self.history)
        while pending:
            question = pending.pop(0)
            if question.id == question_id:
                return question
            pending[:0] = question.refinements
        return None

    def add_feedback(self, question_id: str, feedback_type: FeedbackType, comment: Optional[str] = None) -> FeedbackItem:
        if self.find(question_id) is None:
            raise LookupError(f"Unknown question {question_id}")
        item = FeedbackItem(question_id=question_id, type=feedback_type, comment=comment)
        self.feedback.append(item)
        return item
