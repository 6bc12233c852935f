"""Insight engine core module"""
from .config import Settings
from .engine import InsightEngine, Resolution, ResolutionKind
from .heuristics import LOCAL_MODEL_ID, local_insight, confidence_label
from .intent import Intent, IntentSignals, classify_intent
from .session import Session, Question, FeedbackItem, FeedbackType
from .charts import chart_data

__all__ = [
    'Settings', 'InsightEngine', 'Resolution', 'ResolutionKind',
    'LOCAL_MODEL_ID', 'local_insight', 'confidence_label',
    'Intent', 'IntentSignals', 'classify_intent',
    'Session', 'Question', 'FeedbackItem', 'FeedbackType', 'chart_data',
]
