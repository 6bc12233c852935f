"""FastAPI backend for the Insight Engine"""
import sys
import logging
from pathlib import Path
from typing import Dict, Any, List

from fastapi import FastAPI, HTTPException, UploadFile, File
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Add parent directories to path for imports
current_dir = Path(__file__).parent
root_dir = current_dir.parent.parent
sys.path.insert(0, str(root_dir))

from web.backend.models import TextIngestRequest, QuestionRequest, FeedbackRequest
from web.backend.services import AnalysisService, DatasetService, StaleQuestionError
from ingest import IngestionError, assess_quality, serialize_context
from insight import InsightEngine, Session, Settings, chart_data, confidence_label
from insight.prompts import SUGGESTED_QUESTIONS

# Load environment variables
load_dotenv()

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(title="Insight Engine", version="1.0.0")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services; one session per process
settings = Settings.from_env()
session = Session()
engine = InsightEngine(settings=settings)
dataset_service = DatasetService(session)
analysis_service = AnalysisService(engine, session)

def _require_dataset():
    try:
        return dataset_service.current()
    except LookupError:
        raise HTTPException(status_code=404, detail="No dataset loaded")

@app.get("/")
async def root():
    """API info"""
    return {
        "message": "Insight Engine API",
        "version": "1.0.0",
        "docs_url": "/docs",
        "remote_model": settings.model_name if engine.llm is not None else None,
    }

@app.post("/datasets/upload")
async def upload_dataset(file: UploadFile = File(...)) -> Dict[str, Any]:
    """Upload a CSV, JSON, Excel or text file and make it the active dataset"""
    try:
        info = await dataset_service.ingest_upload(file)
    except IngestionError as e:
        logger.error(f"Upload failed: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Dataset uploaded: {info.source} ({info.row_count} rows)")
    return info.model_dump(mode="json", by_alias=True)

@app.post("/datasets/text")
async def ingest_text(request: TextIngestRequest) -> Dict[str, Any]:
    """Ingest raw text from document extraction or OCR"""
    try:
        info = dataset_service.ingest_text(request.text)
    except IngestionError as e:
        logger.error(f"Text ingestion failed: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return info.model_dump(mode="json", by_alias=True)

@app.get("/dataset")
async def get_dataset() -> Dict[str, Any]:
    dataset = _require_dataset()
    return dataset_service.describe(dataset).model_dump(mode="json", by_alias=True)

@app.get("/dataset/quality")
async def get_quality() -> List[Dict[str, Any]]:
    dataset = _require_dataset()
    return [issue.to_wire() for issue in assess_quality(dataset)]

@app.get("/dataset/context")
async def get_context() -> Dict[str, str]:
    """Serialized digest, as sent to the remote insight service"""
    dataset = _require_dataset()
    return {"context": serialize_context(dataset)}

@app.get("/questions/suggestions")
async def get_suggestions() -> List[str]:
    return SUGGESTED_QUESTIONS

@app.post("/questions")
async def ask_question(request: QuestionRequest) -> Dict[str, Any]:
    """Answer a question about the active dataset; always yields an insight"""
    _require_dataset()
    if not request.question.strip():
        raise HTTPException(status_code=400, detail="Question is empty")

    try:
        question = await analysis_service.ask(request.question.strip(), parent_id=request.parent_id)
    except StaleQuestionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))

    payload = question.to_wire()
    payload["confidenceLabel"] = confidence_label(question.response.confidence)
    return payload

@app.get("/questions")
async def list_questions() -> List[Dict[str, Any]]:
    return [q.to_wire() for q in session.history]

@app.get("/questions/{question_id}/chart")
async def get_chart(question_id: str) -> Dict[str, Any]:
    """Chart points for the first pattern's visualization of an answered question"""
    dataset = _require_dataset()
    question = session.find(question_id)
    if question is None or question.response is None:
        raise HTTPException(status_code=404, detail="Question not found")

    patterns = question.response.patterns
    visualization = patterns[0].visualization if patterns else None
    return {
        "type": visualization.type.value if visualization else None,
        "config": visualization.config if visualization else {},
        "points": chart_data(dataset, visualization),
    }

@app.post("/feedback")
async def add_feedback(request: FeedbackRequest) -> Dict[str, Any]:
    try:
        item = session.add_feedback(request.question_id, request.type, request.comment)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return item.to_wire()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
