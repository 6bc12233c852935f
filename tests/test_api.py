"""Tests for the HTTP backend"""
import pytest
from fastapi.testclient import TestClient

from web.backend import main

def _sales_csv() -> bytes:
    lines = ["month,region,revenue"]
    lines += [f"2024-{m:02d}-01,{'north' if m % 2 else 'south'},{100 + m * 5}" for m in range(1, 13)]
    return ("\n".join(lines) + "\n").encode()

@pytest.fixture
def client():
    # fresh session, local heuristic only
    main.session.dataset = None
    main.session.history = []
    main.session.feedback = []
    main.engine.llm = None
    return TestClient(main.app)

def _upload(client, name="sales.csv", content=None):
    return client.post("/datasets/upload", files={"file": (name, content or _sales_csv(), "text/csv")})

def test_root(client):
    body = client.get("/").json()
    assert body["message"] == "Insight Engine API"
    assert body["remote_model"] is None

def test_no_dataset_is_404(client):
    assert client.get("/dataset").status_code == 404
    assert client.post("/questions", json={"question": "trend?"}).status_code == 404

def test_upload_csv(client):
    response = _upload(client)
    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "sales.csv"
    assert body["rowCount"] == 12
    assert body["columnTypes"] == {"month": "date", "region": "string", "revenue": "number"}
    assert body["summary"]["numericColumns"] == ["revenue"]

def test_upload_rejects_unsupported_file(client):
    response = _upload(client, name="notes.pdf", content=b"%PDF")
    assert response.status_code == 400

def test_upload_corrupt_spreadsheet_is_400(client):
    response = _upload(client, name="bad.xlsx", content=b"PK\x03\x04" + b"garbage" * 20)
    assert response.status_code == 400

def test_text_ingestion(client):
    response = client.post("/datasets/text", json={"text": "a|b\n1|2\n3|4\n"})
    assert response.status_code == 200
    assert response.json()["rowCount"] == 2

def test_quality_for_small_dataset(client):
    client.post("/datasets/text", json={"text": "a,b\n1,2\n3,4\n"})
    issues = client.get("/dataset/quality").json()
    assert [i["type"] for i in issues] == ["invalid"]

def test_context_digest(client):
    _upload(client)
    context = client.get("/dataset/context").json()["context"]
    assert '"schema"' in context and '"sampleRows"' in context

def test_suggestions(client):
    suggestions = client.get("/questions/suggestions").json()
    assert len(suggestions) == 5

def test_ask_question_and_chart(client):
    _upload(client)
    response = client.post("/questions", json={"question": "What is the revenue trend?"})
    assert response.status_code == 200
    body = response.json()
    assert body["response"]["metadata"]["modelUsed"] == "local-heuristic"
    assert body["response"]["patterns"][0]["type"] == "trend"
    assert body["confidenceLabel"] == "Low Confidence"

    history = client.get("/questions").json()
    assert [q["id"] for q in history] == [body["id"]]

    chart = client.get(f"/questions/{body['id']}/chart").json()
    assert chart["type"] == "line"
    assert len(chart["points"]) == 12

def test_empty_question_rejected(client):
    _upload(client)
    assert client.post("/questions", json={"question": "   "}).status_code == 400

def test_feedback(client):
    _upload(client)
    question_id = client.post("/questions", json={"question": "compare regions"}).json()["id"]

    response = client.post("/feedback", json={"question_id": question_id, "type": "correct"})
    assert response.status_code == 200
    assert response.json()["questionId"] == question_id

    assert client.post("/feedback", json={"question_id": "nope", "type": "unclear"}).status_code == 404
