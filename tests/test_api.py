"""
Tests for the FastAPI routes.
"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from notetube.api.app import app
from notetube.db import crud
from notetube.db.database import get_db
from notetube.exceptions import NoteGenerationError, StudyToolError
from notetube.models.schemas import Flashcard, QuizQuestion, Recommendation, StatusEvent

HEADERS = {"X-User-Id": "1"}


class FakePipeline:
    """Replays canned events and records requests."""

    def __init__(self, events):
        self.events = events
        self.requests = []

    async def run(self, request):
        self.requests.append(request)
        for event in self.events:
            yield event


@pytest.fixture
def study_tools():
    tools = MagicMock()
    tools.chat = AsyncMock(return_value="Entropy measures disorder.")
    tools.generate_flashcards = AsyncMock(return_value=[Flashcard(front="Q", back="A")])
    tools.generate_quiz = AsyncMock(
        return_value=[QuizQuestion(question="Q", options=["a", "b", "c", "d"], correctAnswer=1)]
    )
    tools.synthesize_notes = AsyncMock(return_value="# Master Guide")
    tools.recommend = AsyncMock(return_value=[Recommendation(query="entropy")])
    return tools


@pytest.fixture
def fake_pipeline(video_info):
    return FakePipeline([
        StatusEvent.status("Searching for video metadata..."),
        StatusEvent.status("Retrieving transcript..."),
        StatusEvent.done(video_info, "# Notes"),
    ])


@pytest.fixture
def client(session_factory, fake_pipeline, study_tools):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.services = SimpleNamespace(pipeline=fake_pipeline, study_tools=study_tools)
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.services = None


def sse_events(response):
    return [json.loads(frame[len("data: "):]) for frame in response.text.split("\n\n") if frame]


def add_note(db, user_id=1, title="Thermo", video_id="dQw4w9WgXcQ"):
    return crud.create_note(db, user_id=user_id, video_id=video_id, title=title, notes=f"notes for {title}")


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["name"] == "NoteTube AI"
    assert "X-Process-Time" in response.headers


def test_process_video_streams_events(client, fake_pipeline):
    response = client.post(
        "/api/v1/process-video",
        json={"url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42"},
        headers=HEADERS,
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    events = sse_events(response)
    assert [e["type"] for e in events] == ["status", "status", "done"]
    assert events[-1]["notes"] == "# Notes"
    assert events[-1]["video"]["id"] == "dQw4w9WgXcQ"
    assert fake_pipeline.requests[0].video_id == "dQw4w9WgXcQ"
    assert fake_pipeline.requests[0].user_id == 1


def test_process_video_error_frame(client, fake_pipeline):
    fake_pipeline.events = [StatusEvent.status("Searching for video metadata..."), StatusEvent.error("Video not found")]

    response = client.post("/api/v1/process-video", json={"video_id": "dQw4w9WgXcQ"}, headers=HEADERS)

    assert sse_events(response)[-1] == {"type": "error", "message": "Video not found"}


def test_process_video_rejects_bad_url(client):
    response = client.post("/api/v1/process-video", json={"url": "https://example.com/video"}, headers=HEADERS)
    assert response.status_code == 400


def test_missing_user_header(client):
    response = client.post("/api/v1/process-video", json={"video_id": "dQw4w9WgXcQ"})
    assert response.status_code == 401


def test_services_not_configured(client):
    app.state.services = None
    response = client.post("/api/v1/process-video", json={"video_id": "dQw4w9WgXcQ"}, headers=HEADERS)
    assert response.status_code == 503


def test_chat_uses_preferences(client, study_tools, db):
    crud.upsert_preferences(db, 1, ai_tone="witty")

    response = client.post(
        "/api/v1/chat",
        json={"messages": [{"role": "user", "content": "What is entropy?"}], "context": "notes", "video_title": "Thermo"},
        headers=HEADERS,
    )

    assert response.status_code == 200
    assert response.json() == {"reply": "Entropy measures disorder."}
    assert study_tools.chat.await_args.kwargs["preferences"].ai_tone == "witty"


def test_chat_failure(client, study_tools):
    study_tools.chat.side_effect = NoteGenerationError("chat response")

    response = client.post(
        "/api/v1/chat", json={"messages": [{"role": "user", "content": "hi"}]}, headers=HEADERS
    )

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to generate chat response"


def test_flashcards(client):
    response = client.post("/api/v1/generate-flashcards", json={"notes": "n", "video_title": "T"}, headers=HEADERS)
    assert response.json() == {"flashcards": [{"front": "Q", "back": "A"}]}


def test_flashcards_parse_failure(client, study_tools):
    study_tools.generate_flashcards.side_effect = StudyToolError("flashcards", "not json")

    response = client.post("/api/v1/generate-flashcards", json={"notes": "n"}, headers=HEADERS)

    assert response.status_code == 500


def test_quiz_is_personalised_with_recent_mistakes(client, study_tools):
    for i in range(4):
        response = client.post(
            "/api/v1/report-mistake",
            json={"video_id": "dQw4w9WgXcQ", "question": f"Question {i}", "correct_answer": "a", "user_answer": "b"},
            headers=HEADERS,
        )
        assert response.json() == {"message": "Mistake recorded successfully"}

    response = client.post(
        "/api/v1/generate-quiz",
        json={"notes": "n", "video_title": "T", "video_id": "dQw4w9WgXcQ"},
        headers=HEADERS,
    )

    assert response.status_code == 200
    assert response.json()["quiz"][0]["correctAnswer"] == 1
    mistakes = study_tools.generate_quiz.await_args.args[2]
    assert mistakes == ["Question 3", "Question 2", "Question 1"]


def test_synthesize_requires_two_ids(client):
    response = client.post("/api/v1/synthesize-notes", json={"note_ids": [1]}, headers=HEADERS)
    assert response.status_code == 400


def test_synthesize_only_own_notes(client, db):
    mine = add_note(db)
    theirs = add_note(db, user_id=2)

    response = client.post("/api/v1/synthesize-notes", json={"note_ids": [mine.id, theirs.id]}, headers=HEADERS)

    assert response.status_code == 404


def test_synthesize(client, db, study_tools):
    ids = [add_note(db, title="A").id, add_note(db, title="B").id]

    response = client.post("/api/v1/synthesize-notes", json={"note_ids": ids}, headers=HEADERS)

    assert response.json() == {"master_guide": "# Master Guide"}
    assert study_tools.synthesize_notes.await_args.args[0] == [("A", "notes for A"), ("B", "notes for B")]


def test_recommendations(client):
    response = client.post("/api/v1/recommendations", json={"video_title": "Thermo", "notes": "n"})
    assert response.json()["recommendations"][0]["query"] == "entropy"


def test_preferences_round_trip(client):
    assert client.get("/api/v1/preferences", headers=HEADERS).json() == {
        "ai_tone": "educational",
        "ai_detail_level": "detailed",
        "ai_language": "en",
    }

    response = client.put("/api/v1/preferences", json={"ai_language": "hi"}, headers=HEADERS)
    assert response.json()["ai_language"] == "hi"
    assert response.json()["ai_tone"] == "educational"

    assert client.put("/api/v1/preferences", json={"ai_language": "fr"}, headers=HEADERS).status_code == 422


def test_history(client, db):
    first = add_note(db, title="First")
    add_note(db, title="Second")
    add_note(db, user_id=2, title="Other user")

    history = client.get("/api/v1/history", headers=HEADERS).json()
    assert [n["title"] for n in history] == ["Second", "First"]

    assert client.delete(f"/api/v1/history/{first.id}", headers=HEADERS).status_code == 200
    assert client.delete(f"/api/v1/history/{first.id}", headers=HEADERS).status_code == 404

    assert client.delete("/api/v1/history", headers=HEADERS).json() == {"message": "History cleared successfully"}
    assert client.get("/api/v1/history", headers=HEADERS).json() == []
    assert len(crud.get_history(db, 2)) == 1


def test_collections(client, db):
    note = add_note(db)
    created = client.post("/api/v1/collections", json={"name": "Physics", "description": "Sem 1"}, headers=HEADERS)
    collection_id = created.json()["id"]

    for _ in range(2):
        response = client.post(
            f"/api/v1/collections/{collection_id}/add", json={"note_id": note.id}, headers=HEADERS
        )
        assert response.json() == {"success": True}

    listing = client.get("/api/v1/collections", headers=HEADERS).json()
    assert len(listing) == 1
    assert len(listing[0]["items"]) == 1
    assert listing[0]["items"][0]["notes"] is None

    detail = client.get(f"/api/v1/collections/{collection_id}", headers=HEADERS).json()
    assert detail["items"][0]["notes"] == "notes for Thermo"
    assert detail["items"][0]["title"] == "Thermo"

    other_user = {"X-User-Id": "2"}
    assert client.get(f"/api/v1/collections/{collection_id}", headers=other_user).status_code == 404
    assert client.post(
        f"/api/v1/collections/{collection_id}/add", json={"note_id": note.id}, headers=other_user
    ).status_code == 403

    assert client.delete(f"/api/v1/collections/{collection_id}", headers=HEADERS).json() == {"success": True}
    assert client.delete(f"/api/v1/collections/{collection_id}", headers=HEADERS).status_code == 404
