"""
API routes for note generation and the study tools.
"""

import traceback
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from notetube.api.dependencies import (
    get_current_user_id,
    get_pipeline,
    get_study_tools,
    get_user_preferences,
)
from notetube.api.schemas import (
    ChatRequest,
    ChatResponse,
    FlashcardsResponse,
    MessageResponse,
    MistakeReport,
    ProcessVideoRequest,
    QuizResponse,
    RecommendationsRequest,
    RecommendationsResponse,
    StudyToolRequest,
    SynthesisRequest,
    SynthesisResponse,
)
from notetube.core.pipeline import NotePipeline
from notetube.core.study_tools import StudyTools
from notetube.db import crud
from notetube.db.database import DBSession, get_db
from notetube.exceptions import NoteGenerationError, StudyToolError
from notetube.models.schemas import NoteRequest, UserPreferences
from notetube.utils.helpers import extract_video_id
from notetube.utils.logger import logging

router = APIRouter(prefix="/api/v1", tags=["notes"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


@router.post("/process-video")
async def process_video(
    body: ProcessVideoRequest,
    user_id: int = Depends(get_current_user_id),
    pipeline: NotePipeline = Depends(get_pipeline),
):
    """
    Generate notes for a video, streaming progress as Server-Sent Events.

    Each frame is `data: <json>` with a `type` of status, error or done.
    """
    video_id = extract_video_id(body.video_id or body.url or "")
    if not video_id:
        raise HTTPException(status_code=400, detail="Invalid YouTube URL or video ID")

    request = NoteRequest(video_id=video_id, user_id=user_id, manual_transcript=body.manual_transcript)
    logging.info(f"Processing video {video_id} for user {user_id}")

    async def event_stream():
        async for event in pipeline.run(request):
            yield event.to_sse()

    return StreamingResponse(event_stream(), media_type="text/event-stream", headers=SSE_HEADERS)


@router.post("/chat", response_model=ChatResponse)
async def chat_about_video(
    chat_request: ChatRequest,
    preferences: UserPreferences = Depends(get_user_preferences),
    tools: StudyTools = Depends(get_study_tools),
):
    """Answer questions about a video using its notes as context."""
    if not chat_request.messages:
        raise HTTPException(status_code=400, detail="At least one message is required")

    try:
        reply = await tools.chat(
            title=chat_request.video_title,
            notes=chat_request.context,
            messages=[m.model_dump() for m in chat_request.messages],
            preferences=preferences,
        )
        return ChatResponse(reply=reply)
    except NoteGenerationError as e:
        logging.error(f"Chat error: {str(e.cause)}")
        raise HTTPException(status_code=500, detail="Failed to generate chat response")


@router.post("/generate-flashcards", response_model=FlashcardsResponse)
async def generate_flashcards(
    body: StudyToolRequest,
    user_id: int = Depends(get_current_user_id),
    tools: StudyTools = Depends(get_study_tools),
):
    """Create flashcards from notes."""
    try:
        flashcards = await tools.generate_flashcards(body.video_title, body.notes)
        return FlashcardsResponse(flashcards=flashcards)
    except (NoteGenerationError, StudyToolError) as e:
        logging.error(f"Flashcards error for user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to generate flashcards")


@router.post("/generate-quiz", response_model=QuizResponse)
async def generate_quiz(
    body: StudyToolRequest,
    user_id: int = Depends(get_current_user_id),
    tools: StudyTools = Depends(get_study_tools),
    db: DBSession = Depends(get_db),
):
    """Create a quiz that revisits the user's recent mistakes for this video."""
    mistakes = []
    if body.video_id:
        mistakes = [m.question for m in crud.get_recent_mistakes(db, user_id, body.video_id)]

    try:
        quiz = await tools.generate_quiz(body.video_title, body.notes, mistakes)
        return QuizResponse(quiz=quiz)
    except (NoteGenerationError, StudyToolError) as e:
        logging.error(f"Quiz error for user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to generate quiz")


@router.post("/report-mistake", response_model=MessageResponse)
async def report_mistake(
    report: MistakeReport,
    user_id: int = Depends(get_current_user_id),
    db: DBSession = Depends(get_db),
):
    """Record a wrong quiz answer."""
    try:
        crud.add_mistake(
            db,
            user_id=user_id,
            video_id=report.video_id,
            question=report.question,
            correct_answer=report.correct_answer,
            user_answer=report.user_answer,
        )
        return MessageResponse(message="Mistake recorded successfully")
    except Exception as e:
        logging.error(f"Report mistake error: {str(e)}")
        logging.error(traceback.format_exc())
        raise HTTPException(status_code=500, detail="Failed to record mistake")


@router.post("/synthesize-notes", response_model=SynthesisResponse)
async def synthesize_notes(
    body: SynthesisRequest,
    user_id: int = Depends(get_current_user_id),
    tools: StudyTools = Depends(get_study_tools),
    db: DBSession = Depends(get_db),
):
    """Merge two or more library notes into a master guide."""
    if len(body.note_ids) < 2:
        raise HTTPException(status_code=400, detail="Select at least 2 notes to synthesize")

    rows = crud.get_notes_by_ids(db, user_id, body.note_ids)
    if len(rows) < 2:
        raise HTTPException(status_code=404, detail="Notes not found or insufficient access")

    try:
        guide = await tools.synthesize_notes([(row.title, row.notes) for row in rows])
        return SynthesisResponse(master_guide=guide)
    except NoteGenerationError as e:
        logging.error(f"Synthesis error: {str(e.cause)}")
        raise HTTPException(status_code=500, detail="Failed to synthesize Master Guide")


@router.post("/recommendations", response_model=RecommendationsResponse)
async def recommendations(
    body: RecommendationsRequest,
    tools: StudyTools = Depends(get_study_tools),
):
    """Suggest related videos for a set of notes."""
    recs = await tools.recommend(body.video_title, body.notes or "")
    return RecommendationsResponse(recommendations=recs)
