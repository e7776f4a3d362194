"""
Note generation pipeline: metadata -> transcript -> notes -> library, streamed
to the caller as StatusEvents.
"""

import asyncio
import traceback
from typing import AsyncIterator, Awaitable, Callable, Set

from sqlalchemy.orm import Session

from notetube.core.notes_generator import NotesGenerator
from notetube.core.transcript_fetcher import TranscriptFetcher
from notetube.core.youtube_api import YouTubeDataClient
from notetube.db import crud
from notetube.db.database import SessionLocal
from notetube.exceptions import NoteGenerationError, TranscriptUnavailableError
from notetube.models.schemas import (
    NoteRequest,
    PipelineState,
    StatusEvent,
    TranscriptResult,
    TranscriptSource,
    UserPreferences,
    VideoInfo,
)
from notetube.utils.logger import logging

SEARCHING_METADATA = "Searching for video metadata..."
RETRIEVING_TRANSCRIPT = "Retrieving transcript..."
NO_CAPTIONS = "No captions found. Preparing audio fallback..."
STRUCTURING_NOTES = "Structuring detailed educational notes..."
SAVING_NOTES = "Finalizing and saving to your library..."

METADATA_FAILED = "metadata fetch failed"
VIDEO_NOT_FOUND = "Video not found"

Emit = Callable[[StatusEvent], Awaitable[None]]


class NotePipeline:
    """Runs one note-generation request and reports progress over a channel."""

    def __init__(
        self,
        youtube: YouTubeDataClient,
        fetcher: TranscriptFetcher,
        notes: NotesGenerator,
        session_factory: Callable[[], Session] = SessionLocal,
    ):
        self.youtube = youtube
        self.fetcher = fetcher
        self.notes = notes
        self.session_factory = session_factory
        # Runs outlive a disconnected consumer; keep them referenced until they finish
        self._running: Set[asyncio.Task] = set()

    async def run(self, request: NoteRequest) -> AsyncIterator[StatusEvent]:
        """
        Process a video and yield its events.

        The stream ends with exactly one `done` or `error` event.
        """
        channel: asyncio.Queue = asyncio.Queue()
        task = asyncio.create_task(self._execute(request, channel.put))
        self._running.add(task)
        task.add_done_callback(self._running.discard)

        while True:
            event = await channel.get()
            yield event
            if event.is_terminal:
                break

    def _enter(self, request: NoteRequest, state: PipelineState) -> PipelineState:
        logging.info(f"[{request.video_id}] pipeline state -> {state.value}")
        return state

    async def _fail(self, request: NoteRequest, emit: Emit, message: str) -> None:
        self._enter(request, PipelineState.FAILED)
        await emit(StatusEvent.error(message))

    async def _execute(self, request: NoteRequest, emit: Emit) -> None:
        self._enter(request, PipelineState.INIT)
        try:
            self._enter(request, PipelineState.METADATA_FETCH)
            await emit(StatusEvent.status(SEARCHING_METADATA))
            try:
                video = await self.youtube.get_video_metadata(request.video_id)
            except Exception as e:
                logging.error(f"Metadata fetch failed for {request.video_id}: {str(e)}")
                await self._fail(request, emit, METADATA_FAILED)
                return
            if video is None:
                await self._fail(request, emit, VIDEO_NOT_FOUND)
                return

            self._enter(request, PipelineState.TRANSCRIPT_ACQUIRE)
            try:
                transcript = await self._acquire_transcript(request, video, emit)
            except TranscriptUnavailableError as e:
                await self._fail(request, emit, str(e))
                return

            self._enter(request, PipelineState.NOTE_GENERATION)
            await emit(StatusEvent.status(STRUCTURING_NOTES))
            preferences = await self._load_preferences(request.user_id)
            try:
                notes = await self.notes.generate_notes(video.title, transcript.text, preferences)
            except NoteGenerationError as e:
                await self._fail(request, emit, str(e))
                return

            self._enter(request, PipelineState.PERSIST)
            await emit(StatusEvent.status(SAVING_NOTES))
            await self._persist(request, video, notes, transcript)

            self._enter(request, PipelineState.DONE)
            await emit(StatusEvent.done(video, notes))
        except Exception as e:
            logging.error(f"Unexpected pipeline failure for {request.video_id}: {str(e)}")
            logging.error(traceback.format_exc())
            await self._fail(request, emit, f"Processing failed: {str(e)}")

    async def _acquire_transcript(self, request: NoteRequest, video: VideoInfo, emit: Emit) -> TranscriptResult:
        if request.manual_transcript and request.manual_transcript.strip():
            logging.info(f"Using manual transcript for {request.video_id}")
            return TranscriptResult(text=request.manual_transcript, source=TranscriptSource.MANUAL)

        await emit(StatusEvent.status(RETRIEVING_TRANSCRIPT if video.has_captions else NO_CAPTIONS))

        async def on_status(message: str) -> None:
            await emit(StatusEvent.status(message))

        return await self.fetcher.fetch_transcript(
            request.video_id, has_captions=video.has_captions, on_status=on_status
        )

    def _read_preferences(self, user_id: int) -> UserPreferences:
        with self.session_factory() as db:
            row = crud.get_preferences(db, user_id)
            return UserPreferences.model_validate(row) if row else UserPreferences()

    async def _load_preferences(self, user_id: int) -> UserPreferences:
        try:
            return await asyncio.to_thread(self._read_preferences, user_id)
        except Exception as e:
            logging.warning(f"Could not load preferences for user {user_id}, using defaults: {str(e)}")
            return UserPreferences()

    def _write_note(self, request: NoteRequest, video: VideoInfo, notes: str, transcript: TranscriptResult) -> None:
        with self.session_factory() as db:
            crud.create_note(
                db,
                user_id=request.user_id,
                video_id=video.id,
                title=video.title,
                thumbnail=video.thumbnail,
                notes=notes,
                transcript_source=transcript.source.value,
            )

    async def _persist(
        self, request: NoteRequest, video: VideoInfo, notes: str, transcript: TranscriptResult
    ) -> bool:
        try:
            await asyncio.to_thread(self._write_note, request, video, notes, transcript)
            return True
        except Exception as e:
            logging.warning(f"Failed to save notes for {request.video_id} to history: {str(e)}")
            return False
