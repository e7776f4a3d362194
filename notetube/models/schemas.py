"""
Data models for the NoteTube application.
"""
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator

T = TypeVar("T")


class TranscriptSource(str, Enum):
    """Where a transcript came from."""
    CAPTIONS = "captions"
    AUDIO_FALLBACK = "audio-fallback"
    MANUAL = "manual"


class PipelineState(str, Enum):
    """States of one note-generation request."""
    INIT = "init"
    METADATA_FETCH = "metadata_fetch"
    TRANSCRIPT_ACQUIRE = "transcript_acquire"
    NOTE_GENERATION = "note_generation"
    PERSIST = "persist"
    DONE = "done"
    FAILED = "failed"


class EventType(str, Enum):
    """Types of events streamed to the caller."""
    STATUS = "status"
    ERROR = "error"
    DONE = "done"


class VideoInfo(BaseModel):
    """Video metadata returned by the YouTube Data API."""
    id: str
    title: str
    channel_title: Optional[str] = None
    thumbnail: Optional[str] = None
    description: Optional[str] = None
    has_captions: bool = False


class CaptionSegment(BaseModel):
    """One timed caption fragment."""
    text: str
    start: float = 0.0
    duration: float = 0.0


class TranscriptResult(BaseModel):
    """A non-empty transcript and its provenance."""
    text: str
    source: TranscriptSource
    language: Optional[str] = None

    @field_validator('text')
    def validate_text(cls, v):
        if not v or not v.strip():
            raise ValueError('Transcript text must not be empty')
        return v


class AudioArtifact(BaseModel):
    """A downloaded audio file owned by a single request."""
    path: str
    video_id: str
    token: str


class UserPreferences(BaseModel):
    """AI output preferences for a user."""
    ai_tone: str = "educational"
    ai_detail_level: str = "detailed"
    ai_language: str = "en"

    model_config = {"from_attributes": True}

    @property
    def language_name(self) -> str:
        return "Hindi (Devanagari)" if self.ai_language == "hi" else "English"


class StatusEvent(BaseModel):
    """One message of the note-generation event stream."""
    type: EventType
    message: Optional[str] = None
    video: Optional[VideoInfo] = None
    notes: Optional[str] = None

    @classmethod
    def status(cls, message: str) -> "StatusEvent":
        return cls(type=EventType.STATUS, message=message)

    @classmethod
    def error(cls, message: str) -> "StatusEvent":
        return cls(type=EventType.ERROR, message=message)

    @classmethod
    def done(cls, video: VideoInfo, notes: str) -> "StatusEvent":
        return cls(type=EventType.DONE, video=video, notes=notes)

    @property
    def is_terminal(self) -> bool:
        return self.type in (EventType.ERROR, EventType.DONE)

    def payload(self) -> Dict[str, Any]:
        """Wire payload without the fields that do not apply to this type."""
        if self.type == EventType.DONE:
            return {"type": self.type.value, "video": self.video.model_dump(), "notes": self.notes}
        return {"type": self.type.value, "message": self.message}

    def to_sse(self) -> str:
        """Serialize as a Server-Sent-Events data frame."""
        return f"data: {json.dumps(self.payload())}\n\n"


class NoteRequest(BaseModel):
    """Input of one note-generation run."""
    video_id: str
    user_id: int
    manual_transcript: Optional[str] = None


class Flashcard(BaseModel):
    """Question/answer card."""
    front: str
    back: str


class QuizQuestion(BaseModel):
    """Multiple choice question with the index of the correct option."""
    question: str
    options: List[str] = Field(min_length=2)
    correctAnswer: int

    @field_validator('correctAnswer')
    def validate_answer_index(cls, v, info):
        options = info.data.get("options") or []
        if options and not 0 <= v < len(options):
            raise ValueError('correctAnswer must index into options')
        return v


class Recommendation(BaseModel):
    """A suggested search topic, optionally resolved to a video."""
    query: str
    videoId: Optional[str] = None
    title: Optional[str] = None
    thumbnail: Optional[str] = None
    channel: Optional[str] = None


@dataclass
class AttemptResult(Generic[T]):
    """Outcome of one step of a fallback chain: a value or the error that stopped it."""
    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "AttemptResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> "AttemptResult[T]":
        return cls(error=error)
