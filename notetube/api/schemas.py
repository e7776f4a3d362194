import datetime
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List

from notetube.models.schemas import Flashcard, QuizQuestion, Recommendation

SUPPORTED_LANGUAGES = ("en", "hi")


class ProcessVideoRequest(BaseModel):
    """Model for requesting notes for a video."""
    video_id: Optional[str] = None
    url: Optional[str] = None
    manual_transcript: Optional[str] = None


class ChatMessage(BaseModel):
    role: str
    content: str


class ChatRequest(BaseModel):
    """Model for chat requests."""
    messages: List[ChatMessage]
    context: str = ""
    video_title: str = ""


class ChatResponse(BaseModel):
    """Model for chat responses."""
    reply: str


class StudyToolRequest(BaseModel):
    """Notes a study tool is built from."""
    notes: str
    video_title: str = ""
    video_id: Optional[str] = None


class FlashcardsResponse(BaseModel):
    flashcards: List[Flashcard]


class QuizResponse(BaseModel):
    quiz: List[QuizQuestion]


class MistakeReport(BaseModel):
    """A wrong quiz answer."""
    video_id: str
    question: str
    correct_answer: Optional[str] = None
    user_answer: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class SynthesisRequest(BaseModel):
    note_ids: List[int]


class SynthesisResponse(BaseModel):
    master_guide: str


class RecommendationsRequest(BaseModel):
    video_title: str
    notes: Optional[str] = None


class RecommendationsResponse(BaseModel):
    recommendations: List[Recommendation]


class PreferencesUpdate(BaseModel):
    """Partial update of AI preferences."""
    ai_tone: Optional[str] = None
    ai_detail_level: Optional[str] = None
    ai_language: Optional[str] = None

    @field_validator('ai_language')
    def validate_language(cls, v):
        if v is not None and v not in SUPPORTED_LANGUAGES:
            raise ValueError(f'ai_language must be one of {", ".join(SUPPORTED_LANGUAGES)}')
        return v


class NoteResponse(BaseModel):
    """Model for a note in the library."""
    id: int
    video_id: str
    title: str
    thumbnail: Optional[str] = None
    notes: str
    transcript_source: Optional[str] = None
    created_at: Optional[datetime.datetime] = None

    model_config = {"from_attributes": True}


class CollectionCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class AddToCollectionRequest(BaseModel):
    note_id: int


class CollectionItemResponse(BaseModel):
    id: int
    note_id: int
    video_id: str
    title: str
    thumbnail: Optional[str] = None
    notes: Optional[str] = None
    added_at: Optional[datetime.datetime] = None


class CollectionResponse(BaseModel):
    """Model for a collection and its notes."""
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    items: List[CollectionItemResponse] = []


class SuccessResponse(BaseModel):
    success: bool = True
