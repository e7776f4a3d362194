"""
Learning tools built on top of stored notes: chat, flashcards, quizzes,
multi-note synthesis and related video recommendations.
"""

import asyncio
import json
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from notetube.config import config
from notetube.core.notes_generator import build_chat_model, run_prompt
from notetube.core.prompts import (
    CHAT_SYSTEM_TEMPLATE,
    FLASHCARDS_SYSTEM_TEMPLATE,
    QUIZ_MISTAKES_RULE,
    QUIZ_SYSTEM_TEMPLATE,
    RECOMMENDATIONS_SYSTEM_TEMPLATE,
    RECOMMENDATIONS_USER_TEMPLATE,
    STUDY_TOOL_USER_TEMPLATE,
    SYNTHESIS_SYSTEM_TEMPLATE,
    SYNTHESIS_USER_TEMPLATE,
)
from notetube.core.youtube_api import YouTubeDataClient
from notetube.exceptions import NoteGenerationError, StudyToolError
from notetube.models.schemas import Flashcard, QuizQuestion, Recommendation, UserPreferences
from notetube.utils.helpers import parse_json_output, truncate_text
from notetube.utils.logger import logging

_LIST_MARKER = re.compile(r"^[-\d.]+\s*")


def _parse_items(tool: str, raw_output: str, model) -> list:
    """Parse a JSON array of objects into pydantic models."""
    try:
        data = parse_json_output(raw_output)
        if not isinstance(data, list):
            raise ValueError("Expected a JSON array")
        return [model.model_validate(item) for item in data]
    except (ValueError, ValidationError) as e:
        logging.error(f"Could not parse {tool}: {str(e)}")
        raise StudyToolError(tool, raw_output) from e


def parse_topics(raw_output: str, fallback_title: str) -> List[str]:
    """
    Extract recommendation topics from model output.

    Accepts a JSON array, a JSON object holding an array, or a plain
    numbered/bulleted list.
    """
    try:
        data = parse_json_output(raw_output)
    except ValueError:
        logging.warning("Failed to parse JSON recommendations, using raw split")
        lines = [line.strip() for line in raw_output.splitlines()]
        return [_LIST_MARKER.sub("", line) for line in lines if len(line) > 5]

    if not isinstance(data, list):
        values = data.values() if isinstance(data, dict) else []
        data = next((value for value in values if isinstance(value, list)), [fallback_title])

    topics = []
    for item in data:
        if isinstance(item, str):
            topic = item
        elif isinstance(item, dict):
            topic = item.get("topic") or item.get("query") or item.get("title") or json.dumps(item)
        else:
            topic = json.dumps(item)
        topic = topic.strip()
        if len(topic) >= 2:
            topics.append(topic)
    return topics


def fallback_queries(title: str) -> List[str]:
    """Search queries derived from the title when the model is unavailable."""
    return [
        f"{title} Official Video",
        f"{title} live",
        f"Best of {title.split('|')[0].strip()}",
    ]


class StudyTools:
    """LLM powered study helpers."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        llm: Optional[Any] = None,
        recommendation_llm: Optional[Any] = None,
        youtube: Optional[YouTubeDataClient] = None,
    ):
        """
        Initialize the study tools.

        Args:
            api_key: Groq API key (if None, will try to get from environment)
            llm: Chat model for chat, flashcards, quizzes and synthesis
            recommendation_llm: Smaller model for recommendations; defaults to llm when that is given
            youtube: Search client used to attach videos to recommendations
        """
        self.llm = llm if llm is not None else build_chat_model(config.DEFAULT_NOTES_MODEL, api_key)
        if recommendation_llm is None:
            recommendation_llm = llm if llm is not None else build_chat_model(config.RECOMMENDATION_MODEL, api_key)
        self.recommendation_llm = recommendation_llm
        self.youtube = youtube

    async def chat(
        self,
        title: str,
        notes: str,
        messages: Sequence[Dict[str, str]],
        preferences: Optional[UserPreferences] = None,
    ) -> str:
        """
        Answer the latest question of a conversation about a video.

        Args:
            title: Video title
            notes: Notes used as context
            messages: Conversation so far as {"role", "content"} dicts
            preferences: Tone and language of the reply
        """
        preferences = preferences or UserPreferences()
        history = [{"role": m["role"], "content": m["content"]} for m in messages]
        return await run_prompt(
            self.llm,
            [("system", CHAT_SYSTEM_TEMPLATE), ("placeholder", "{history}")],
            {
                "tone": preferences.ai_tone,
                "title": title,
                "language_name": preferences.language_name,
                "context": truncate_text(notes, config.MAX_NOTES_CONTEXT_CHARS),
                "history": history,
            },
            task="chat response",
        )

    async def generate_flashcards(self, title: str, notes: str) -> List[Flashcard]:
        raw = await run_prompt(
            self.llm,
            [("system", FLASHCARDS_SYSTEM_TEMPLATE), ("human", STUDY_TOOL_USER_TEMPLATE)],
            {"title": title, "notes": truncate_text(notes, config.MAX_NOTES_CONTEXT_CHARS)},
            task="flashcards",
        )
        return _parse_items("flashcards", raw, Flashcard)

    async def generate_quiz(
        self, title: str, notes: str, mistakes: Sequence[str] = ()
    ) -> List[QuizQuestion]:
        """
        Create a multiple choice quiz.

        Args:
            title: Video title
            notes: Notes the questions are drawn from
            mistakes: Questions the user recently got wrong for this video
        """
        personalization = QUIZ_MISTAKES_RULE.format(questions=", ".join(mistakes)) if mistakes else ""
        raw = await run_prompt(
            self.llm,
            [("system", QUIZ_SYSTEM_TEMPLATE), ("human", STUDY_TOOL_USER_TEMPLATE)],
            {
                "personalization": personalization,
                "title": title,
                "notes": truncate_text(notes, config.MAX_NOTES_CONTEXT_CHARS),
            },
            task="quiz",
        )
        return _parse_items("quiz", raw, QuizQuestion)

    async def synthesize_notes(self, notes: Sequence[Tuple[str, str]]) -> str:
        """
        Merge several notes into one master guide.

        Args:
            notes: (title, notes) pairs, at least two

        Returns:
            Master guide as Markdown
        """
        if len(notes) < 2:
            raise ValueError("Select at least 2 notes to synthesize")

        combined = "\n\n---\n\n".join(
            f"VIDEO {i}: {title}\nNOTES {i}:\n{text}" for i, (title, text) in enumerate(notes, start=1)
        )
        return await run_prompt(
            self.llm,
            [("system", SYNTHESIS_SYSTEM_TEMPLATE), ("human", SYNTHESIS_USER_TEMPLATE)],
            {
                "limit": f"{config.MAX_SYNTHESIS_CHARS // 1000}k",
                "context": truncate_text(combined, config.MAX_SYNTHESIS_CHARS),
            },
            task="master guide",
        )

    async def _enrich(self, topic: str) -> Recommendation:
        if self.youtube is None:
            return Recommendation(query=topic)
        try:
            return await self.youtube.search_video(topic)
        except Exception as e:
            logging.error(f"YouTube search failed for topic '{topic}': {str(e)}")
            return Recommendation(query=topic)

    async def recommend(self, title: str, notes: str) -> List[Recommendation]:
        """
        Suggest related videos.

        Only the first few topics are resolved to videos to limit search quota.
        When the model call fails, simple title based queries are used instead.
        """
        try:
            raw = await run_prompt(
                self.recommendation_llm,
                [("system", RECOMMENDATIONS_SYSTEM_TEMPLATE), ("human", RECOMMENDATIONS_USER_TEMPLATE)],
                {
                    "count": config.RECOMMENDATION_COUNT,
                    "title": title,
                    "notes": truncate_text(notes or "", config.MAX_NOTES_CONTEXT_CHARS),
                },
                task="recommendations",
            )
            topics = parse_topics(raw, title)[:config.RECOMMENDATION_COUNT]
            search_limit = config.RECOMMENDATION_SEARCH_LIMIT
        except NoteGenerationError as e:
            logging.warning(f"Recommendations model failed, using fallback queries: {e.cause}")
            topics = fallback_queries(title)
            search_limit = len(topics)

        searched = await asyncio.gather(*(self._enrich(topic) for topic in topics[:search_limit]))
        return list(searched) + [Recommendation(query=topic) for topic in topics[search_limit:]]
