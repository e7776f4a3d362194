"""
Module for turning transcripts into study notes using LLM models.
"""

import os
from typing import Any, Dict, List, Optional, Tuple

from langchain.chat_models import init_chat_model
from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate

from notetube.config import config
from notetube.core.prompts import NOTES_SYSTEM_TEMPLATE, NOTES_USER_TEMPLATE
from notetube.exceptions import ConfigurationError, NoteGenerationError
from notetube.models.schemas import UserPreferences
from notetube.utils.helpers import truncate_text
from notetube.utils.logger import logging


def build_chat_model(
    model: str,
    api_key: Optional[str] = None,
    temperature: float = config.NOTES_TEMPERATURE,
) -> BaseChatModel:
    """
    Create a Groq backed chat model.

    Args:
        model: Groq model name
        api_key: Groq API key (if None, will try to get from environment)
        temperature: Sampling temperature
    """
    api_key = api_key or os.getenv("GROQ_API_KEY")
    if not api_key:
        raise ConfigurationError("GROQ_API_KEY")

    os.environ["GROQ_API_KEY"] = api_key
    return init_chat_model(
        model=model,
        model_provider=config.MODEL_PROVIDER,
        temperature=temperature,
    )


async def run_prompt(
    llm: Any,
    messages: List[Tuple[str, str]],
    variables: Dict[str, Any],
    task: str,
) -> str:
    """
    Render a prompt, send it to the model and return the reply text.

    Raises:
        NoteGenerationError: the model call failed or returned nothing
    """
    prompt = ChatPromptTemplate.from_messages(messages)
    chain = prompt | llm

    try:
        response = await chain.ainvoke(variables)
    except Exception as e:
        logging.error(f"LLM call for {task} failed: {str(e)}")
        raise NoteGenerationError(task, cause=e) from e

    content = getattr(response, "content", response)
    if not isinstance(content, str) or not content.strip():
        raise NoteGenerationError(task, cause=ValueError("Empty model response"))
    return content


class NotesGenerator:
    """Class to handle note generation operations."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = config.DEFAULT_NOTES_MODEL,
        llm: Optional[Any] = None,
    ):
        """
        Initialize the generator.

        Args:
            api_key: Groq API key (if None, will try to get from environment)
            model: Chat model used for notes
            llm: Preconfigured chat model or runnable
        """
        self.model = model
        self.llm = llm if llm is not None else build_chat_model(model, api_key)

    async def generate_notes(
        self,
        title: str,
        transcript_text: str,
        preferences: Optional[UserPreferences] = None,
    ) -> str:
        """
        Generate Markdown study notes for a video.

        Args:
            title: Video title
            transcript_text: Full transcript, truncated before sending
            preferences: Tone, detail level and language of the notes

        Returns:
            Notes as Markdown text
        """
        preferences = preferences or UserPreferences()
        transcript = truncate_text(transcript_text, config.MAX_TRANSCRIPT_CHARS)
        logging.info(
            f"Generating notes for '{title}' ({len(transcript)} chars, "
            f"tone={preferences.ai_tone}, language={preferences.ai_language})"
        )

        return await run_prompt(
            self.llm,
            [("system", NOTES_SYSTEM_TEMPLATE), ("human", NOTES_USER_TEMPLATE)],
            {
                "tone": preferences.ai_tone,
                "detail_level": preferences.ai_detail_level,
                "language_name": preferences.language_name,
                "language": preferences.ai_language,
                "title": title,
                "transcript": transcript,
            },
            task="notes",
        )
