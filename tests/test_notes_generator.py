"""
Tests for the notes generator.
"""

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda

from notetube.core.notes_generator import NotesGenerator
from notetube.exceptions import NoteGenerationError
from notetube.models.schemas import UserPreferences


def capturing_llm(reply="# Notes"):
    """Runnable that records the rendered prompt and answers with a fixed message."""
    captured = []

    def respond(prompt_value):
        captured.append(prompt_value.to_messages())
        return AIMessage(content=reply)

    return RunnableLambda(respond), captured


def failing_llm(error):
    def respond(prompt_value):
        raise error

    return RunnableLambda(respond)


@pytest.mark.asyncio
async def test_generate_notes_returns_model_text():
    generator = NotesGenerator(llm=FakeListChatModel(responses=["## Thermodynamics\n- Energy is conserved"]))

    notes = await generator.generate_notes("Intro", "energy is conserved in closed systems")

    assert notes.startswith("## Thermodynamics")


@pytest.mark.asyncio
async def test_prompt_honours_preferences():
    llm, captured = capturing_llm()
    prefs = UserPreferences(ai_tone="friendly", ai_detail_level="concise", ai_language="hi")

    await NotesGenerator(llm=llm).generate_notes("Lecture 1", "transcript text", prefs)

    system, human = captured[0]
    assert "friendly" in system.content
    assert "concise" in system.content
    assert "Hindi (Devanagari)" in system.content
    assert "Video: Lecture 1" in human.content
    assert "transcript text" in human.content


@pytest.mark.asyncio
async def test_transcript_is_truncated():
    llm, captured = capturing_llm()

    await NotesGenerator(llm=llm).generate_notes("Long", "b" * 30000)

    human = captured[0][1]
    assert human.content.endswith("b" * 25000)
    assert "b" * 25001 not in human.content


@pytest.mark.asyncio
async def test_transcript_with_braces_is_not_templated():
    llm, captured = capturing_llm()

    await NotesGenerator(llm=llm).generate_notes("Code", "def f(): return {'a': 1}")

    assert "{'a': 1}" in captured[0][1].content


@pytest.mark.asyncio
async def test_model_failure_raises_note_generation_error():
    generator = NotesGenerator(llm=failing_llm(RuntimeError("rate limited")))

    with pytest.raises(NoteGenerationError) as exc_info:
        await generator.generate_notes("Intro", "text")

    assert str(exc_info.value) == "Failed to generate notes"
    assert isinstance(exc_info.value.cause, RuntimeError)


@pytest.mark.asyncio
async def test_empty_reply_is_an_error():
    llm, _ = capturing_llm(reply="  ")

    with pytest.raises(NoteGenerationError):
        await NotesGenerator(llm=llm).generate_notes("Intro", "text")
