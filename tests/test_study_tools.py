"""
Tests for chat, flashcards, quizzes, synthesis and recommendations.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda

from notetube.core.study_tools import StudyTools, fallback_queries, parse_topics
from notetube.exceptions import NoteGenerationError, StudyToolError
from notetube.models.schemas import Recommendation, UserPreferences

FLASHCARDS = [{"front": "What is entropy?", "back": "A measure of disorder"}]
QUIZ = [{"question": "Q1", "options": ["a", "b", "c", "d"], "correctAnswer": 2}]


def tools_replying(*replies, youtube=None):
    return StudyTools(llm=FakeListChatModel(responses=list(replies)), youtube=youtube)


def capturing_tools(reply):
    captured = []

    def respond(prompt_value):
        captured.append(prompt_value.to_messages())
        return AIMessage(content=reply)

    return StudyTools(llm=RunnableLambda(respond)), captured


def failing_tools(youtube=None):
    def respond(prompt_value):
        raise RuntimeError("groq down")

    return StudyTools(llm=RunnableLambda(respond), youtube=youtube)


@pytest.mark.asyncio
async def test_chat_includes_history_and_context():
    tools, captured = capturing_tools("Entropy always increases.")
    messages = [
        {"role": "user", "content": "What is entropy?"},
        {"role": "assistant", "content": "Disorder."},
        {"role": "user", "content": "Does it decrease?"},
    ]

    reply = await tools.chat("Thermo", "NOTES ABOUT ENTROPY", messages, UserPreferences(ai_tone="witty"))

    assert reply == "Entropy always increases."
    sent = captured[0]
    assert "witty" in sent[0].content
    assert "NOTES ABOUT ENTROPY" in sent[0].content
    assert [m.content for m in sent[1:]] == ["What is entropy?", "Disorder.", "Does it decrease?"]
    assert sent[2].type == "ai"


@pytest.mark.asyncio
async def test_flashcards_parsed_from_fenced_json():
    tools = tools_replying("```json\n" + json.dumps(FLASHCARDS) + "\n```")

    cards = await tools.generate_flashcards("Thermo", "notes")

    assert cards[0].front == "What is entropy?"
    assert cards[0].back == "A measure of disorder"


@pytest.mark.asyncio
async def test_unparseable_flashcards_raise_study_tool_error():
    tools = tools_replying("Here are your flashcards!")

    with pytest.raises(StudyToolError) as exc_info:
        await tools.generate_flashcards("Thermo", "notes")

    assert exc_info.value.raw_output == "Here are your flashcards!"


@pytest.mark.asyncio
async def test_quiz_includes_mistakes():
    tools, captured = capturing_tools(json.dumps(QUIZ))

    quiz = await tools.generate_quiz("Thermo", "notes", ["What is enthalpy?", "Define work"])

    assert quiz[0].correctAnswer == 2
    system = captured[0][0].content
    assert "What is enthalpy?, Define work" in system


@pytest.mark.asyncio
async def test_quiz_without_mistakes_has_no_personalization():
    tools, captured = capturing_tools(json.dumps(QUIZ))

    await tools.generate_quiz("Thermo", "notes")

    assert "previously struggled" not in captured[0][0].content


@pytest.mark.asyncio
async def test_quiz_answer_index_out_of_range():
    bad = [{"question": "Q", "options": ["a", "b"], "correctAnswer": 5}]
    tools = tools_replying(json.dumps(bad))

    with pytest.raises(StudyToolError):
        await tools.generate_quiz("Thermo", "notes")


@pytest.mark.asyncio
async def test_synthesis_combines_notes():
    tools, captured = capturing_tools("# Master Guide")

    guide = await tools.synthesize_notes([("Video A", "notes a"), ("Video B", "notes b")])

    assert guide == "# Master Guide"
    user = captured[0][1].content
    assert "VIDEO 1: Video A" in user
    assert "NOTES 2:\nnotes b" in user
    assert "---" in user


@pytest.mark.asyncio
async def test_synthesis_needs_two_notes():
    tools = tools_replying("unused")

    with pytest.raises(ValueError):
        await tools.synthesize_notes([("Only", "one")])


@pytest.mark.asyncio
async def test_recommendations_search_first_five_only():
    topics = [f"topic number {i}" for i in range(12)]
    youtube = MagicMock()
    youtube.search_video = AsyncMock(
        side_effect=lambda q: Recommendation(query=q, videoId="abcdefghijk", title=f"Video for {q}")
    )
    tools = tools_replying(json.dumps(topics), youtube=youtube)

    recs = await tools.recommend("Thermo", "notes")

    assert len(recs) == 10
    assert youtube.search_video.await_count == 5
    assert all(r.videoId for r in recs[:5])
    assert all(r.videoId is None for r in recs[5:])
    assert [r.query for r in recs] == topics[:10]


@pytest.mark.asyncio
async def test_search_failure_keeps_plain_query():
    youtube = MagicMock()
    youtube.search_video = AsyncMock(side_effect=Exception("All 2 API keys failed"))
    tools = tools_replying(json.dumps(["entropy basics"]), youtube=youtube)

    recs = await tools.recommend("Thermo", "notes")

    assert recs == [Recommendation(query="entropy basics")]


@pytest.mark.asyncio
async def test_model_failure_uses_fallback_queries():
    youtube = MagicMock()
    youtube.search_video = AsyncMock(side_effect=lambda q: Recommendation(query=q))
    tools = failing_tools(youtube=youtube)

    recs = await tools.recommend("Daft Punk | Live", "notes")

    assert [r.query for r in recs] == fallback_queries("Daft Punk | Live")
    assert youtube.search_video.await_count == 3


@pytest.mark.asyncio
async def test_chat_failure_raises():
    with pytest.raises(NoteGenerationError):
        await failing_tools().chat("T", "notes", [{"role": "user", "content": "hi"}])


def test_parse_topics_formats():
    assert parse_topics('["a topic", "b topic"]', "Title") == ["a topic", "b topic"]
    assert parse_topics('{"recommendations": ["x topic"]}', "Title") == ["x topic"]
    assert parse_topics('{"none": 1}', "Title") == ["Title"]
    assert parse_topics('[{"topic": "as object"}]', "Title") == ["as object"]
    assert parse_topics("1. First idea here\n2. Second idea here\nok", "Title") == [
        "First idea here",
        "Second idea here",
    ]


def test_fallback_queries():
    assert fallback_queries("Song | Artist") == [
        "Song | Artist Official Video",
        "Song | Artist live",
        "Best of Song",
    ]
