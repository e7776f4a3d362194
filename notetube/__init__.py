"""
NoteTube AI study-notes application.

This application turns YouTube videos into study notes: it fetches a
transcript (captions, or audio transcription as a fallback), writes notes
with an LLM and offers chat, flashcards, quizzes and note synthesis on top.
"""

from notetube.config import config

__version__ = config.APP_VERSION
