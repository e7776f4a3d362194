"""
Wiring of the long-lived service objects shared by the API and the CLI.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from notetube.config import config
from notetube.core.captions import CaptionProvider
from notetube.core.key_rotator import KeyPool, KeyRotator
from notetube.core.notes_generator import NotesGenerator
from notetube.core.pipeline import NotePipeline
from notetube.core.study_tools import StudyTools
from notetube.core.transcriber import AudioTranscriber
from notetube.core.transcript_fetcher import TranscriptFetcher
from notetube.core.youtube_api import YouTubeDataClient
from notetube.core.youtube_downloader import AudioDownloader
from notetube.db.database import SessionLocal
from notetube.utils.logger import logging


@dataclass
class Services:
    """Process-wide services; the key pool lives inside the rotator."""
    rotator: KeyRotator
    youtube: YouTubeDataClient
    pipeline: NotePipeline
    study_tools: StudyTools

    async def aclose(self) -> None:
        await self.rotator.aclose()


def build_services(
    youtube_keys: Optional[Sequence[str]] = None,
    groq_api_key: Optional[str] = None,
    session_factory=SessionLocal,
) -> Services:
    """
    Build every service from configuration.

    Raises:
        ConfigurationError: GROQ_API_KEY is missing
    """
    pool = KeyPool(config.YOUTUBE_API_KEYS if youtube_keys is None else youtube_keys)
    logging.info(f"Loaded {len(pool)} YouTube API keys")

    rotator = KeyRotator(pool)
    youtube = YouTubeDataClient(rotator)
    fetcher = TranscriptFetcher(
        captions=CaptionProvider(),
        downloader=AudioDownloader(),
        transcriber=AudioTranscriber(api_key=groq_api_key),
    )
    pipeline = NotePipeline(
        youtube=youtube,
        fetcher=fetcher,
        notes=NotesGenerator(api_key=groq_api_key),
        session_factory=session_factory,
    )
    study_tools = StudyTools(api_key=groq_api_key, youtube=youtube)

    return Services(rotator=rotator, youtube=youtube, pipeline=pipeline, study_tools=study_tools)
