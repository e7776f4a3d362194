"""
Caption retrieval using youtube-transcript-api.
"""

import asyncio
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from youtube_transcript_api import YouTubeTranscriptApi
from youtube_transcript_api._errors import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
)

from notetube.exceptions import CaptionsUnavailableError
from notetube.models.schemas import CaptionSegment
from notetube.utils.logger import logging

_WHITESPACE = re.compile(r"\s+")


def join_caption_text(fragments: Iterable[str]) -> str:
    """Join caption fragments and collapse whitespace."""
    text = " ".join(fragment for fragment in fragments if fragment)
    return _WHITESPACE.sub(" ", text).strip()


def segments_to_text(segments: Sequence[CaptionSegment]) -> str:
    """Join timed segments in chronological order."""
    ordered = sorted(segments, key=lambda segment: segment.start)
    return join_caption_text(segment.text for segment in ordered)


class CaptionProvider:
    """Fetches creator or auto-generated captions for a video."""

    def __init__(self, api: Optional[YouTubeTranscriptApi] = None, languages: Sequence[str] = ("en",)):
        self.api = api or YouTubeTranscriptApi()
        self.languages = list(languages)

    def _fetch_sync(self, video_id: str) -> Tuple[List[CaptionSegment], str]:
        transcript_list = self.api.list(video_id)
        available = [t.language_code for t in transcript_list]

        # Priority: preferred language -> any manual -> any auto-generated
        try:
            transcript = transcript_list.find_transcript(self.languages)
        except NoTranscriptFound:
            try:
                transcript = transcript_list.find_manually_created_transcript(available)
            except NoTranscriptFound:
                transcript = transcript_list.find_generated_transcript(available)

        fetched = transcript.fetch()
        segments = [
            CaptionSegment(text=item.text, start=item.start, duration=item.duration)
            for item in fetched
        ]
        return segments, transcript.language_code

    async def fetch_captions(self, video_id: str) -> Tuple[List[CaptionSegment], str]:
        """
        Fetch the caption track for a video.

        Returns:
            (segments, language_code)

        Raises:
            CaptionsUnavailableError: captions disabled, missing or unreachable
        """
        logging.info(f"Fetching captions for: {video_id}")
        try:
            return await asyncio.to_thread(self._fetch_sync, video_id)
        except CouldNotRetrieveTranscript as e:
            raise CaptionsUnavailableError(video_id, f"No captions available: {type(e).__name__}", cause=e) from e
        except Exception as e:
            raise CaptionsUnavailableError(video_id, f"Could not fetch captions: {e}", cause=e) from e
