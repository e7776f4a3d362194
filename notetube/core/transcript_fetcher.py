"""
Transcript acquisition: captions first, audio download + speech-to-text as fallback.
"""

from typing import Awaitable, Callable, Optional

from notetube.core.captions import CaptionProvider, segments_to_text
from notetube.core.transcriber import AudioTranscriber
from notetube.core.youtube_downloader import AudioDownloader
from notetube.exceptions import (
    CaptionsUnavailableError,
    DownloadError,
    TranscriptionError,
    TranscriptUnavailableError,
)
from notetube.models.schemas import AttemptResult, TranscriptResult, TranscriptSource
from notetube.utils.logger import logging

StatusCallback = Callable[[str], Awaitable[None]]

EXTRACTING_AUDIO = "Extracting audio from video..."
TRANSCRIBING_AUDIO = "Transcribing audio with Genius AI..."


class TranscriptFetcher:
    """Runs the caption -> audio fallback chain for one video."""

    def __init__(
        self,
        captions: CaptionProvider,
        downloader: AudioDownloader,
        transcriber: AudioTranscriber,
    ):
        self.captions = captions
        self.downloader = downloader
        self.transcriber = transcriber

    async def attempt_captions(self, video_id: str, has_captions: bool = True) -> AttemptResult[TranscriptResult]:
        """Try the caption provider; whitespace-only text counts as a failure."""
        if not has_captions:
            return AttemptResult.failure(CaptionsUnavailableError(video_id, "No captions"))

        try:
            segments, language = await self.captions.fetch_captions(video_id)
        except CaptionsUnavailableError as e:
            return AttemptResult.failure(e)

        text = segments_to_text(segments)
        if not text:
            return AttemptResult.failure(CaptionsUnavailableError(video_id, "Transcript empty"))

        return AttemptResult.success(
            TranscriptResult(text=text, source=TranscriptSource.CAPTIONS, language=language)
        )

    async def attempt_audio_fallback(
        self, video_id: str, on_status: Optional[StatusCallback] = None
    ) -> AttemptResult[TranscriptResult]:
        """Download the audio once, then transcribe it once."""
        if on_status:
            await on_status(EXTRACTING_AUDIO)
        try:
            artifact = await self.downloader.download_audio(video_id)
        except DownloadError as e:
            return AttemptResult.failure(e)

        if on_status:
            await on_status(TRANSCRIBING_AUDIO)
        try:
            text = await self.transcriber.transcribe(artifact)
        except TranscriptionError as e:
            return AttemptResult.failure(e)

        return AttemptResult.success(TranscriptResult(text=text, source=TranscriptSource.AUDIO_FALLBACK))

    async def fetch_transcript(
        self,
        video_id: str,
        has_captions: bool = True,
        on_status: Optional[StatusCallback] = None,
    ) -> TranscriptResult:
        """
        Get a usable transcript for a video.

        Args:
            video_id: YouTube video ID
            has_captions: Caption flag from the video metadata; False skips the caption provider
            on_status: Awaited with a progress message before each fallback step

        Returns:
            TranscriptResult tagged with its source

        Raises:
            TranscriptUnavailableError: both paths failed
        """
        captions = await self.attempt_captions(video_id, has_captions)
        if captions.ok:
            logging.info(f"Caption transcript for {video_id}, length: {len(captions.value.text)}")
            return captions.value

        logging.warning(f"Standard transcript fetch failed: {captions.error}. Attempting audio fallback...")

        fallback = await self.attempt_audio_fallback(video_id, on_status)
        if fallback.ok:
            logging.info(f"Audio fallback transcript for {video_id}, length: {len(fallback.value.text)}")
            return fallback.value

        logging.error(f"Audio fallback failed for {video_id}: {fallback.error}")
        raise TranscriptUnavailableError(video_id, captions.error, fallback.error)
