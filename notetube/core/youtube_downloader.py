"""
YouTube audio downloader used by the transcript fallback path.
"""

import asyncio
import os
import time
import uuid
from pathlib import Path
from typing import Optional

from pytubefix import YouTube

from notetube.config import config
from notetube.exceptions import DownloadError
from notetube.models.schemas import AudioArtifact
from notetube.utils.logger import logging

# Containers the transcription API accepts without re-encoding, best first
PREFERRED_AUDIO_SUBTYPES = (("mp4", "m4a"), ("webm", "webm"))

# Tokenized files older than this belong to requests that never cleaned up
STALE_FILE_SECONDS = 3600


def video_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


class AudioDownloader:
    """Downloads the best available audio stream of a video into scratch storage."""

    def __init__(self, output_directory: Optional[Path] = None):
        """
        Initialize the downloader.

        Args:
            output_directory: Scratch directory shared by all requests
        """
        self.output_directory = Path(output_directory or config.TEMP_AUDIO_DIR)

    def _is_stale(self, path: Path) -> bool:
        try:
            return time.time() - path.stat().st_mtime > STALE_FILE_SECONDS
        except OSError:
            return False

    def _cleanup(self, video_id: str, prefix: str) -> None:
        """
        Delete leftovers before a new download.

        Removes files with this request's prefix, untokenized files for the
        video and tokenized files old enough to be orphaned. Files of other
        in-flight requests for the same video are left alone.
        """
        if not self.output_directory.exists():
            return

        for path in self.output_directory.iterdir():
            name = path.name
            if (
                name.startswith(prefix)
                or name.startswith(f"{video_id}.")
                or (name.startswith(f"{video_id}-") and self._is_stale(path))
            ):
                try:
                    path.unlink()
                    logging.debug(f"Removed stale audio file: {path}")
                except OSError as e:
                    logging.warning(f"Could not remove stale audio file {path}: {e}")

    def _find_output(self, prefix: str) -> Optional[Path]:
        for path in self.output_directory.iterdir():
            if path.name.startswith(prefix) and path.is_file():
                return path
        return None

    def _select_audio_stream(self, yt: YouTube):
        """Pick the highest bitrate audio stream, preferring m4a then webm."""
        for subtype, extension in PREFERRED_AUDIO_SUBTYPES:
            stream = yt.streams.filter(only_audio=True, subtype=subtype).order_by('abr').last()
            if stream is not None:
                return stream, extension

        stream = yt.streams.filter(only_audio=True).order_by('abr').last()
        if stream is None:
            raise ValueError("No audio stream available")
        return stream, stream.subtype or "audio"

    def _download_sync(self, video_id: str, prefix: str) -> None:
        yt = YouTube(video_url(video_id))
        audio_stream, extension = self._select_audio_stream(yt)
        filename = f"{prefix}.{extension}"

        logging.info(f"Downloading audio: {video_id} ({getattr(audio_stream, 'abr', 'unknown')})")
        audio_stream.download(output_path=str(self.output_directory), filename=filename)

    async def download_audio(self, video_id: str, token: Optional[str] = None) -> AudioArtifact:
        """
        Download audio for a video.

        Args:
            video_id: YouTube video ID
            token: Request-scoped unique token; generated when omitted

        Returns:
            AudioArtifact owned by the caller, who must delete it

        Raises:
            DownloadError: the download failed or produced no file
        """
        token = token or uuid.uuid4().hex
        prefix = f"{video_id}-{token}"

        os.makedirs(self.output_directory, exist_ok=True)
        self._cleanup(video_id, prefix)

        try:
            await asyncio.to_thread(self._download_sync, video_id, prefix)
        except Exception as e:
            logging.error(f"Error downloading audio for {video_id}: {str(e)}")
            raise DownloadError(video_id, str(e), cause=e) from e

        output = self._find_output(prefix)
        if output is None:
            raise DownloadError(video_id, "no file produced")

        logging.info(f"Audio saved to: {output}")
        return AudioArtifact(path=str(output), video_id=video_id, token=token)
