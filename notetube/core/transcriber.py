"""
Module for transcribing audio files using Groq's Whisper API.
"""

import asyncio
import os
from pathlib import Path
from typing import Optional

from groq import AsyncGroq

from notetube.config import config
from notetube.exceptions import ConfigurationError, TranscriptionError
from notetube.models.schemas import AudioArtifact
from notetube.utils.logger import logging


def _remove_file(path: Path) -> None:
    try:
        path.unlink()
        logging.debug(f"Deleted temp audio file: {path}")
    except FileNotFoundError:
        pass
    except OSError as e:
        logging.error(f"Failed to delete temp file {path}: {e}")


class AudioTranscriber:
    """Class to handle audio transcription operations."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = config.TRANSCRIPTION_MODEL,
        client: Optional[AsyncGroq] = None,
    ):
        """
        Initialize the transcriber with API key.

        Args:
            api_key: Groq API key (if None, will try to get from environment)
            model: Whisper model name
            client: Preconfigured Groq client
        """
        self.model = model
        self.api_key = api_key or os.getenv("GROQ_API_KEY")
        if client is None and not self.api_key:
            raise ConfigurationError("GROQ_API_KEY")

        self.client = client or AsyncGroq(api_key=self.api_key)

    async def transcribe(self, artifact: AudioArtifact) -> str:
        """
        Transcribe an audio artifact to plain text.

        The artifact's file is deleted on every exit path.

        Args:
            artifact: Downloaded audio owned by the caller

        Returns:
            Transcript text

        Raises:
            TranscriptionError: the file is missing, the API call failed or returned no text
        """
        audio_file_path = Path(artifact.path)
        logging.info(f"Transcribing audio file: {audio_file_path}")

        try:
            if not audio_file_path.is_file():
                raise FileNotFoundError(f"Audio file not found at {audio_file_path}")

            audio_bytes = await asyncio.to_thread(audio_file_path.read_bytes)
            transcription = await self.client.audio.transcriptions.create(
                file=(audio_file_path.name, audio_bytes),
                model=self.model,
                response_format="text",
            )
        except Exception as e:
            logging.error(f"Whisper transcription error: {str(e)}")
            raise TranscriptionError(audio_file_path.name, cause=e) from e
        finally:
            _remove_file(audio_file_path)

        text = transcription if isinstance(transcription, str) else getattr(transcription, "text", "")
        text = (text or "").strip()
        if not text:
            raise TranscriptionError(audio_file_path.name, cause=ValueError("Empty transcription"))

        logging.info("Transcription complete.")
        return text
