"""Custom exceptions for the NoteTube application."""

from typing import Optional


class ConfigurationError(Exception):
    """Raised when a required credential or setting is missing."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"Missing configuration: {setting}")


class AllKeysExhaustedError(Exception):
    """Raised when every key in one full rotation was rejected."""

    def __init__(self, endpoint: str, attempts: int, cause: Optional[Exception] = None):
        self.endpoint = endpoint
        self.attempts = attempts
        self.cause = cause
        super().__init__(f"All {attempts} API keys failed for '{endpoint}'")


class DownloadError(Exception):
    """Raised when audio for a video could not be downloaded."""

    def __init__(self, video_id: str, reason: str, cause: Optional[Exception] = None):
        self.video_id = video_id
        self.reason = reason
        self.cause = cause
        super().__init__(f"Audio download failed for video '{video_id}': {reason}")


class TranscriptionError(Exception):
    """Raised when audio transcription fails."""

    def __init__(self, file_name: str, cause: Optional[Exception] = None):
        self.file_name = file_name
        self.cause = cause
        super().__init__(f"Failed to transcribe audio file '{file_name}'")


class CaptionsUnavailableError(Exception):
    """Raised when a video has no usable caption track."""

    def __init__(self, video_id: str, reason: str, cause: Optional[Exception] = None):
        self.video_id = video_id
        self.reason = reason
        self.cause = cause
        super().__init__(reason)


class TranscriptUnavailableError(Exception):
    """Raised when both the caption path and the audio fallback failed."""

    def __init__(self, video_id: str, caption_error: Exception, fallback_error: Exception):
        self.video_id = video_id
        self.caption_error = caption_error
        self.fallback_error = fallback_error
        super().__init__(
            f"Could not fetch transcript (even via audio): {caption_error}"
        )


class NoteGenerationError(Exception):
    """Raised when the LLM call for notes or a study tool fails."""

    def __init__(self, task: str, cause: Optional[Exception] = None):
        self.task = task
        self.cause = cause
        super().__init__(f"Failed to generate {task}")


class StudyToolError(Exception):
    """Raised when LLM output cannot be parsed into the expected shape."""

    def __init__(self, tool: str, raw_output: str):
        self.tool = tool
        self.raw_output = raw_output
        super().__init__(f"Could not parse {tool} from model output")
