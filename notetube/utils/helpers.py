"""
Helper utility functions for the NoteTube application.
"""

import json
import re
from typing import Any, Optional

VIDEO_ID_PATTERN = re.compile(r"^[0-9A-Za-z_-]{11}$")

_URL_PATTERNS = (
    re.compile(r"(?:youtube\.com/watch\?(?:.*&)?v=)([0-9A-Za-z_-]{11})"),
    re.compile(r"(?:youtu\.be/)([0-9A-Za-z_-]{11})"),
    re.compile(r"(?:youtube\.com/embed/)([0-9A-Za-z_-]{11})"),
    re.compile(r"(?:youtube\.com/shorts/)([0-9A-Za-z_-]{11})"),
)

_CODE_FENCE = re.compile(r"```(?:json)?")


def extract_video_id(url_or_id: str) -> Optional[str]:
    """
    Extract the 11 character video ID from a YouTube URL.

    Accepts watch, youtu.be, embed and shorts URLs, or a bare ID.

    Args:
        url_or_id: URL or video ID

    Returns:
        Video ID, or None if nothing matched
    """
    if not url_or_id:
        return None

    candidate = url_or_id.strip()
    if VIDEO_ID_PATTERN.match(candidate):
        return candidate

    for pattern in _URL_PATTERNS:
        match = pattern.search(candidate)
        if match:
            return match.group(1)
    return None


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences models like to wrap JSON in."""
    return _CODE_FENCE.sub("", text).strip()


def parse_json_output(text: str) -> Any:
    """
    Parse JSON returned by a model.

    Raises:
        ValueError: the text is not valid JSON
    """
    return json.loads(strip_code_fences(text))


def truncate_text(text: str, max_length: int = 100, suffix: str = "") -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
