"""
API client for communicating with the NoteTube backend.
"""

import json
import requests
from typing import Dict, Iterator, List, Any, Optional
from urllib.parse import urljoin
from notetube.config import config


def parse_sse_lines(lines: Iterator[str]) -> Iterator[Dict[str, Any]]:
    """Decode `data: <json>` frames; other SSE fields and blank lines are skipped."""
    for line in lines:
        if not line or not line.startswith("data:"):
            continue
        yield json.loads(line[len("data:"):].strip())


class ApiClient:
    """Client for interacting with the NoteTube API."""

    def __init__(self, user_id: int, base_url: str = config.PUBLIC_URL, timeout: float = 300):
        """
        Initialize the API client.

        Args:
            user_id: Sent as X-User-Id on every request
            base_url: Base URL of the API
            timeout: Seconds to wait for the server
        """
        self.base_url = base_url
        self.api_base = urljoin(base_url, "/api/v1/")
        self.headers = {"X-User-Id": str(user_id)}
        self.timeout = timeout

    def _url(self, endpoint: str) -> str:
        """Get the full URL for an endpoint."""
        return urljoin(self.api_base, endpoint)

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = requests.post(self._url(endpoint), json=payload, headers=self.headers, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def process_video(self, url_or_id: str, manual_transcript: Optional[str] = None) -> Iterator[Dict[str, Any]]:
        """
        Generate notes for a video, yielding progress events as they arrive.

        Args:
            url_or_id: YouTube URL or video ID
            manual_transcript: Transcript to use instead of fetching one

        Yields:
            Event dictionaries with a "type" of status, error or done
        """
        payload = {"url": url_or_id}
        if manual_transcript:
            payload["manual_transcript"] = manual_transcript

        with requests.post(
            self._url("process-video"),
            json=payload,
            headers=self.headers,
            stream=True,
            timeout=self.timeout
        ) as response:
            response.raise_for_status()
            yield from parse_sse_lines(response.iter_lines(decode_unicode=True))

    def chat(self, video_title: str, notes: str, messages: List[Dict[str, str]]) -> str:
        """
        Ask a question about a video.

        Args:
            video_title: Title of the video
            notes: Notes used as context
            messages: Conversation so far, ending with the user's question

        Returns:
            Assistant reply
        """
        data = self._post("chat", {"messages": messages, "context": notes, "video_title": video_title})
        return data["reply"]

    def generate_flashcards(self, video_title: str, notes: str) -> List[Dict[str, Any]]:
        data = self._post("generate-flashcards", {"notes": notes, "video_title": video_title})
        return data["flashcards"]

    def generate_quiz(self, video_title: str, notes: str, video_id: Optional[str] = None) -> List[Dict[str, Any]]:
        data = self._post("generate-quiz", {"notes": notes, "video_title": video_title, "video_id": video_id})
        return data["quiz"]

    def report_mistake(self, video_id: str, question: str, correct_answer: str, user_answer: str) -> Dict[str, Any]:
        return self._post("report-mistake", {
            "video_id": video_id,
            "question": question,
            "correct_answer": correct_answer,
            "user_answer": user_answer
        })

    def synthesize_notes(self, note_ids: List[int]) -> str:
        data = self._post("synthesize-notes", {"note_ids": note_ids})
        return data["master_guide"]

    def recommendations(self, video_title: str, notes: Optional[str] = None) -> List[Dict[str, Any]]:
        data = self._post("recommendations", {"video_title": video_title, "notes": notes})
        return data["recommendations"]

    def get_history(self) -> List[Dict[str, Any]]:
        """Get the user's most recent notes."""
        response = requests.get(self._url("history"), headers=self.headers, timeout=self.timeout)
        response.raise_for_status()
        return response.json()
