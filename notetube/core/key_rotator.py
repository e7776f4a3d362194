"""
API key rotation for the quota-limited YouTube Data API.
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urljoin

import httpx

from notetube.config import config
from notetube.exceptions import AllKeysExhaustedError, ConfigurationError
from notetube.utils.logger import logging

QUOTA_STATUS_CODES = (400, 403)


def is_quota_error(status_code: Optional[int], message: str) -> bool:
    """Whether a failed response means this key is used up or rejected."""
    return status_code in QUOTA_STATUS_CODES or "quota" in (message or "").lower()


def _error_message(response: httpx.Response) -> str:
    """Pull the Google API error message out of a failed response."""
    try:
        message = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        message = None
    if isinstance(message, str) and message:
        return message
    return response.text or response.reason_phrase


class KeyPool:
    """Ordered API keys plus a cursor on the last key that worked."""

    def __init__(self, keys: Sequence[str]):
        self.keys: List[str] = [key.strip() for key in keys if key and key.strip()]
        self.current_index = 0
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self.keys)

    async def mark_used(self, index: int) -> None:
        """Move the cursor to the key that just succeeded."""
        async with self._lock:
            if self.current_index != index:
                logging.info(f"Successfully switched to YouTube key {index + 1}")
            self.current_index = index


class KeyRotator:
    """Issues GET requests against an API, rotating keys on quota/auth failures."""

    def __init__(
        self,
        pool: KeyPool,
        http_client: Optional[httpx.AsyncClient] = None,
        base_url: str = config.YOUTUBE_API_BASE_URL,
    ):
        self.pool = pool
        self.base_url = base_url
        self.http_client = http_client or httpx.AsyncClient(timeout=config.HTTP_TIMEOUT_SECONDS)

    async def call_with_rotation(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Call an endpoint, trying each key at most once starting from the cursor.

        Args:
            endpoint: Logical endpoint name, e.g. "videos" or "search"
            params: Query parameters (the key is added per attempt)

        Returns:
            Decoded JSON body of the first successful response

        Raises:
            ConfigurationError: The pool holds no keys
            AllKeysExhaustedError: Every key was rejected with a quota/auth error
            httpx.HTTPError, ValueError: Any other failure, raised as-is without rotating
        """
        if not len(self.pool):
            raise ConfigurationError("YOUTUBE_API_KEYS")

        url = urljoin(self.base_url, endpoint)
        size = len(self.pool)
        start = self.pool.current_index % size
        last_error: Optional[Exception] = None

        for offset in range(size):
            index = (start + offset) % size
            key = self.pool.keys[index]

            try:
                response = await self.http_client.get(url, params={**params, "key": key})
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                message = _error_message(e.response)
                if not is_quota_error(status, message):
                    raise
                logging.warning(
                    f"YouTube key {index + 1} failed ({status}): {message[:100]}. Trying next key..."
                )
                last_error = e
                continue

            await self.pool.mark_used(index)
            return data

        raise AllKeysExhaustedError(endpoint, size, cause=last_error)

    async def aclose(self) -> None:
        await self.http_client.aclose()
