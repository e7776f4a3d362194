"""
YouTube Data API v3 lookups (video metadata and search) over rotating keys.
"""

from typing import Any, Dict, Optional

from notetube.core.key_rotator import KeyRotator
from notetube.models.schemas import Recommendation, VideoInfo
from notetube.utils.logger import logging


def _pick_thumbnail(thumbnails: Dict[str, Any], *sizes: str) -> Optional[str]:
    for size in sizes:
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return None


class YouTubeDataClient:
    """Metadata provider backed by the YouTube Data API."""

    def __init__(self, rotator: KeyRotator):
        self.rotator = rotator

    async def get_video_metadata(self, video_id: str) -> Optional[VideoInfo]:
        """
        Look up title, thumbnail and caption flag for a video.

        Returns:
            VideoInfo, or None when the API knows no such video
        """
        data = await self.rotator.call_with_rotation(
            "videos", {"part": "snippet,contentDetails", "id": video_id}
        )
        items = data.get("items") or []
        if not items:
            logging.warning(f"Video not found: {video_id}")
            return None

        video = items[0]
        snippet = video.get("snippet", {})
        details = video.get("contentDetails", {})

        return VideoInfo(
            id=video.get("id", video_id),
            title=snippet.get("title", ""),
            channel_title=snippet.get("channelTitle"),
            thumbnail=_pick_thumbnail(snippet.get("thumbnails", {}), "maxres", "high", "medium", "default"),
            description=snippet.get("description"),
            has_captions=str(details.get("caption", "false")).lower() == "true",
        )

    async def search_video(self, query: str) -> Recommendation:
        """Resolve a search query to its top video hit, if any."""
        data = await self.rotator.call_with_rotation(
            "search", {"part": "snippet", "maxResults": 1, "q": query, "type": "video"}
        )
        items = data.get("items") or []
        if not items:
            return Recommendation(query=query)

        item = items[0]
        snippet = item.get("snippet", {})
        return Recommendation(
            query=query,
            videoId=item.get("id", {}).get("videoId"),
            title=snippet.get("title"),
            thumbnail=_pick_thumbnail(snippet.get("thumbnails", {}), "medium", "high", "default"),
            channel=snippet.get("channelTitle"),
        )
