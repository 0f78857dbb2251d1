"""Resolve a channel's uploads playlist and its latest non-short video"""

import logging
from typing import Optional

from .youtube_client import YouTubeApiError

logger = logging.getLogger(__name__)

SHORTS_MARKER = "#shorts"


class VideoResolver:
    """Every failure here collapses to ``None``; callers only see "no signal"."""

    def __init__(self, client):
        self.client = client

    def resolve_uploads_collection(self, channel_id: str) -> Optional[str]:
        try:
            channel = self.client.get_channel_content(channel_id)
        except YouTubeApiError as e:
            logger.warning(f"Could not fetch channel {channel_id}: {e}")
            return None

        if channel is None:
            logger.warning(f"Channel {channel_id} not found")
            return None
        if not channel.uploads_playlist_id:
            logger.warning(f"Channel {channel_id} has no uploads playlist")
            return None

        return channel.uploads_playlist_id

    def resolve_latest_video(self, playlist_id: str) -> Optional[str]:
        try:
            item = self.client.get_latest_playlist_item(playlist_id)
        except YouTubeApiError as e:
            logger.warning(f"Could not fetch latest item of {playlist_id}: {e}")
            return None

        if item is None:
            logger.debug(f"Playlist {playlist_id} is empty")
            return None

        if SHORTS_MARKER in item.description:
            logger.info(f"Latest video {item.video_id} is a short, ignoring it")
            return None

        return item.video_id
