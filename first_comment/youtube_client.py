"""YouTube Data API v3 client over an authorized requests session"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from google.auth.transport.requests import AuthorizedSession

logger = logging.getLogger(__name__)


class YouTubeApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None, reason: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


@dataclass(frozen=True)
class ChannelContentDetails:
    channel_id: str
    uploads_playlist_id: Optional[str]

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "ChannelContentDetails":
        details = item.get('contentDetails') or {}
        playlists = details.get('relatedPlaylists') or {}
        return cls(
            channel_id=item.get('id', ''),
            uploads_playlist_id=playlists.get('uploads') or None,
        )


@dataclass(frozen=True)
class PlaylistItem:
    video_id: Optional[str]
    title: str
    description: str
    published_at: Optional[str]

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "PlaylistItem":
        snippet = item.get('snippet') or {}
        resource = snippet.get('resourceId') or {}
        return cls(
            video_id=resource.get('videoId') or None,
            title=snippet.get('title') or '',
            description=snippet.get('description') or '',
            published_at=snippet.get('publishedAt'),
        )


@dataclass(frozen=True)
class CommentThread:
    thread_id: str
    video_id: str
    text: str
    moderation_status: Optional[str]

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "CommentThread":
        snippet = payload.get('snippet') or {}
        top_level = (snippet.get('topLevelComment') or {}).get('snippet') or {}
        return cls(
            thread_id=payload.get('id', ''),
            video_id=snippet.get('videoId', ''),
            text=top_level.get('textOriginal') or top_level.get('textDisplay') or '',
            moderation_status=top_level.get('moderationStatus'),
        )


class YouTubeClient:
    BASE_URL = "https://www.googleapis.com/youtube/v3"

    def __init__(self, session: requests.Session, timeout: float = 30.0):
        self.session = session
        self.timeout = timeout

    @classmethod
    def from_credentials(cls, credentials, timeout: float = 30.0) -> "YouTubeClient":
        return cls(AuthorizedSession(credentials), timeout=timeout)

    def get_channel_content(self, channel_id: str) -> Optional[ChannelContentDetails]:
        data = self._request('GET', 'channels', params={
            'part': 'contentDetails',
            'id': channel_id,
        })
        items = data.get('items') or []
        if not items:
            return None
        return ChannelContentDetails.from_api(items[0])

    def get_latest_playlist_item(self, playlist_id: str) -> Optional[PlaylistItem]:
        data = self._request('GET', 'playlistItems', params={
            'part': 'snippet',
            'playlistId': playlist_id,
            'maxResults': 1,
        })
        items = data.get('items') or []
        if not items:
            return None
        return PlaylistItem.from_api(items[0])

    def insert_comment_thread(self, video_id: str, text: str) -> CommentThread:
        body = {
            'snippet': {
                'videoId': video_id,
                'topLevelComment': {
                    'snippet': {
                        'textOriginal': text,
                    }
                },
            }
        }
        data = self._request('POST', 'commentThreads', params={'part': 'snippet'}, json=body)
        return CommentThread.from_api(data)

    def _request(self, method: str, resource: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.BASE_URL}/{resource}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise YouTubeApiError(f"{method} {resource} failed: {exc}") from exc

        if response.status_code >= 400:
            message, reason = self._extract_error(response)
            raise YouTubeApiError(
                f"{method} {resource} failed: HTTP {response.status_code}: {message}",
                status_code=response.status_code,
                reason=reason,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise YouTubeApiError(f"{method} {resource} returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise YouTubeApiError(f"{method} {resource} returned an unexpected payload")
        return data

    @staticmethod
    def _extract_error(response: requests.Response):
        try:
            error = response.json().get('error', {})
            errors = error.get('errors') or [{}]
            return error.get('message') or response.text[:200], errors[0].get('reason')
        except (ValueError, AttributeError):
            return response.text[:200], None
