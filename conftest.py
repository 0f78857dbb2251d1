import pytest

from first_comment.youtube_client import (
    ChannelContentDetails,
    CommentThread,
    PlaylistItem,
    YouTubeApiError,
)


class FakeClock:
    def __init__(self, start: float = 0.0):
        self.current = start
        self.sleeps = []

    def now(self) -> float:
        return self.current

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += seconds


class FakeYouTubeClient:
    """Scripted stand-in for YouTubeClient.

    ``latest_items`` is consumed one entry per playlist lookup; the last entry
    repeats once the script runs out. Entries may be a PlaylistItem, None, or
    an exception to raise. ``post_results`` works the same way for comments:
    True posts, an exception is raised.
    """

    def __init__(self, uploads_playlist_id="UU123", latest_items=None, post_results=None,
                 channel_error=None):
        self.uploads_playlist_id = uploads_playlist_id
        self.latest_items = list(latest_items or [None])
        self.post_results = list(post_results or [True])
        self.channel_error = channel_error
        self.channel_calls = []
        self.playlist_calls = []
        self.posted = []

    def get_channel_content(self, channel_id):
        self.channel_calls.append(channel_id)
        if self.channel_error:
            raise self.channel_error
        if self.uploads_playlist_id is None:
            return None
        return ChannelContentDetails(channel_id=channel_id, uploads_playlist_id=self.uploads_playlist_id)

    def get_latest_playlist_item(self, playlist_id):
        self.playlist_calls.append(playlist_id)
        entry = self.latest_items.pop(0) if len(self.latest_items) > 1 else self.latest_items[0]
        if isinstance(entry, Exception):
            raise entry
        return entry

    def insert_comment_thread(self, video_id, text):
        self.posted.append((video_id, text))
        result = self.post_results.pop(0) if len(self.post_results) > 1 else self.post_results[0]
        if isinstance(result, Exception):
            raise result
        return CommentThread(thread_id=f"t-{video_id}", video_id=video_id, text=text,
                             moderation_status="published")


def video(video_id, description="A regular upload"):
    return PlaylistItem(video_id=video_id, title=f"Video {video_id}", description=description,
                        published_at="2024-01-01T00:00:00Z")


def short(video_id):
    return video(video_id, description="Quick one #shorts")


def api_error(message="backend error", status_code=500):
    return YouTubeApiError(message, status_code=status_code)


@pytest.fixture
def clock():
    return FakeClock()
