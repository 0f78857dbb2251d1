"""Top-level comment poster"""

import logging

from .youtube_client import YouTubeApiError

logger = logging.getLogger(__name__)


class PostFailure(Exception):
    def __init__(self, video_id: str, cause: str):
        super().__init__(f"Failed to post comment on {video_id}: {cause}")
        self.video_id = video_id
        self.cause = cause


class CommentPoster:
    def __init__(self, client, dry_run: bool = False):
        self.client = client
        self.dry_run = dry_run

    def post_comment(self, video_id: str, text: str) -> None:
        # No idempotency key exists for comment threads: a timeout after the
        # server committed the comment can lead to a duplicate on retry.
        if self.dry_run:
            logger.info(f"🧪 DRY RUN: Would comment on {video_id}: {text!r}")
            return

        try:
            thread = self.client.insert_comment_thread(video_id, text)
        except YouTubeApiError as e:
            raise PostFailure(video_id, str(e)) from e

        if thread.moderation_status == "heldForReview":
            logger.warning(f"Comment {thread.thread_id} on {video_id} is held for review")
        else:
            logger.info(f"💬 Comment {thread.thread_id} created on {video_id}")
