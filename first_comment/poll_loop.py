"""Poll a channel's uploads and comment on the first new video"""

import enum
import logging
import time
from dataclasses import dataclass
from typing import Optional

from .comment_poster import PostFailure

logger = logging.getLogger(__name__)


class InitializationFailure(Exception):
    pass


class PollState(enum.Enum):
    INITIALIZING = "initializing"
    WAITING = "waiting"
    RESOLVING = "resolving"
    COMPARING = "comparing"
    POSTING = "posting"
    SUCCEEDED = "succeeded"
    RETRY_EXHAUSTED = "retry_exhausted"
    DEADLINE_REACHED = "deadline_reached"

    @property
    def is_terminal(self) -> bool:
        return self in (PollState.SUCCEEDED, PollState.RETRY_EXHAUSTED, PollState.DEADLINE_REACHED)


@dataclass(frozen=True)
class PollOutcome:
    state: PollState
    video_id: Optional[str]
    retries: int
    elapsed: float

    @property
    def succeeded(self) -> bool:
        return self.state is PollState.SUCCEEDED


class SystemClock:
    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


def format_duration(seconds: float) -> str:
    seconds = int(seconds)
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs:
        parts.append(f"{secs}s")

    return " ".join(parts) or "0s"


class PollLoop:
    """Waits for a channel to publish a new video and comments on it once.

    The loop runs ``INITIALIZING -> (WAITING -> RESOLVING -> COMPARING ->
    POSTING)*`` until it reaches one of three terminal states:

    * ``SUCCEEDED``: the comment was posted.
    * ``RETRY_EXHAUSTED``: ``max_retries`` post attempts failed.
    * ``DEADLINE_REACHED``: the wait limit passed with no new video.

    The deadline is only checked right after each sleep, so a run may
    overshoot it by at most one poll interval plus the network calls of
    that tick.

    A failed post leaves the baseline untouched, so the same video is tried
    again on the next tick and each try spends one retry.
    """

    def __init__(self, resolver, poster, channel_id: str, comment: str,
                 wait_limit: float, poll_interval: float = 60.0, max_retries: int = 3,
                 clock=None):
        self.resolver = resolver
        self.poster = poster
        self.channel_id = channel_id
        self.comment = comment
        self.wait_limit = wait_limit
        self.poll_interval = poll_interval
        self.max_retries = max_retries
        self.clock = clock or SystemClock()

        self.state = PollState.INITIALIZING
        self.playlist_id: Optional[str] = None
        self.last_seen_video_id: Optional[str] = None
        self.retries = 0

    @classmethod
    def from_settings(cls, settings, resolver, poster, clock=None) -> "PollLoop":
        return cls(
            resolver,
            poster,
            channel_id=settings.channel_id,
            comment=settings.comment,
            wait_limit=settings.wait_limit_seconds,
            poll_interval=settings.poll_interval,
            max_retries=settings.max_retries,
            clock=clock,
        )

    def _transition(self, state: PollState) -> None:
        logger.debug(f"{self.state.value} -> {state.value}")
        self.state = state

    def _initialize(self) -> None:
        self.playlist_id = self.resolver.resolve_uploads_collection(self.channel_id)
        if not self.playlist_id:
            raise InitializationFailure(
                f"Failed to get the uploads playlist of channel {self.channel_id}. "
                "Check the channel ID and that the account can read it."
            )
        logger.info(f"📋 Uploads playlist: {self.playlist_id}")

        self.last_seen_video_id = self.resolver.resolve_latest_video(self.playlist_id)
        if self.last_seen_video_id:
            logger.info(f"📹 Latest video at start: {self.last_seen_video_id}")
        else:
            logger.info("📹 No eligible video at start")

    def run(self) -> PollOutcome:
        self.state = PollState.INITIALIZING
        self._initialize()

        started_at = self.clock.now()
        deadline = started_at + self.wait_limit
        logger.info(
            f"⏳ Polling every {format_duration(self.poll_interval)} "
            f"for up to {format_duration(self.wait_limit)}"
        )

        video_id: Optional[str] = None
        self._transition(PollState.WAITING)

        while not self.state.is_terminal:
            if self.state is PollState.WAITING:
                self.clock.sleep(self.poll_interval)
                if self.clock.now() >= deadline:
                    logger.info(f"⌛ The wait limit of {format_duration(self.wait_limit)} was reached")
                    self._transition(PollState.DEADLINE_REACHED)
                else:
                    self._transition(PollState.RESOLVING)

            elif self.state is PollState.RESOLVING:
                video_id = self.resolver.resolve_latest_video(self.playlist_id)
                if video_id is None:
                    self._transition(PollState.WAITING)
                else:
                    logger.debug(f"Latest video: {video_id}")
                    self._transition(PollState.COMPARING)

            elif self.state is PollState.COMPARING:
                if video_id == self.last_seen_video_id:
                    self._transition(PollState.WAITING)
                else:
                    logger.info(f"🆕 New video published: {video_id}")
                    self._transition(PollState.POSTING)

            elif self.state is PollState.POSTING:
                try:
                    self.poster.post_comment(video_id, self.comment)
                except PostFailure as e:
                    self.retries += 1
                    logger.error(f"❌ {e} (attempt {self.retries}/{self.max_retries})")
                    if self.retries >= self.max_retries:
                        logger.error(
                            f"❌ Giving up after {self.retries} failed comment attempts. "
                            "Check that the token has the youtube.force-ssl scope and quota is left."
                        )
                        self._transition(PollState.RETRY_EXHAUSTED)
                    else:
                        self._transition(PollState.WAITING)
                else:
                    logger.info(f"✅ Comment created on {video_id}")
                    self._transition(PollState.SUCCEEDED)

        elapsed = self.clock.now() - started_at
        logger.info(f"The elapsed time was {format_duration(elapsed)}")
        return PollOutcome(
            state=self.state,
            video_id=video_id if self.state is not PollState.DEADLINE_REACHED else None,
            retries=self.retries,
            elapsed=elapsed,
        )
