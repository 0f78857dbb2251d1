#!/usr/bin/env python3
"""
YouTube First Comment Watcher

Polls a channel and posts a comment on the first new (non-short) video.
Supports configuration via config.yaml, environment variables and CLI flags.
"""

import argparse
import logging
import sys
from typing import List, Optional

from first_comment.auth_wrapper import AuthWrapper, AuthError
from first_comment.comment_poster import CommentPoster
from first_comment.config import Config, ConfigError, WatchSettings
from first_comment.logger_config import setup_logging
from first_comment.poll_loop import InitializationFailure, PollLoop, PollState
from first_comment.video_resolver import VideoResolver
from first_comment.youtube_client import YouTubeClient

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_RETRY_EXHAUSTED = 2
EXIT_DEADLINE_REACHED = 3
EXIT_INTERRUPTED = 130

EXIT_CODES = {
    PollState.SUCCEEDED: EXIT_SUCCESS,
    PollState.RETRY_EXHAUSTED: EXIT_RETRY_EXHAUSTED,
    PollState.DEADLINE_REACHED: EXIT_DEADLINE_REACHED,
}

logger = logging.getLogger("yfc")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yfc",
        description="Create a comment on YouTube when a new video is published for the specified channel",
    )
    parser.add_argument("--config", default=None, help="YAML config file (default: config.yaml)")
    parser.add_argument("--google-client-id", dest="client_id", help="Google client ID")
    parser.add_argument("--google-client-secret", dest="client_secret", help="Google client secret")
    parser.add_argument("--comment", help="The comment body")
    parser.add_argument("--channel-id", help="YouTube channel ID")
    parser.add_argument("--poll-interval", dest="poll_interval", type=float,
                        help="Poll interval in seconds (default: 60)")
    parser.add_argument("--wait-limit", dest="wait_limit_minutes", type=float,
                        help="Max wait time in minutes")
    parser.add_argument("--max-retries", dest="max_retries", type=int,
                        help="Failed comment attempts before giving up (default: 3)")
    parser.add_argument("--timeout", dest="request_timeout", type=float,
                        help="Per-request timeout in seconds (default: 30)")
    parser.add_argument("--token-file", dest="token_file", help="Where the OAuth token is cached")
    parser.add_argument("--dry-run", dest="dry_run", action="store_true", default=None,
                        help="Detect the new video but only log the comment")
    parser.add_argument("--log-file", dest="log_file", help="Also write logs to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = Config(args.config)
    except ConfigError as exc:
        setup_logging()
        logger.error(f"❌ {exc}")
        return EXIT_FAILURE

    log_file = args.log_file or config.get('logging.log_file', '')
    try:
        setup_logging(
            log_level=config.get('logging.level', 'INFO'),
            log_file=log_file if log_file else None,
            verbose=args.verbose or config.get_bool('logging.verbose', False),
        )
    except OSError as exc:
        setup_logging()
        logger.error(f"❌ Cannot open log file {log_file}: {exc}")
        return EXIT_FAILURE

    overrides = {
        name: getattr(args, name)
        for name in ('client_id', 'client_secret', 'comment', 'channel_id', 'poll_interval',
                     'wait_limit_minutes', 'max_retries', 'request_timeout', 'token_file', 'dry_run')
    }
    try:
        settings = WatchSettings.from_sources(config, overrides)
    except ConfigError as exc:
        logger.error(f"❌ Invalid configuration: {exc}")
        return EXIT_FAILURE

    logger.info("=" * 80)
    logger.info("💬 YouTube First Comment Watcher")
    logger.info("=" * 80)
    if settings.dry_run:
        logger.info("🧪 DRY RUN MODE")
    logger.info(f"Channel: {settings.channel_id}")
    logger.info(f"Poll interval: {settings.poll_interval}s")
    logger.info(f"Wait limit: {settings.wait_limit_minutes}min")
    logger.info(f"Max retries: {settings.max_retries}")
    logger.info("=" * 80)

    try:
        credentials = AuthWrapper(
            settings.client_id, settings.client_secret, settings.token_file
        ).authenticate()
        client = YouTubeClient.from_credentials(credentials, timeout=settings.request_timeout)

        loop = PollLoop.from_settings(
            settings,
            resolver=VideoResolver(client),
            poster=CommentPoster(client, dry_run=settings.dry_run),
        )
        outcome = loop.run()
    except AuthError as exc:
        logger.error(f"❌ Authentication failed: {exc}")
        return EXIT_FAILURE
    except InitializationFailure as exc:
        logger.error(f"❌ {exc}")
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.warning("⚠️  Interrupted by user")
        return EXIT_INTERRUPTED

    if outcome.state is PollState.RETRY_EXHAUSTED:
        logger.error("❌ Max tries to create a comment was reached")
    elif outcome.state is PollState.DEADLINE_REACHED:
        logger.warning("⌛ No new video was published before the wait limit")

    return EXIT_CODES[outcome.state]


if __name__ == '__main__':
    sys.exit(main())
