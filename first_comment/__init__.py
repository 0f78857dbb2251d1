"""
YouTube First Comment Watcher

Structure:
    - config.py: Config file/env lookup and the frozen WatchSettings
    - auth_wrapper.py: Google installed-app OAuth with a cached token
    - youtube_client.py: Typed YouTube Data API client
    - video_resolver.py: Uploads playlist and latest non-short video
    - comment_poster.py: Post the top-level comment
    - poll_loop.py: Poll, detect the new video, comment, bounded retries
"""
