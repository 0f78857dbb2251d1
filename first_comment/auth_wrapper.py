"""Auth wrapper for the Google installed-app OAuth flow."""

import logging
from pathlib import Path
from typing import Callable, Optional

from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from .retry import retry_with_backoff

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/youtube.readonly",
    "https://www.googleapis.com/auth/youtube.force-ssl",
]


class AuthError(Exception):
    pass


class AuthWrapper:
    AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
    TOKEN_URI = "https://oauth2.googleapis.com/token"

    def __init__(self, client_id: str, client_secret: str, token_file: Path,
                 run_flow: Optional[Callable[[InstalledAppFlow], Credentials]] = None):
        if not client_id or not client_secret:
            raise ValueError("Google client ID and secret are required for authentication")

        self.client_id = client_id
        self.client_secret = client_secret
        self.token_file = Path(token_file)
        self._run_flow = run_flow or (lambda flow: flow.run_local_server(port=0))

    def authenticate(self) -> Credentials:
        """Return valid credentials, reusing the cached token when possible.

        Both scopes are requested in one consent so that the comment scope is
        already granted by the time a new video shows up.
        """
        credentials = self._load_cached()

        if credentials and credentials.valid:
            logger.info("✅ Using cached YouTube credentials")
            return credentials

        if credentials and credentials.expired and credentials.refresh_token:
            try:
                self._refresh(credentials)
                logger.info("✅ YouTube credentials refreshed")
            except RefreshError as exc:
                logger.warning(f"Cached token was rejected ({exc}), starting a new login")
                credentials = None
            except TransportError as exc:
                raise AuthError(f"Could not reach Google to refresh the token: {exc}") from exc
        else:
            credentials = None

        if credentials is None:
            credentials = self._login()

        self._save(credentials)
        return credentials

    def _load_cached(self) -> Optional[Credentials]:
        if not self.token_file.exists():
            logger.debug(f"No cached token at {self.token_file}")
            return None
        try:
            # Passing scopes here would replace the ones the token was granted with
            credentials = Credentials.from_authorized_user_file(str(self.token_file))
        except (ValueError, OSError) as exc:
            logger.warning(f"Ignoring unreadable token file {self.token_file}: {exc}")
            return None
        if not credentials.has_scopes(SCOPES):
            logger.info("Cached token lacks required scopes, a new login is needed")
            return None
        return credentials

    @retry_with_backoff(max_retries=3, initial_delay=2.0, exceptions=(TransportError,))
    def _refresh(self, credentials: Credentials) -> None:
        credentials.refresh(Request())

    def _login(self) -> Credentials:
        client_config = {
            "installed": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": self.AUTH_URI,
                "token_uri": self.TOKEN_URI,
                "redirect_uris": ["http://localhost"],
            }
        }
        flow = InstalledAppFlow.from_client_config(client_config, SCOPES)
        logger.info("🔐 Opening browser for Google sign-in...")
        try:
            credentials = self._run_flow(flow)
        except Exception as exc:
            raise AuthError(f"Google sign-in failed: {exc}") from exc
        if not credentials:
            raise AuthError("Google sign-in returned no credentials")
        logger.info("✅ Google authentication successful")
        return credentials

    def _save(self, credentials: Credentials) -> None:
        try:
            self.token_file.parent.mkdir(parents=True, exist_ok=True)
            self.token_file.write_text(credentials.to_json())
        except OSError as exc:
            raise AuthError(f"Could not write token file {self.token_file}: {exc}") from exc
        logger.debug(f"Token saved to {self.token_file}")
