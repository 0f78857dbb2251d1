"""Configuration management with environment variable and file support"""

import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any, List

from platformdirs import user_cache_dir

MAX_COMMENT_LENGTH = 10000
DEFAULT_TOKEN_FILE = Path(user_cache_dir("yfc", appauthor=False)) / "token.json"


class ConfigError(Exception):
    pass


class Config:
    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or "config.yaml"
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self):
        config_path = Path(self.config_file)
        if not config_path.exists():
            self._config = {}
            return
        try:
            with open(config_path, 'r') as f:
                self._config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not load config file {config_path}: {e}") from e
        if not isinstance(self._config, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")

    def get(self, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        env_key = env_var or key.upper().replace('.', '_')
        env_value = os.getenv(env_key)
        if env_value is not None:
            return env_value

        value = self._config
        for k in key.split('.'):
            if isinstance(value, dict):
                value = value.get(k)
            else:
                value = None
                break
        if value is not None:
            return value

        return default

    def get_bool(self, key: str, default: bool = False, env_var: Optional[str] = None) -> bool:
        value = self.get(key, default, env_var)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ('true', '1', 'yes', 'on')
        return bool(value)

    def get_str(self, key: str, default: str = '', env_var: Optional[str] = None) -> str:
        value = self.get(key, default, env_var)
        if isinstance(value, (dict, list)):
            raise ConfigError(f"{key} must be a single value, got {value!r}")
        return str(value)

    def get_int(self, key: str, default: Optional[int] = None, env_var: Optional[str] = None) -> Optional[int]:
        value = self.get(key, default, env_var)
        if value is None:
            return None
        try:
            return int(value)
        except (ValueError, TypeError):
            raise ConfigError(f"{key} must be an integer, got {value!r}")

    def get_float(self, key: str, default: Optional[float] = None, env_var: Optional[str] = None) -> Optional[float]:
        value = self.get(key, default, env_var)
        if value is None:
            return None
        try:
            return float(value)
        except (ValueError, TypeError):
            raise ConfigError(f"{key} must be a number, got {value!r}")


@dataclass(frozen=True)
class WatchSettings:
    """Everything one run needs, fixed at startup.

    Built once by :meth:`from_sources` and handed to the collaborators; the
    poll loop never goes back to the environment or the config file.
    """
    client_id: str
    client_secret: str
    channel_id: str
    comment: str
    wait_limit_minutes: float
    poll_interval: float = 60.0
    max_retries: int = 3
    request_timeout: float = 30.0
    token_file: Path = DEFAULT_TOKEN_FILE
    dry_run: bool = False

    @property
    def wait_limit_seconds(self) -> float:
        return self.wait_limit_minutes * 60

    def validate(self) -> None:
        problems: List[str] = []
        if not self.client_id:
            problems.append("Google client ID is required (--google-client-id or GOOGLE_CLIENT_ID)")
        if not self.client_secret:
            problems.append("Google client secret is required (--google-client-secret or GOOGLE_CLIENT_SECRET)")
        if not self.channel_id:
            problems.append("channel ID is required (--channel-id or YOUTUBE_CHANNEL_ID)")
        if not isinstance(self.comment, str) or not self.comment.strip():
            problems.append("comment text is required (--comment or COMMENT_TEXT)")
        elif len(self.comment) > MAX_COMMENT_LENGTH:
            problems.append(f"comment is {len(self.comment)} characters, the limit is {MAX_COMMENT_LENGTH}")
        if self.wait_limit_minutes is None or self.wait_limit_minutes <= 0:
            problems.append("wait limit must be a positive number of minutes (--wait-limit)")
        if self.poll_interval <= 0:
            problems.append("poll interval must be positive")
        if self.max_retries < 1:
            problems.append("max retries must be at least 1")
        if self.request_timeout <= 0:
            problems.append("request timeout must be positive")
        if problems:
            raise ConfigError("; ".join(problems))

    @classmethod
    def from_sources(cls, config: Config, overrides: Optional[Dict[str, Any]] = None) -> "WatchSettings":
        """Merge CLI overrides over env/config values and validate the result."""
        overrides = {k: v for k, v in (overrides or {}).items() if v is not None}

        def pick(name, loaded):
            return overrides[name] if name in overrides else loaded

        token_file = pick('token_file', config.get('auth.token_file'))
        settings = cls(
            client_id=pick('client_id', config.get_str('google.client_id')),
            client_secret=pick('client_secret', config.get_str('google.client_secret')),
            channel_id=pick('channel_id', config.get_str('youtube.channel_id')),
            comment=pick('comment', config.get_str('comment.text')),
            wait_limit_minutes=pick('wait_limit_minutes', config.get_float('polling.wait_limit_minutes')),
            poll_interval=pick('poll_interval', config.get_float('polling.interval_seconds', 60.0)),
            max_retries=pick('max_retries', config.get_int('polling.max_retries', 3)),
            request_timeout=pick('request_timeout', config.get_float('api.timeout_seconds', 30.0)),
            token_file=Path(token_file).expanduser() if token_file else DEFAULT_TOKEN_FILE,
            dry_run=pick('dry_run', config.get_bool('modes.dry_run', False)),
        )
        settings.validate()
        return settings
