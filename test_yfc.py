from unittest.mock import MagicMock

import pytest

import yfc
from conftest import FakeClock, FakeYouTubeClient, api_error, video
from first_comment import poll_loop
from first_comment.auth_wrapper import AuthError

BASE_ARGS = [
    "--google-client-id", "id",
    "--google-client-secret", "secret",
    "--channel-id", "UCabc",
    "--comment", "Hello",
    "--wait-limit", "5",
]


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(yfc, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(poll_loop, "SystemClock", FakeClock)
    for key in ("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET", "YOUTUBE_CHANNEL_ID", "COMMENT_TEXT",
                "POLLING_WAIT_LIMIT_MINUTES", "MODES_DRY_RUN"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fake_client(monkeypatch):
    client = FakeYouTubeClient()
    auth = MagicMock()
    monkeypatch.setattr(yfc, "AuthWrapper", auth)
    monkeypatch.setattr(yfc.YouTubeClient, "from_credentials", lambda credentials, timeout: client)
    return client


def test_success_exits_zero(fake_client):
    fake_client.latest_items = [video("v1"), video("v2")]

    assert yfc.main(BASE_ARGS) == yfc.EXIT_SUCCESS
    assert fake_client.posted == [("v2", "Hello")]


def test_deadline_exits_three(fake_client):
    fake_client.latest_items = [video("v1")]

    assert yfc.main(BASE_ARGS) == yfc.EXIT_DEADLINE_REACHED
    assert fake_client.posted == []


def test_retry_exhausted_exits_two(fake_client):
    fake_client.latest_items = [video("v1"), video("v2")]
    fake_client.post_results = [api_error()]

    assert yfc.main(BASE_ARGS + ["--max-retries", "2"]) == yfc.EXIT_RETRY_EXHAUSTED
    assert len(fake_client.posted) == 2


def test_missing_uploads_playlist_exits_one(fake_client):
    fake_client.uploads_playlist_id = None

    assert yfc.main(BASE_ARGS) == yfc.EXIT_FAILURE


def test_dry_run_flag(fake_client):
    fake_client.latest_items = [None, video("v1")]

    assert yfc.main(BASE_ARGS + ["--dry-run"]) == yfc.EXIT_SUCCESS
    assert fake_client.posted == []


def test_invalid_configuration_exits_one(fake_client):
    assert yfc.main(["--channel-id", "UCabc"]) == yfc.EXIT_FAILURE
    yfc.AuthWrapper.assert_not_called()


def test_auth_failure_exits_one(monkeypatch):
    auth = MagicMock()
    auth.return_value.authenticate.side_effect = AuthError("access_denied")
    monkeypatch.setattr(yfc, "AuthWrapper", auth)

    assert yfc.main(BASE_ARGS) == yfc.EXIT_FAILURE


def test_interrupt_exits_130(fake_client, monkeypatch):
    def interrupted(self):
        raise KeyboardInterrupt

    monkeypatch.setattr(yfc.PollLoop, "run", interrupted)

    assert yfc.main(BASE_ARGS) == yfc.EXIT_INTERRUPTED


def test_config_file_supplies_settings(fake_client, tmp_path):
    (tmp_path / "config.yaml").write_text(
        "google:\n  client_id: id\n  client_secret: secret\n"
        "youtube:\n  channel_id: UCfile\n"
        "comment:\n  text: From file\n"
        "polling:\n  wait_limit_minutes: 5\n"
    )
    fake_client.latest_items = [None, video("v1")]

    assert yfc.main([]) == yfc.EXIT_SUCCESS
    assert fake_client.posted == [("v1", "From file")]
    assert fake_client.channel_calls == ["UCfile"]


def test_unusable_log_file_exits_one(fake_client, monkeypatch, tmp_path):
    def setup(log_level="INFO", log_file=None, verbose=False):
        if log_file:
            raise FileExistsError(17, "File exists", log_file)

    monkeypatch.setattr(yfc, "setup_logging", setup)
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")

    assert yfc.main(BASE_ARGS + ["--log-file", str(blocker / "yfc.log")]) == yfc.EXIT_FAILURE
    yfc.AuthWrapper.assert_not_called()


def test_structured_comment_in_config_exits_one(fake_client, tmp_path):
    (tmp_path / "config.yaml").write_text("comment:\n  text:\n    nested: 1\n")

    assert yfc.main(BASE_ARGS[:6] + BASE_ARGS[8:]) == yfc.EXIT_FAILURE
    yfc.AuthWrapper.assert_not_called()
