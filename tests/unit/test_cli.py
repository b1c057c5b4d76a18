"""
Unit tests for the command-line entry point.
"""

import pytest

from movieserver import __main__ as cli
from movieserver.config import ServerConfig


class FakeApp:
    def __init__(self, config):
        self.config = config
        self.ran = False

    def run(self):
        self.ran = True


@pytest.fixture
def captured(monkeypatch):
    """Replace create_app so main() builds a FakeApp instead of serving."""
    apps = []

    def fake_create_app(config):
        app = FakeApp(config)
        apps.append(app)
        return app

    monkeypatch.setattr(cli, "create_app", fake_create_app)
    for name in ("MOVIES_HOST", "MOVIES_PORT", "MOVIES_WORKERS",
                 "MOVIES_TIMEOUT", "MOVIES_LOG_LEVEL", "MOVIES_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    return apps


class TestMain:

    def test_defaults(self, captured):
        cli.main([])

        [app] = captured
        assert app.ran
        assert app.config.host == "0.0.0.0"
        assert app.config.port == 8080

    def test_flags(self, captured):
        cli.main(["-H", "127.0.0.1", "-p", "3000", "-w", "2", "-l", "debug", "--log-format", "json"])

        config = captured[0].config
        assert config.host == "127.0.0.1"
        assert config.port == 3000
        assert config.max_workers == 2
        assert config.min_workers == 2
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_env_is_default_flags_win(self, captured, monkeypatch):
        monkeypatch.setenv("MOVIES_PORT", "9000")
        monkeypatch.setenv("MOVIES_HOST", "127.0.0.1")

        cli.main(["--port", "9100"])

        config = captured[0].config
        assert config.host == "127.0.0.1"
        assert config.port == 9100

    def test_bad_env(self, captured, monkeypatch):
        monkeypatch.setenv("MOVIES_PORT", "eighty")

        with pytest.raises(SystemExit) as exc_info:
            cli.main([])

        assert exc_info.value.code == 2
        assert captured == []

    def test_invalid_config_exits(self, monkeypatch, capsys):
        monkeypatch.delenv("MOVIES_PORT", raising=False)

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--port", "70000"])

        assert exc_info.value.code == 1
        assert "Invalid port" in capsys.readouterr().err

    def test_version(self, captured, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--version"])

        assert exc_info.value.code == 0
        assert "movie-server 1.0.0" in capsys.readouterr().out

    def test_unknown_log_level(self, captured):
        with pytest.raises(SystemExit):
            cli.main(["--log-level", "LOUD"])


def test_parser_uses_config_as_defaults():
    parser = cli.build_parser(ServerConfig(host="10.0.0.1", port=1234, log_format="json"))
    args = parser.parse_args([])

    assert args.host == "10.0.0.1"
    assert args.port == 1234
    assert args.log_format == "json"
