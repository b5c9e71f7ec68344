"""Tests for the command-line interface."""

from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from groupscope.cli import cli


def _sqlite_settings():
    settings = MagicMock()
    settings.database_url = "sqlite+aiosqlite:///./gs_data/groupscope.db"
    settings.host = "0.0.0.0"
    settings.port = 8000
    settings.workers = 1
    settings.log_level = "INFO"
    settings.environment = "development"
    return settings


def test_serve_rejects_multiple_workers_with_sqlite():
    """--workers > 1 is refused before the server starts."""
    runner = CliRunner()

    with patch("groupscope.cli.get_settings", return_value=_sqlite_settings()), patch(
        "uvicorn.run"
    ) as mock_run:
        result = runner.invoke(cli, ["serve", "--workers", "2"])

    assert result.exit_code == 1
    assert "SQLite does not support multiple worker processes" in result.output
    mock_run.assert_not_called()


def test_serve_starts_uvicorn():
    runner = CliRunner()

    with patch("groupscope.cli.get_settings", return_value=_sqlite_settings()), patch(
        "groupscope.cli.configure_logging"
    ), patch("uvicorn.run") as mock_run:
        result = runner.invoke(cli, ["serve", "--port", "9000"])

    assert result.exit_code == 0
    mock_run.assert_called_once()
    assert mock_run.call_args.args[0] == "groupscope.infrastructure.api.app:app"
    assert mock_run.call_args.kwargs["port"] == 9000


def test_info_shows_scope_mode():
    runner = CliRunner()

    result = runner.invoke(cli, ["info"])

    assert result.exit_code == 0
    assert "Scope Mode:" in result.output
