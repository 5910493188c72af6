"""Tests for CLI commands (F3)."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from puzzlehost.cli.commands import app
from puzzlehost.db.data_access import start_session

runner = CliRunner()


@pytest.fixture
def connection(tmp_path):
    return f"sqlite:///{tmp_path / 'cli.db'}"


class TestInitDb:
    """Tests for `puzzlehost init-db`."""

    def test_creates_database(self, connection, tmp_path):
        result = runner.invoke(app, ["init-db", connection])

        assert result.exit_code == 0
        assert "Database ready" in result.stdout
        assert (tmp_path / "cli.db").exists()

    def test_unsupported_connection(self):
        result = runner.invoke(app, ["init-db", "postgres://localhost/puzzles"])

        assert result.exit_code == 1
        assert "Only SQLite" in result.stdout

    def test_unopenable_database(self, tmp_path):
        """A path that is a directory cannot be opened."""
        (tmp_path / "dir.db").mkdir()
        result = runner.invoke(app, ["init-db", str(tmp_path / "dir.db")])

        assert result.exit_code == 1
        assert "error connecting to database" in result.stdout


class TestPuzzles:
    """Tests for `puzzlehost puzzles`."""

    def test_lists_owner_puzzles(self, connection):
        data_access = start_session(connection)
        puzzle = data_access.puzzles.create("crossword", "alice")
        data_access.answers.create(puzzle.id, "5", 0)
        data_access.puzzles.create("sudoku", "bob")

        result = runner.invoke(app, ["puzzles", "--owner", "alice", connection])

        assert result.exit_code == 0
        assert "crossword" in result.stdout
        assert "sudoku" not in result.stdout

    def test_no_puzzles(self, connection):
        result = runner.invoke(app, ["puzzles", "-o", "nobody", connection])

        assert result.exit_code == 0
        assert "No puzzles" in result.stdout

    def test_owner_required(self, connection):
        result = runner.invoke(app, ["puzzles", connection])
        assert result.exit_code != 0


class TestServe:
    """Tests for `puzzlehost serve`."""

    def test_runs_uvicorn(self, connection):
        with patch("puzzlehost.cli.commands.uvicorn.run") as mock_run:
            result = runner.invoke(app, ["serve", connection, "--port", "9123"])

        assert result.exit_code == 0
        assert "Server started on port: 9123" in result.stdout
        mock_run.assert_called_once()
        _, kwargs = mock_run.call_args
        assert kwargs["port"] == 9123
        assert kwargs["host"] == "127.0.0.1"

    def test_app_uses_given_database(self, connection, tmp_path):
        with patch("puzzlehost.cli.commands.uvicorn.run") as mock_run:
            runner.invoke(app, ["serve", connection, "--host", "0.0.0.0"])

        api = mock_run.call_args.args[0]
        assert api.state.data_access.database.path == tmp_path / "cli.db"
        assert mock_run.call_args.kwargs["host"] == "0.0.0.0"

    def test_bad_connection_does_not_start(self):
        with patch("puzzlehost.cli.commands.uvicorn.run") as mock_run:
            result = runner.invoke(app, ["serve", "mysql://localhost/db"])

        assert result.exit_code == 1
        mock_run.assert_not_called()
