"""Tests for the add command."""

import json
import re
from pathlib import Path

from cli_test_helpers import _add, _init, runner

from minpmt import frontmatter
from minpmt.cli import app


class TestCLIAdd:
    """Test add command."""

    def test_add_prints_id(self, tmp_path: Path) -> None:
        """The new ticket ID is printed and its file exists."""
        _init(tmp_path)
        ticket_id = _add(tmp_path, "Fix login bug")

        assert re.fullmatch(r"ticket-fix-login-bug-[0-9a-z]+", ticket_id)
        assert (tmp_path / "pmt" / f"{ticket_id}.md").exists()

    def test_add_without_init(self, tmp_path: Path) -> None:
        """The ticket folder is created on demand."""
        ticket_id = _add(tmp_path, "No init")
        assert (tmp_path / "pmt" / f"{ticket_id}.md").exists()

    def test_add_with_options(self, tmp_path: Path) -> None:
        """All options are written to the header."""
        ticket_id = _add(
            tmp_path,
            "Ship v2",
            "-d",
            "Release it",
            "-p",
            "high",
            "-l",
            "release, backend",
            "-s",
            "in-progress",
            "-a",
            "alice",
            "--due",
            "2025-01-31T00:00:00Z",
        )

        text = (tmp_path / "pmt" / f"{ticket_id}.md").read_text()
        header = frontmatter.parse(text)[0]
        assert header["description"] == "Release it"
        assert header["priority"] == "high"
        assert header["labels"] == ["release", "backend"]
        assert header["status"] == "in-progress"
        assert header["assignee"] == "alice"
        assert header["due"] == "2025-01-31T00:00:00Z"

    def test_add_json(self, tmp_path: Path) -> None:
        """--json prints the full ticket."""
        result = runner.invoke(
            app,
            ["add", "JSON ticket", "--json", "--root", str(tmp_path)],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["title"] == "JSON ticket"
        assert data["status"] == "todo"
        assert data["created"] == data["updated"]
        assert data["filePath"].endswith(f"{data['id']}.md")
        assert data["content"].startswith("---\n")

    def test_add_invalid_priority(self, tmp_path: Path) -> None:
        """Invalid values are reported with their field."""
        result = runner.invoke(
            app,
            ["add", "Bad", "-p", "urgent", "--root", str(tmp_path)],
        )

        assert result.exit_code == 1
        assert "Invalid input" in result.output
        assert "priority:" in result.output
        assert not (tmp_path / "pmt").exists()

    def test_add_invalid_json_error(self, tmp_path: Path) -> None:
        """Errors are JSON in JSON mode."""
        result = runner.invoke(
            app,
            ["--json", "add", "Bad", "-s", "blocked", "--root", str(tmp_path)],
        )

        assert result.exit_code == 1
        assert '"error":"Invalid input"' in result.output
        assert '"field":"status"' in result.output

    def test_add_blank_title(self, tmp_path: Path) -> None:
        """A blank title is rejected."""
        result = runner.invoke(app, ["add", "   ", "--root", str(tmp_path)])
        assert result.exit_code == 1
        assert "title" in result.output

    def test_add_uses_config_prefix(self, tmp_path: Path) -> None:
        """The ID prefix comes from min-pmt.toml."""
        (tmp_path / "min-pmt.toml").write_text('[template]\nid_prefix = "PMT-"\n')
        ticket_id = _add(tmp_path, "Prefixed")
        assert ticket_id.startswith("PMT-prefixed-")
