"""Tests for the shelf-notes CLI."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from shelf.library.cli import main


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


class TestCommandsCommand:
    def test_lists_matching_commands(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["commands", "bul"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0].startswith("Insert Markdown")
        assert len(out) == 2
        assert "/bullet" in out[1]

    def test_no_matches(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["commands", "zzz"]) == 0
        assert "No matching commands" in capsys.readouterr().out

    def test_space_in_filter_is_rejected(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["commands", "two words"]) == 1
        assert "Not a command filter" in capsys.readouterr().err

    def test_project_settings_apply(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (tmp_path / ".shelf").mkdir()
        (tmp_path / ".shelf" / "settings.json").write_text('{"menuMaxVisible": 3}', encoding="utf-8")
        assert main(["commands"]) == 0
        out = capsys.readouterr().out.splitlines()
        # hint + three rows + scroll indicator
        assert len(out) == 5

    def test_unknown_keybinding_in_settings_does_not_crash(self, tmp_path: Path) -> None:
        (tmp_path / ".shelf").mkdir()
        (tmp_path / ".shelf" / "settings.json").write_text(
            '{"menuKeybindings": {"jumpAround": "ctrl+j"}}', encoding="utf-8"
        )
        assert main(["commands", "bul"]) == 0


class TestPreviewCommand:
    def test_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        note = tmp_path / "note.md"
        note.write_text("# Notes\n\n- [x] read\n", encoding="utf-8")
        assert main(["preview", str(note)]) == 0
        out = capsys.readouterr().out
        assert "<h1>Notes</h1>" in out
        assert 'type="checkbox"' in out

    def test_stdin(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("**hi**"))
        assert main(["preview", "-"]) == 0
        assert "<strong>hi</strong>" in capsys.readouterr().out


class TestArguments:
    def test_subcommand_required(self) -> None:
        with pytest.raises(SystemExit):
            main([])
