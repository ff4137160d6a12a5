"""Tests for the CLI module: end-to-end runs through typer."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from rxrename.cli import app, parse_step_spec
from rxrename.models import Group, NormalizeStep, RegexDef, RegexStep, Settings, Step
from rxrename.settings import save_settings

runner = CliRunner()


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    """A settings file with one saved group and a two-entry regex library."""
    path = tmp_path / "config" / "settings.json"
    save_settings(
        Settings(
            groups=[
                Group(
                    id="g1",
                    name="tidy",
                    steps=[Step(normalize=True), Step(regex_id="rx-prefix")],
                )
            ],
            ungrouped_steps=[Step(regex_id="rx-underscore")],
            regex_library=[
                RegexDef(id="rx-prefix", name="Prefix", pattern="^", replacement="new_"),
                RegexDef(id="rx-underscore", pattern=" ", replacement="_"),
            ],
        ),
        path,
    )
    return path


class TestParseStepSpec:
    def test_normalize(self) -> None:
        assert parse_step_spec("normalize") == NormalizeStep()

    def test_regex(self) -> None:
        """PATTERN=>REPLACEMENT becomes a regex step."""
        assert parse_step_spec(r"(\d+)=>#$1") == RegexStep(pattern=r"(\d+)", replacement="#$1")

    def test_empty_replacement(self) -> None:
        assert parse_step_spec("draft_=>") == RegexStep(pattern="draft_", replacement="")

    def test_invalid(self) -> None:
        """A spec without the separator is a bad parameter."""
        with pytest.raises(typer.BadParameter):
            parse_step_spec("no separator")


class TestRenameCommand:
    def test_rename_with_steps_json_output(self, tmp_path: Path) -> None:
        """--json prints the camelCase result list in input order."""
        (tmp_path / "ＮＨＫ　news.txt").touch()
        (tmp_path / "same.txt").touch()
        settings = tmp_path / "missing.json"

        result = runner.invoke(
            app,
            [
                "rename",
                str(tmp_path / "ＮＨＫ　news.txt"),
                str(tmp_path / "same.txt"),
                "--step",
                "normalize",
                "--settings",
                str(settings),
                "--yes",
                "--json",
            ],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data == [
            {"success": True, "oldName": "ＮＨＫ　news.txt", "newName": "NHK news.txt"},
            {"success": False, "oldName": "same.txt", "error": "Name unchanged"},
        ]
        assert (tmp_path / "NHK news.txt").exists()

    def test_rename_with_saved_group(self, tmp_path: Path, settings_file: Path) -> None:
        """-g runs a saved group's steps."""
        (tmp_path / "ａｂｃ.txt").touch()

        result = runner.invoke(
            app,
            ["rename", str(tmp_path / "ａｂｃ.txt"), "-g", "tidy", "--settings", str(settings_file), "-y"],
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "new_abc.txt").exists()

    def test_rename_uses_ungrouped_steps_by_default(
        self, tmp_path: Path, settings_file: Path
    ) -> None:
        """Without -s or -g the ungrouped steps apply."""
        (tmp_path / "a b.txt").touch()

        result = runner.invoke(
            app, ["rename", str(tmp_path / "a b.txt"), "--settings", str(settings_file), "-y"]
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "a_b.txt").exists()

    def test_normalization_toggle(self, tmp_path: Path) -> None:
        """--no-colon overrides the saved default."""
        (tmp_path / "Ａ：B.txt").touch()

        result = runner.invoke(
            app,
            [
                "rename",
                str(tmp_path / "Ａ：B.txt"),
                "-s",
                "normalize",
                "--no-colon",
                "--settings",
                str(tmp_path / "missing.json"),
                "-y",
            ],
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "A:B.txt").exists()

    def test_confirmation_declined(self, tmp_path: Path) -> None:
        """Answering no leaves every file in place."""
        (tmp_path / "old.txt").touch()

        result = runner.invoke(
            app,
            ["rename", str(tmp_path / "old.txt"), "-s", "old=>new", "--settings", str(tmp_path / "s.json")],
            input="n\n",
        )

        assert result.exit_code != 0
        assert (tmp_path / "old.txt").exists()
        assert not (tmp_path / "new.txt").exists()

    def test_files_from_clipboard(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without file arguments paths come from the clipboard."""
        (tmp_path / "clip.txt").touch()
        monkeypatch.setattr("rxrename.cli.ClipboardHandler.is_available", staticmethod(lambda: True))
        monkeypatch.setattr(
            "rxrename.cli.ClipboardHandler.paste_paths",
            staticmethod(lambda: [str(tmp_path / "clip.txt")]),
        )

        result = runner.invoke(
            app, ["rename", "-s", "clip=>paste", "--settings", str(tmp_path / "s.json"), "-y"]
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "paste.txt").exists()

    def test_clipboard_unavailable(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without files and without a reachable clipboard the command exits 1."""
        monkeypatch.setattr("rxrename.cli.ClipboardHandler.is_available", staticmethod(lambda: False))

        result = runner.invoke(
            app, ["rename", "-s", "a=>b", "--settings", str(tmp_path / "s.json"), "-y"]
        )

        assert result.exit_code == 1
        assert "剪贴板" in result.output

    def test_no_steps(self, tmp_path: Path) -> None:
        """Nothing to run exits 1 without touching files."""
        (tmp_path / "a.txt").touch()

        result = runner.invoke(
            app, ["rename", str(tmp_path / "a.txt"), "--settings", str(tmp_path / "s.json"), "-y"]
        )

        assert result.exit_code == 1
        assert (tmp_path / "a.txt").exists()

    def test_unknown_group(self, tmp_path: Path, settings_file: Path) -> None:
        """An unknown group name exits 1."""
        result = runner.invoke(
            app, ["rename", "x.txt", "-g", "nope", "--settings", str(settings_file), "-y"]
        )
        assert result.exit_code == 1

    def test_broken_settings(self, tmp_path: Path) -> None:
        """A corrupt settings file exits 1."""
        broken = tmp_path / "s.json"
        broken.write_text("{", encoding="utf-8")

        result = runner.invoke(app, ["rename", "x.txt", "-s", "normalize", "--settings", str(broken), "-y"])

        assert result.exit_code == 1


class TestPreviewCommand:
    def test_preview_leaves_files(self, tmp_path: Path) -> None:
        """Preview shows the new name and renames nothing."""
        (tmp_path / "draft.md").touch()

        result = runner.invoke(
            app,
            [
                "preview",
                str(tmp_path / "draft.md"),
                "-s",
                "draft=>final",
                "--settings",
                str(tmp_path / "s.json"),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "final.md" in result.output
        assert (tmp_path / "draft.md").exists()
        assert not (tmp_path / "final.md").exists()


class TestLibraryCommand:
    def test_lists_saved_entries(self, settings_file: Path) -> None:
        """Saved groups and regex entries are listed."""
        result = runner.invoke(app, ["library", "--settings", str(settings_file)])

        assert result.exit_code == 0, result.output
        assert "tidy" in result.output
        assert "rx-prefix" in result.output

    def test_empty_library(self, tmp_path: Path) -> None:
        """An absent settings file lists nothing and succeeds."""
        result = runner.invoke(app, ["library", "--settings", str(tmp_path / "s.json")])

        assert result.exit_code == 0


class TestLogging:
    def test_default_level_is_warning(self, tmp_path: Path) -> None:
        """Per-file info lines stay hidden unless --verbose is given."""
        runner.invoke(app, ["library", "--settings", str(tmp_path / "s.json")])
        assert logging.getLogger().level == logging.WARNING

    def test_verbose_enables_debug(self, tmp_path: Path) -> None:
        runner.invoke(app, ["-v", "library", "--settings", str(tmp_path / "s.json")])
        assert logging.getLogger().level == logging.DEBUG
