"""Tests for reviewline CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from reviewline import __version__
from reviewline.cli import app

runner = CliRunner()


def flat(output: str) -> str:
    """Collapse the line wrapping rich applies at narrow terminal widths."""
    return " ".join(output.split())


@pytest.fixture
def comments_file(tmp_path: Path, sample_records: list[dict]) -> Path:
    path = tmp_path / "comments.json"
    path.write_text(json.dumps(sample_records), encoding="utf-8")
    return path


class TestVersion:
    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in flat(result.output)


class TestInitCommand:
    def test_init_creates_project(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["init", "review", "-d", str(tmp_path)])
        assert result.exit_code == 0
        assert (tmp_path / "review" / "reviewline.yaml").exists()

    def test_init_with_profile(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["init", "pal-review", "-p", "pal", "-d", str(tmp_path)])
        assert result.exit_code == 0
        content = (tmp_path / "pal-review" / "reviewline.yaml").read_text()
        assert "frame_rate: 25" in content

    def test_init_fails_if_directory_exists(self, tmp_path: Path) -> None:
        (tmp_path / "existing").mkdir()
        result = runner.invoke(app, ["init", "existing", "-d", str(tmp_path)])
        assert result.exit_code == 1
        assert "already exists" in flat(result.output)

    def test_init_unknown_profile(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["init", "x", "-p", "imax", "-d", str(tmp_path)])
        assert result.exit_code == 1
        assert not (tmp_path / "x").exists()

    def test_init_name_with_markup_brackets(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["init", "take[bold]2", "-d", "."])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "take[bold]2" / "reviewline.yaml").exists()
        assert "take[bold]2" in flat(result.output)

    def test_existing_directory_with_markup_brackets(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "old[/red]").mkdir()
        result = runner.invoke(app, ["init", "old[/red]", "-d", "."])
        assert result.exit_code == 1
        assert "old[/red]" in flat(result.output)
        assert "already exists" in flat(result.output)


class TestExportCommand:
    def test_export_all_formats(
        self, tmp_path: Path, comments_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        out_dir = tmp_path / "out"
        result = runner.invoke(
            app,
            [
                "export",
                str(comments_file),
                "--title",
                "Promo",
                "--version-number",
                "2",
                "--fps",
                "25",
                "--output-dir",
                str(out_dir),
            ],
        )
        assert result.exit_code == 0, result.output
        assert "TITLE: Promo_v2" in (out_dir / "Promo_v2.edl").read_text()
        assert (out_dir / "Promo_v2.xml").exists()
        csv_bytes = (out_dir / "Promo_v2.csv").read_bytes()
        assert b"\r\n" in csv_bytes
        assert b"\r\r\n" not in csv_bytes
        assert b"00:01:05:12" in csv_bytes

    def test_file_supplies_title_version_and_rate(
        self, tmp_path: Path, sample_records: list[dict], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "spot.json"
        payload = {"title": "Spot", "versionNumber": 4, "frameRate": 30, "comments": sample_records}
        path.write_text(json.dumps(payload), encoding="utf-8")

        result = runner.invoke(app, ["export", str(path), "-f", "edl"])
        assert result.exit_code == 0, result.output
        edl = (tmp_path / "Spot_v4.edl").read_text()
        assert "TITLE: Spot_v4" in edl
        assert "00:01:05:15" in edl
        assert not (tmp_path / "Spot_v4.csv").exists()

    def test_project_config_defaults(
        self, tmp_project: Path, sample_records: list[dict], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_project / "comments.json"
        path.write_text(json.dumps(sample_records), encoding="utf-8")
        monkeypatch.chdir(tmp_project)

        result = runner.invoke(app, ["export", str(path), "-f", "csv"])
        assert result.exit_code == 0, result.output
        content = (tmp_project / "exports" / "test_project_v1.csv").read_text()
        # pal profile: 25 fps
        assert "00:01:05:12" in content
        assert "00:00:03:12" in content

    def test_open_only(
        self, tmp_path: Path, comments_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(
            app, ["export", str(comments_file), "-f", "edl", "-t", "T", "--open-only"]
        )
        assert result.exit_code == 0, result.output
        edl = (tmp_path / "T_v1.edl").read_text()
        assert "He said" not in edl
        assert "Color shift here" in edl

    def test_invalid_record(
        self, tmp_path: Path, sample_records: list[dict], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        sample_records[1]["timestamp"] = -3
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(sample_records), encoding="utf-8")

        result = runner.invoke(app, ["export", str(path)])
        assert result.exit_code == 1
        assert "Error" in flat(result.output)
        assert list(tmp_path.glob("*.edl")) == []

    def test_invalid_frame_rate(
        self, tmp_path: Path, comments_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["export", str(comments_file), "--fps", "0"])
        assert result.exit_code == 1
        assert "Frame rate" in flat(result.output)

    def test_unknown_format(
        self, tmp_path: Path, comments_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["export", str(comments_file), "-f", "pdf"])
        assert result.exit_code == 1
        assert "Unknown export format" in flat(result.output)

    def test_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["export", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "not found" in flat(result.output)

    def test_non_utf8_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "latin.json"
        path.write_bytes(b"\xff\xfe\x00bad")
        result = runner.invoke(app, ["export", str(path)])
        assert result.exit_code == 1
        assert "not valid UTF-8" in flat(result.output)
        assert list(tmp_path.glob("*.edl")) == []


class TestTimecodeCommand:
    def test_seconds_to_timecode(self) -> None:
        result = runner.invoke(app, ["timecode", "65.5", "--fps", "25"])
        assert result.exit_code == 0
        assert "00:01:05:12" in flat(result.output)

    def test_reverse(self) -> None:
        result = runner.invoke(app, ["timecode", "00:01:05:12", "--fps", "25", "--reverse"])
        assert result.exit_code == 0
        assert "65.48" in flat(result.output)

    def test_not_a_number(self) -> None:
        result = runner.invoke(app, ["timecode", "abc"])
        assert result.exit_code == 1
        assert "Not a number" in flat(result.output)

    def test_drop_frame_rejected(self) -> None:
        result = runner.invoke(app, ["timecode", "00:00:01;00", "--fps", "30", "--reverse"])
        assert result.exit_code == 1


class TestValidateCommand:
    def test_valid_file(self, comments_file: Path) -> None:
        result = runner.invoke(app, ["validate", str(comments_file)])
        assert result.exit_code == 0
        assert "3 annotations" in flat(result.output)
        assert "resolved: 1" in flat(result.output)

    def test_invalid_file(self, tmp_path: Path, sample_records: list[dict]) -> None:
        del sample_records[0]["status"]
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(sample_records), encoding="utf-8")
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1

    def test_wrong_shape(self, tmp_path: Path) -> None:
        path = tmp_path / "odd.json"
        path.write_text(json.dumps({"items": []}), encoding="utf-8")
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1
        assert "comments" in flat(result.output)

    def test_non_utf8_file(self, tmp_path: Path) -> None:
        path = tmp_path / "latin.json"
        path.write_bytes(b"\xff\xfe\x00bad")
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1
        assert "not valid UTF-8" in flat(result.output)
