from __future__ import annotations

import json
import zipfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from fastboot_archive.surfaces.cli.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("FASTBOOT_DIST_DIR", "FASTBOOT_ARCHIVE_PREFIX", "FASTBOOT_IGNORE_FILES"):
        monkeypatch.delenv(name, raising=False)


def test_prepare_json_reports_archive(tmp_path: Path, dist_dir: Path) -> None:
    result = runner.invoke(
        app,
        ["prepare", str(dist_dir), "--revision-key", "1234", "--json"],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["fastbootArchiveName"] == "dist-1234.zip"
    assert payload["fastbootArchivePath"] == "tmp/fastboot-deploy/dist-1234.zip"
    assert payload["entries"] == ["assets/app.js", "assets/app.map", "deploy.txt"]
    assert (tmp_path / "tmp" / "fastboot-deploy" / "dist-1234.zip").exists()


def test_prepare_uses_config_file_and_ignore_flags(
    tmp_path: Path, dist_dir: Path
) -> None:
    config_path = tmp_path / "deploy.yml"
    config_path.write_text(
        "fastboot-app-server:\n  fastbootDistDir: build/fastboot\n", encoding="utf-8"
    )

    result = runner.invoke(
        app,
        [
            "prepare",
            str(dist_dir),
            "-r",
            "abc",
            "--config",
            str(config_path),
            "--prefix",
            "web-",
            "--ignore",
            "**/*.map",
        ],
    )

    assert result.exit_code == 0, result.output
    archive_path = tmp_path / "build" / "fastboot" / "web-abc.zip"
    with zipfile.ZipFile(archive_path) as zf:
        assert zf.namelist() == ["assets/app.js", "deploy.txt"]


def test_prepare_stages_unless_skipped(tmp_path: Path, dist_dir: Path) -> None:
    stale = tmp_path / "tmp" / "fastboot-deploy" / "dist-old.zip"
    stale.parent.mkdir(parents=True)
    stale.write_bytes(b"old")

    result = runner.invoke(
        app, ["prepare", str(dist_dir), "-r", "1", "--skip-stage"]
    )
    assert result.exit_code == 0, result.output
    assert stale.exists()

    result = runner.invoke(app, ["prepare", str(dist_dir), "-r", "2"])
    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in stale.parent.iterdir()) == ["dist-2.zip"]


def test_prepare_missing_dist_dir_exits_nonzero(tmp_path: Path) -> None:
    result = runner.invoke(app, ["prepare", str(tmp_path / "missing"), "-r", "1"])
    assert result.exit_code == 1
    assert "Source directory does not exist" in result.output


def test_prepare_rejects_invalid_config(tmp_path: Path, dist_dir: Path) -> None:
    config_path = tmp_path / "deploy.yml"
    config_path.write_text("bogusOption: 1\n", encoding="utf-8")
    result = runner.invoke(
        app, ["prepare", str(dist_dir), "-r", "1", "--config", str(config_path)]
    )
    assert result.exit_code == 1
    assert "bogusOption" in result.output


def test_stage_command_removes_dist_dir(tmp_path: Path) -> None:
    target = tmp_path / "tmp" / "fastboot-deploy"
    target.mkdir(parents=True)
    result = runner.invoke(app, ["stage"])
    assert result.exit_code == 0, result.output
    assert not target.exists()


def test_manifest_command_prints_json() -> None:
    result = runner.invoke(app, ["manifest", "--bucket", "bucket-name", "--key", "rev"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"bucket": "bucket-name", "key": "rev"}


def test_manifest_command_rejects_empty_bucket() -> None:
    result = runner.invoke(app, ["manifest", "--bucket", "", "--key", "rev"])
    assert result.exit_code == 1


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.startswith("fastboot-archive ")
