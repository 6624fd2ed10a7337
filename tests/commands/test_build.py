"""Tests for the ``build`` command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from rethbuild.cli import cli
from tests.conftest import FakeBin


class TestBuildCommand:
    def test_builds_image(
        self, cli_runner: CliRunner, fake_bin: FakeBin, launcher_dir: Path
    ) -> None:
        result = cli_runner.invoke(cli, ["--base-dir", str(launcher_dir), "build"])
        assert result.exit_code == 0, result.output
        assert "build_image" in result.output
        assert fake_bin.args("docker") == [["build", "-t", "build-reth:dev", str(launcher_dir)]]
        assert fake_bin.calls("in-docker") == []

    def test_image_flag(self, cli_runner: CliRunner, fake_bin: FakeBin, launcher_dir: Path) -> None:
        result = cli_runner.invoke(
            cli, ["--base-dir", str(launcher_dir), "--image", "foo", "--json", "build"]
        )
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["image"] == "foo"
        assert fake_bin.args("docker")[0][2] == "foo"

    def test_failure_exit_code(
        self,
        cli_runner: CliRunner,
        fake_bin: FakeBin,
        launcher_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("FAKE_EXIT_DOCKER", "5")
        result = cli_runner.invoke(cli, ["--base-dir", str(launcher_dir), "build"])
        assert result.exit_code == 5
        assert result.stdout == ""
        assert "exited with status 5" in result.stderr

    def test_engine_missing(
        self,
        cli_runner: CliRunner,
        fake_bin: FakeBin,
        launcher_dir: Path,
    ) -> None:
        result = cli_runner.invoke(
            cli, ["--base-dir", str(launcher_dir), "--docker", "no-such-engine", "build"]
        )
        assert result.exit_code == 127
        assert "no-such-engine" in result.stderr

    def test_dry_run(self, cli_runner: CliRunner, fake_bin: FakeBin, launcher_dir: Path) -> None:
        result = cli_runner.invoke(cli, ["--base-dir", str(launcher_dir), "--dry-run", "build"])
        assert result.exit_code == 0
        assert "dry run" in result.output
        assert fake_bin.calls("docker") == []
