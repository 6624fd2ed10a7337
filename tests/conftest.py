"""Shared pytest fixtures and test helpers for reth-build tests."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest
from click.testing import CliRunner

from rethbuild.config.settings import LauncherSettings

ENV_VARS = (
    "BUILDER_IMAGE",
    "TARGET_DIR_VOLUME",
    "DOCKER",
    "RETH_BUILD_CONFIG",
    "RETH_BUILD_BASE_DIR",
)

# Fake executable: records each argument on its own line, plus the cwd,
# then exits with $FAKE_EXIT_<NAME> (default 0).
_FAKE_TEMPLATE = """\
#!/bin/sh
log="{log}"
echo "--- cwd=$(pwd -P)" >> "$log"
for arg in "$@"; do
    echo "$arg" >> "$log"
done
exit ${{{exit_var}:-0}}
"""


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own launcher environment out of every test."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def projects_root(tmp_path: Path) -> Path:
    """Checkout layout: projects/reth/.dev (with Dockerfile) and projects/alloy.

    This is the single source of truth for the on-disk layout. The
    launcher directory is ``projects/reth/.dev``.
    """
    root = tmp_path / "projects"
    launcher = root / "reth" / ".dev"
    launcher.mkdir(parents=True)
    (launcher / "Dockerfile").write_text("FROM rust:latest\n", encoding="utf-8")
    (root / "alloy").mkdir()
    return root


@pytest.fixture
def launcher_dir(projects_root: Path) -> Path:
    return (projects_root / "reth" / ".dev").resolve()


@pytest.fixture
def settings(launcher_dir: Path) -> LauncherSettings:
    return LauncherSettings.from_cli(base_dir=launcher_dir)


class FakeBin:
    """Directory of recording fake executables prepended to PATH."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def add(self, name: str) -> Path:
        log = self.root / f"{name}.log"
        exit_var = "FAKE_EXIT_" + "".join(c if c.isalnum() else "_" for c in name.upper())
        script = self.root / name
        script.write_text(_FAKE_TEMPLATE.format(log=log, exit_var=exit_var), encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    def calls(self, name: str) -> list[list[str]]:
        """Argument lists of every invocation of *name*, cwd line first."""
        log = self.root / f"{name}.log"
        if not log.exists():
            return []
        invocations: list[list[str]] = []
        for line in log.read_text(encoding="utf-8").splitlines():
            if line.startswith("--- cwd="):
                invocations.append([line])
            else:
                invocations[-1].append(line)
        return invocations

    def args(self, name: str) -> list[list[str]]:
        return [call[1:] for call in self.calls(name)]

    def cwds(self, name: str) -> list[str]:
        return [call[0].removeprefix("--- cwd=") for call in self.calls(name)]


@pytest.fixture
def fake_bin(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FakeBin:
    """Fake ``docker`` and ``in-docker`` on a PATH that holds nothing else."""
    fb = FakeBin(tmp_path / "bin")
    fb.add("docker")
    fb.add("in-docker")
    monkeypatch.setenv("PATH", str(fb.root) + os.pathsep + "/bin" + os.pathsep + "/usr/bin")
    return fb
