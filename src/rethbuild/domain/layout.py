"""Checkout layout — path arithmetic around the launcher directory.

The launcher directory holds the builder ``Dockerfile`` and the cargo
caches. Its grandparent is the projects directory, where the build target
and its read-only dependencies are checked out side by side::

    <projects>/
        reth/            build target (runner working directory)
            .dev/        launcher directory
        alloy/           read-only dependency
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from rethbuild.config.models import LayoutConfig

CARGO_GIT_DIRNAME = "cargo-git"
CARGO_REGISTRY_DIRNAME = "cargo-registry"


def launcher_dir(path: Path | str) -> Path:
    """Return the absolute directory a launcher path refers to.

    A file resolves to its containing directory, anything else to itself.
    Relative paths, ``~`` and symlinks are resolved, so the result is the
    same however the launcher was reached.
    """
    resolved = Path(path).expanduser().resolve()
    if resolved.is_file():
        return resolved.parent
    return resolved


def projects_dir(launcher: Path) -> Path:
    """Grandparent of the launcher directory."""
    return launcher.parent.parent


class ProjectLayout(BaseModel):
    """Every host path a launch touches, computed once from the base dir."""

    model_config = {"frozen": True}

    launcher_dir: Path
    projects_dir: Path
    target_dir: Path
    output_dir: Path
    readonly_dirs: list[Path]
    cargo_git: Path
    cargo_registry: Path

    @property
    def dockerfile(self) -> Path:
        return self.launcher_dir / "Dockerfile"

    @classmethod
    def resolve(cls, base_dir: Path | str, layout: LayoutConfig | None = None) -> ProjectLayout:
        """Derive the layout for *base_dir* using the ``[layout]`` section."""
        layout = layout or LayoutConfig()
        launcher = launcher_dir(base_dir)
        projects = projects_dir(launcher)
        target = projects / layout.target
        return cls(
            launcher_dir=launcher,
            projects_dir=projects,
            target_dir=target,
            output_dir=target / layout.target_subdir,
            readonly_dirs=[projects / name for name in layout.readonly],
            cargo_git=launcher / CARGO_GIT_DIRNAME,
            cargo_registry=launcher / CARGO_REGISTRY_DIRNAME,
        )

    def missing_readonly(self) -> list[Path]:
        """Read-only dependency checkouts that do not exist on the host."""
        return [p for p in self.readonly_dirs if not p.is_dir()]
