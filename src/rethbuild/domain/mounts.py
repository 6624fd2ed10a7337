"""Bind-mount specifications passed to the build-runner as ``-v`` flags."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel

if TYPE_CHECKING:
    from rethbuild.domain.layout import ProjectLayout

CARGO_GIT_MOUNT = "/usr/local/cargo/git"
CARGO_REGISTRY_MOUNT = "/usr/local/cargo/registry"

MountMode = Literal["rw", "ro"]


class Mount(BaseModel):
    """A host path or named volume mapped to a container path."""

    model_config = {"frozen": True}

    source: str
    destination: str
    mode: MountMode = "rw"

    @property
    def spec(self) -> str:
        """``source:destination:mode`` as the runner expects it."""
        return f"{self.source}:{self.destination}:{self.mode}"

    def as_args(self) -> list[str]:
        return ["-v", self.spec]


def build_mounts(layout: ProjectLayout, volume: str) -> list[Mount]:
    """Mounts for a launch, in runner argument order.

    Cargo caches read-write, the named volume over the target's output
    directory, then each dependency checkout read-only at its host path.
    """
    mounts = [
        Mount(source=str(layout.cargo_git), destination=CARGO_GIT_MOUNT),
        Mount(source=str(layout.cargo_registry), destination=CARGO_REGISTRY_MOUNT),
        Mount(source=volume, destination=str(layout.output_dir)),
    ]
    mounts.extend(
        Mount(source=str(dep), destination=str(dep), mode="ro") for dep in layout.readonly_dirs
    )
    return mounts
