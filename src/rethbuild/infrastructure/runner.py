"""The ``in-docker`` build-runner.

The runner starts a named container from an image with a set of ``-v``
mounts and runs the build inside it, using its own working directory as
the project to build.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from rethbuild.infrastructure.process import CommandOutcome, run_command

if TYPE_CHECKING:
    from rethbuild.domain.mounts import Mount


class BuildRunner:
    def __init__(self, command: str = "in-docker", name: str = "build-reth") -> None:
        self.command = command
        self.name = name

    def argv(
        self,
        image: str,
        mounts: Sequence[Mount],
        extra_args: Sequence[str] = (),
    ) -> list[str]:
        args = [self.command, "--image", image, "--name", self.name]
        for mount in mounts:
            args.extend(mount.as_args())
        args.extend(extra_args)
        return args

    def run(
        self,
        image: str,
        mounts: Sequence[Mount],
        *,
        cwd: Path,
        extra_args: Sequence[str] = (),
    ) -> CommandOutcome:
        """Launch the runner from *cwd* and wait for it to exit."""
        return run_command(self.argv(image, mounts, extra_args), cwd=cwd)
