"""Command: build the image and launch the containerized build."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rethbuild.commands._base import LauncherCommand

if TYPE_CHECKING:
    from rethbuild.commands._context import AppContext


@click.command(
    cls=LauncherCommand,
    examples="""\
  reth-build run
  reth-build run --skip-build
  TARGET_DIR_VOLUME=reth_release_target reth-build run
  reth-build --base-dir ~/projects/reth/.dev run
  reth-build run -- cargo build --release""",
)
@click.option("--skip-build", is_flag=True, help="Reuse the existing image; do not rebuild it.")
@click.argument("runner_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def run(app: AppContext, skip_build: bool, runner_args: tuple[str, ...]) -> None:
    """Build the image, then run the build-runner from the target checkout.

    Arguments after ``--`` are appended to the runner command line.
    """
    app.emit(app.launcher.launch(skip_build=skip_build, extra_args=runner_args))
