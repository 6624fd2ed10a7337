"""Command: show the resolved configuration and command lines."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rethbuild.commands._base import LauncherCommand

if TYPE_CHECKING:
    from rethbuild.commands._context import AppContext


@click.command(
    cls=LauncherCommand,
    examples="""\
  reth-build plan
  reth-build plan -- cargo test
  reth-build --json plan
  BUILDER_IMAGE=foo reth-build plan""",
)
@click.argument("runner_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def plan(app: AppContext, runner_args: tuple[str, ...]) -> None:
    """Print what ``run`` would execute, without executing anything."""
    app.emit(app.launcher.plan(extra_args=runner_args))
