"""Command: build the builder image only."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rethbuild.commands._base import LauncherCommand

if TYPE_CHECKING:
    from rethbuild.commands._context import AppContext


@click.command(
    cls=LauncherCommand,
    examples="""\
  reth-build build
  BUILDER_IMAGE=build-reth:ci reth-build build
  reth-build --docker podman build
  reth-build --dry-run build""",
)
@click.pass_obj
def build(app: AppContext) -> None:
    """Build and tag the builder image from the launcher directory."""
    app.emit(app.launcher.build_image())
