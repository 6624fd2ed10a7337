"""Subcommand modules for reth-build.

Provides register_commands() which uses deferred imports to keep
``reth-build --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from rethbuild.commands.build import build
    from rethbuild.commands.plan import plan
    from rethbuild.commands.run import run

    cli.add_command(build)
    cli.add_command(run)
    cli.add_command(plan)
