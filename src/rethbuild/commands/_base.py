"""Click base classes: ``--examples`` flag and the environment epilog.

Every reth-build command takes an ``examples`` string; ``--examples``
prints it and exits, keeping ``--help`` short. Help output also lists the
environment variables that drive the launch, since they are the usual way
the launcher is configured.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import click

ENVIRONMENT_EPILOG = """\b
Environment:
  BUILDER_IMAGE      image tag to build and run (default: build-reth:dev)
  TARGET_DIR_VOLUME  volume for the target dir (default: build-reth_target_dir)
  DOCKER             container engine binary (default: docker)"""


def _show_examples(examples: str) -> Callable[[click.Context, click.Parameter, bool], None]:
    def callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    return callback


class _LauncherMixin:
    params: list[click.Parameter]
    epilog: str | None

    def _setup_launcher(self, examples: str | None) -> None:
        self.examples = examples
        if self.epilog is None:
            self.epilog = ENVIRONMENT_EPILOG
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=_show_examples(examples),
                    help="Show usage examples.",
                )
            )


class LauncherCommand(_LauncherMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._setup_launcher(examples)


class LauncherGroup(_LauncherMixin, click.Group):
    """Group whose subcommands default to :class:`LauncherCommand`."""

    command_class = LauncherCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._setup_launcher(examples)
