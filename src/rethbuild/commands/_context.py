"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy service construction and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rethbuild.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from rethbuild.config.settings import LauncherSettings
    from rethbuild.services.launch import LaunchService
    from rethbuild.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  The launch service is
    created on first use so ``--help`` and ``--version`` never touch the
    filesystem layout.
    """

    def __init__(self, settings: LauncherSettings) -> None:
        self.settings = settings
        self._launcher: LaunchService | None = None

        from rethbuild.config.logging import bind_launch_context, configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        bind_launch_context(settings)

    @property
    def launcher(self) -> LaunchService:
        """The launch service (created lazily on first access)."""
        if self._launcher is None:
            from rethbuild.services.launch import LaunchService

            self._launcher = LaunchService(self.settings)
        return self._launcher

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with the error's exit code.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(result.error.exit_code if result.error else 1)
