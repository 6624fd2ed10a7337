"""Root CLI group for reth-build with global flags and command registration."""

from __future__ import annotations

import click

from rethbuild import __version__
from rethbuild.commands import register_commands
from rethbuild.commands._base import LauncherGroup
from rethbuild.commands._context import AppContext
from rethbuild.config.settings import LauncherSettings


@click.group(
    cls=LauncherGroup,
    invoke_without_command=True,
    examples="""\
  reth-build run
  reth-build --json plan
  BUILDER_IMAGE=build-reth:ci DOCKER=podman reth-build run""",
)
@click.version_option(version=__version__, prog_name="reth-build")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--dry-run", is_flag=True, help="Report commands instead of running them.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--base-dir",
    type=click.Path(path_type=str),
    default=None,
    help="Launcher directory (holds the Dockerfile).",
)
@click.option("--image", default=None, help="Image tag [env: BUILDER_IMAGE].")
@click.option("--volume", default=None, help="Target dir volume [env: TARGET_DIR_VOLUME].")
@click.option("--docker", default=None, help="Container engine binary [env: DOCKER].")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    dry_run: bool,
    config_path: str | None,
    base_dir: str | None,
    image: str | None,
    volume: str | None,
    docker: str | None,
) -> None:
    """reth-build — build the builder image and run a containerized reth build."""
    ctx.ensure_object(dict)
    settings = LauncherSettings.from_cli(
        config_path=config_path,
        base_dir=base_dir,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        dry_run=dry_run,
        image=image,
        volume=volume,
        docker=docker,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
