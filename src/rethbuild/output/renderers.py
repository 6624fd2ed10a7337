"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from rethbuild.output.console import create_console, get_output, style_for_mount

if TYPE_CHECKING:
    from rich.console import Console

    from rethbuild.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line, flagging dry runs."""
    label = Text("OK", style="rb.ok")
    op = Text(f"  {result.op}", style="rb.op")
    if result.meta and result.meta.get("dry_run"):
        console.print(label, op, Text("  (dry run)", style="rb.warning"), end="")
    else:
        console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}:", style="rb.key")
    if key == "image":
        v = Text(str(value), style="rb.image")
    elif key.endswith("_dir") or key in ("context", "config_path"):
        v = Text(str(value), style="rb.path")
    elif key.endswith("command"):
        v = Text(str(value), style="rb.command")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


def _mount_table(console: Console, specs: list[str]) -> None:
    """Render ``source:destination:mode`` specs as a table."""
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Source")
    table.add_column("Destination")
    table.add_column("Mode")
    for spec in specs:
        source, destination, mode = spec.rsplit(":", 2)
        style = style_for_mount(spec)
        table.add_row(source, destination, Text(mode, style=style))
    console.print(Text("  mounts:", style="rb.key"))
    console.print(table)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="rb.error")
    op = Text(f"  {result.op}", style="rb.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_build(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "image", data.get("image", ""))
    _field(console, "context", data.get("context", ""))
    _field(console, "command", data.get("command", ""))
    if verbose:
        _render_meta(console, result)


def _render_launch(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "image", data.get("image", ""))
    _field(console, "target_dir", data.get("target_dir", ""))
    build_command = data.get("build_command")
    _field(console, "build_command", build_command or "(skipped)")
    _field(console, "run_command", data.get("run_command", ""))
    if verbose:
        if data.get("mounts"):
            _mount_table(console, data["mounts"])
        _render_meta(console, result)


def _render_plan(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    for key in ("image", "volume", "docker", "launcher_dir", "projects_dir", "target_dir"):
        _field(console, key, data.get(key, ""))
    if data.get("config_path"):
        _field(console, "config_path", data["config_path"])
    _field(console, "build_command", data.get("build_command", ""))
    _field(console, "run_command", data.get("run_command", ""))
    if data.get("mounts"):
        _mount_table(console, data["mounts"])


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "build_image": _render_build,
    "launch": _render_launch,
    "plan": _render_plan,
}
