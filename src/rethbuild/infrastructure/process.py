"""Blocking subprocess execution with inherited stdio.

The engine and the runner are long-lived and chatty, so their output is
streamed straight to the terminal rather than captured. A non-zero exit
is reported in the returned outcome; only a missing binary raises.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import signal
import subprocess
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 128 + signal.SIGINT


class CommandNotFoundError(Exception):
    """The executable for a command could not be found or started."""

    def __init__(self, command: str, reason: str = "not found on PATH") -> None:
        super().__init__(f"{command}: {reason}")
        self.command = command
        self.reason = reason


class CommandOutcome(BaseModel):
    """Exit status of a finished command."""

    model_config = {"frozen": True}

    argv: list[str]
    returncode: int
    cwd: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def format_command(argv: Sequence[str]) -> str:
    """Shell-quoted rendering of *argv* for logs and plans."""
    return shlex.join(argv)


def run_command(argv: Sequence[str], *, cwd: Path | None = None) -> CommandOutcome:
    """Run *argv* to completion in *cwd*. Raises CommandNotFoundError.

    The child shares the terminal's process group, so Ctrl-C reaches it
    directly. The launcher then waits for it to finish its own cleanup
    instead of killing it, and reports ``128 + SIGINT``.
    """
    argv = list(argv)
    if shutil.which(argv[0]) is None:
        raise CommandNotFoundError(argv[0])

    logger.info("exec %s (cwd=%s)", format_command(argv), cwd or Path.cwd())
    try:
        proc = subprocess.Popen(argv, cwd=cwd)
    except OSError as exc:
        raise CommandNotFoundError(argv[0], str(exc)) from exc

    try:
        returncode = proc.wait()
    except KeyboardInterrupt:
        logger.warning("interrupted, waiting for %s to exit", argv[0])
        proc.wait()
        returncode = EXIT_INTERRUPTED

    logger.debug("%s exited with %d", argv[0], returncode)
    return CommandOutcome(
        argv=argv,
        returncode=returncode,
        cwd=str(cwd) if cwd else None,
    )
