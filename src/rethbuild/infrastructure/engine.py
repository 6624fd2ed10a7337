"""Container engine CLI (``docker`` or a compatible binary)."""

from __future__ import annotations

from pathlib import Path

from rethbuild.infrastructure.process import CommandOutcome, run_command


class ContainerEngine:
    """Builds images through the engine's ``build`` subcommand."""

    def __init__(self, binary: str = "docker") -> None:
        self.binary = binary

    def build_argv(self, tag: str, context: Path) -> list[str]:
        return [self.binary, "build", "-t", tag, str(context)]

    def build(self, tag: str, context: Path) -> CommandOutcome:
        """Build *context* (which holds the Dockerfile) and tag it *tag*."""
        return run_command(self.build_argv(tag, context))
