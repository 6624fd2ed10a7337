"""LaunchService — build the builder image, then run the containerized build.

Pipeline: BUILD IMAGE → CHECK TARGET → PREPARE CACHES → RUN

Each step is checked before the next one starts. A failed image build
never reaches the runner, and the failing command's exit status becomes
the result's exit code.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from rethbuild.domain.layout import ProjectLayout
from rethbuild.domain.mounts import build_mounts
from rethbuild.infrastructure.engine import ContainerEngine
from rethbuild.infrastructure.process import CommandNotFoundError, format_command
from rethbuild.infrastructure.runner import BuildRunner
from rethbuild.services.base import BaseService
from rethbuild.services.result import ServiceResult

if TYPE_CHECKING:
    from rethbuild.config.settings import LauncherSettings
    from rethbuild.domain.mounts import Mount

logger = logging.getLogger(__name__)

# Shell convention for "command not found".
EXIT_NOT_FOUND = 127


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class LaunchService(BaseService):
    """Builds the image and launches the build-runner for one checkout."""

    def __init__(
        self,
        settings: LauncherSettings,
        *,
        engine: ContainerEngine | None = None,
        runner: BuildRunner | None = None,
    ) -> None:
        super().__init__(settings)
        self._layout = ProjectLayout.resolve(settings.base_dir, settings.layout)
        self._engine = engine or ContainerEngine(settings.docker)
        self._runner = runner or BuildRunner(settings.runner.command, settings.runner.name)

    @property
    def layout(self) -> ProjectLayout:
        return self._layout

    @property
    def mounts(self) -> list[Mount]:
        return build_mounts(self._layout, self._settings.volume)

    def _build_argv(self) -> list[str]:
        return self._engine.build_argv(self._settings.image, self._layout.launcher_dir)

    def _run_argv(self, extra_args: Sequence[str] = ()) -> list[str]:
        return self._runner.argv(self._settings.image, self.mounts, extra_args)

    def _layout_warnings(self) -> list[str]:
        return [
            f"Read-only dependency not found: {path}" for path in self._layout.missing_readonly()
        ]

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def plan(self, extra_args: Sequence[str] = ()) -> ServiceResult:
        """Resolve everything a launch would do without executing it."""
        layout = self._layout
        warnings: list[str] = []
        if not layout.dockerfile.is_file():
            warnings.append(f"No Dockerfile in launcher directory: {layout.launcher_dir}")
        if not layout.target_dir.is_dir():
            warnings.append(f"Target directory not found: {layout.target_dir}")
        warnings.extend(self._layout_warnings())

        return ServiceResult(
            ok=True,
            op="plan",
            data={
                "image": self._settings.image,
                "volume": self._settings.volume,
                "docker": self._settings.docker,
                "config_path": str(self._settings.config_path or ""),
                "launcher_dir": str(layout.launcher_dir),
                "projects_dir": str(layout.projects_dir),
                "target_dir": str(layout.target_dir),
                "build_command": format_command(self._build_argv()),
                "run_command": format_command(self._run_argv(extra_args)),
                "mounts": [m.spec for m in self.mounts],
            },
            warnings=warnings,
        )

    def build_image(self) -> ServiceResult:
        """Build and tag the builder image from the launcher directory."""
        op = "build_image"
        image = self._settings.image
        context = self._layout.launcher_dir
        command = format_command(self._build_argv())
        data: dict[str, Any] = {"image": image, "context": str(context), "command": command}

        if not self._layout.dockerfile.is_file():
            return self._fail(
                op,
                "DOCKERFILE_MISSING",
                f"No Dockerfile in launcher directory: {context}",
                data=data,
                exit_code=1,
            )

        if self._settings.dry_run:
            return ServiceResult(ok=True, op=op, data=data, meta={"dry_run": True})

        start = time.perf_counter()
        try:
            outcome = self._engine.build(image, context)
        except CommandNotFoundError as exc:
            return self._fail(
                op,
                "ENGINE_NOT_FOUND",
                f"Container engine {exc.command!r} is not available ({exc.reason})",
                data=data,
                exit_code=EXIT_NOT_FOUND,
            )

        if not outcome.ok:
            return self._fail(
                op,
                "BUILD_FAILED",
                f"Image build for {image} exited with status {outcome.returncode}",
                data=data,
                exit_code=outcome.returncode,
            )

        logger.info("built image %s", image)
        return ServiceResult(
            ok=True,
            op=op,
            data={**data, "returncode": outcome.returncode},
            meta={"duration_ms": _elapsed_ms(start)},
        )

    def launch(
        self,
        *,
        skip_build: bool = False,
        extra_args: Sequence[str] = (),
    ) -> ServiceResult:
        """Build the image (unless *skip_build*) then run the build-runner."""
        op = "launch"
        layout = self._layout
        dry_run = self._settings.dry_run
        start = time.perf_counter()

        data: dict[str, Any] = {
            "image": self._settings.image,
            "volume": self._settings.volume,
            "target_dir": str(layout.target_dir),
            "build_command": None,
            "run_command": format_command(self._run_argv(extra_args)),
            "mounts": [m.spec for m in self.mounts],
        }

        # --- BUILD IMAGE ---
        if not skip_build:
            built = self.build_image()
            data["build_command"] = built.data.get("command")
            if not built.ok:
                assert built.error is not None
                return self._fail(
                    op,
                    built.error.code,
                    built.error.message,
                    data=data,
                    **built.error.detail,
                )

        # --- CHECK TARGET ---
        if not layout.target_dir.is_dir():
            return self._fail(
                op,
                "TARGET_MISSING",
                f"Target directory not found: {layout.target_dir}",
                data=data,
                exit_code=1,
            )
        warnings = self._layout_warnings()

        if dry_run:
            return ServiceResult(
                ok=True, op=op, data=data, warnings=warnings, meta={"dry_run": True}
            )

        # --- PREPARE CACHES ---
        for cache in (layout.cargo_git, layout.cargo_registry):
            try:
                cache.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                return self._fail(
                    op,
                    "CACHE_DIR_FAILED",
                    f"Cannot create cache directory {cache}: {exc}",
                    warnings=warnings,
                    data=data,
                    exit_code=1,
                )

        # --- RUN ---
        try:
            outcome = self._runner.run(
                self._settings.image,
                self.mounts,
                cwd=layout.target_dir,
                extra_args=extra_args,
            )
        except CommandNotFoundError as exc:
            return self._fail(
                op,
                "RUNNER_NOT_FOUND",
                f"Build runner {exc.command!r} is not available ({exc.reason})",
                warnings=warnings,
                data=data,
                exit_code=EXIT_NOT_FOUND,
            )

        if not outcome.ok:
            return self._fail(
                op,
                "RUNNER_FAILED",
                f"{self._runner.command} exited with status {outcome.returncode}",
                warnings=warnings,
                data=data,
                exit_code=outcome.returncode,
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={**data, "returncode": outcome.returncode},
            warnings=warnings,
            meta={"duration_ms": _elapsed_ms(start)},
        )
