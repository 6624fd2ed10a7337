"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``BUILDER_IMAGE``, ``TARGET_DIR_VOLUME``, ``DOCKER`` and
                    the ``RETH_BUILD_*`` prefix for everything else
  3. TOML file    — ``reth-build.toml`` discovered via walk-up
  4. Code defaults — baked into the field defaults and section models

The three unprefixed variables keep the names the builder image has always
been driven by; they are modelled as validation aliases so every source
(init, env, TOML) writes to the same key and the priority chain holds.
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from rethbuild.config.discovery import find_config, find_launcher_dir
from rethbuild.config.models import (
    DEFAULT_DOCKER,
    DEFAULT_IMAGE,
    DEFAULT_VOLUME,
    LayoutConfig,
    RunnerConfig,
)
from rethbuild.domain.layout import launcher_dir

# Field name -> external name shared by env vars, TOML translation and init kwargs.
ENV_ALIASES: dict[str, str] = {
    "image": "BUILDER_IMAGE",
    "volume": "TARGET_DIR_VOLUME",
    "docker": "DOCKER",
}
BASE_DIR_ENV_VAR = "RETH_BUILD_BASE_DIR"


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``reth-build.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc
            self._data = {ENV_ALIASES.get(key, key): value for key, value in data.items()}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class LauncherSettings(BaseSettings):
    """Explicit configuration for one launcher invocation.

    Built once by the root CLI group and passed to the launch service;
    nothing downstream reads the environment directly.

    Attributes:
        base_dir: Launcher directory (holds the Dockerfile and cargo caches).
        config_path: The TOML file that was loaded, if any.
        image: Image tag to build and run.
        volume: Named volume mounted over the target's build output.
        docker: Container engine binary.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "RETH_BUILD_",
        "env_nested_delimiter": "__",
        "env_ignore_empty": True,
    }

    # --- Resolved paths ---
    base_dir: Path = Field(default_factory=Path.cwd, validate_default=True)
    config_path: Path | None = None

    # --- Launch parameters ---
    image: str = Field(default=DEFAULT_IMAGE, validation_alias=ENV_ALIASES["image"])
    volume: str = Field(default=DEFAULT_VOLUME, validation_alias=ENV_ALIASES["volume"])
    docker: str = Field(default=DEFAULT_DOCKER, validation_alias=ENV_ALIASES["docker"])

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    dry_run: bool = False

    # --- TOML sections ---
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)

    @field_validator("base_dir")
    @classmethod
    def _resolve_base_dir(cls, value: Path) -> Path:
        return launcher_dir(value)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        base_dir: Path | str | None = None,
        **cli_flags: Any,
    ) -> LauncherSettings:
        """Construct settings from CLI invocation.

        Discovers ``reth-build.toml`` via walk-up (or explicit *config_path*)
        and merges CLI flags as highest-priority overrides. Flags passed as
        None are treated as unset so lower sources still apply.

        Without an explicit *base_dir* the launcher directory is the config
        file's parent, then RETH_BUILD_BASE_DIR, then the nearest
        ``.dev/Dockerfile`` above the current directory, then the current
        directory itself.

        Raises:
            click.ClickException: The TOML file or a merged value is invalid.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(Path(base_dir) if base_dir is not None else None)

        resolved_root = base_dir
        if resolved_root is None and toml_path is not None:
            resolved_root = toml_path.parent
        if resolved_root is None and not os.environ.get(BASE_DIR_ENV_VAR):
            resolved_root = find_launcher_dir()

        overrides: dict[str, Any] = {
            ENV_ALIASES.get(key, key): value for key, value in cli_flags.items() if value is not None
        }
        if resolved_root is not None:
            overrides["base_dir"] = Path(resolved_root)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        except ValidationError as exc:
            msg = f"Invalid configuration: {exc}"
            raise click.ClickException(msg) from exc
        finally:
            _tls.toml_path = None
