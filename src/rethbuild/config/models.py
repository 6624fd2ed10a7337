"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, reth-build.toml only contains
overrides. A default checkout layout needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

DEFAULT_IMAGE = "build-reth:dev"
DEFAULT_VOLUME = "build-reth_target_dir"
DEFAULT_DOCKER = "docker"


# --- reth-build.toml sections ---


class LayoutConfig(BaseModel):
    """[layout] section — sibling checkouts under the projects directory."""

    model_config = {"frozen": True}

    target: str = "reth"
    readonly: list[str] = Field(default_factory=lambda: ["alloy"])
    target_subdir: str = "target"

    @field_validator("target", "target_subdir")
    @classmethod
    def _relative_name(cls, value: str) -> str:
        if not value or value.startswith("/"):
            msg = f"must be a non-empty relative path, got {value!r}"
            raise ValueError(msg)
        return value


class RunnerConfig(BaseModel):
    """[runner] section."""

    model_config = {"frozen": True}

    command: str = "in-docker"
    name: str = "build-reth"
