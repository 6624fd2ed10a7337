"""Config file and launcher directory discovery.

The config lives in the launcher directory, next to the Dockerfile. It is
found by walking up from the current directory, checking each level both
for ``reth-build.toml`` itself and for ``.dev/reth-build.toml``, so the
launcher works from anywhere inside the reth checkout as well as from the
launcher directory. RETH_BUILD_CONFIG and --config override the search.

Without a config file the launcher directory is found the same way, by the
nearest ``.dev/Dockerfile`` above the current directory. A bare
``Dockerfile`` does not count: the reth checkout root ships its own.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "reth-build.toml"
CONFIG_ENV_VAR = "RETH_BUILD_CONFIG"
LAUNCHER_SUBDIR = ".dev"
DOCKERFILE = "Dockerfile"


def _levels(start: Path) -> Iterator[Path]:
    current = start.resolve()
    while True:
        yield current
        if current.parent == current:
            return
        current = current.parent


def _candidates(start: Path) -> Iterator[Path]:
    for level in _levels(start):
        yield level / CONFIG_FILENAME
        yield level / LAUNCHER_SUBDIR / CONFIG_FILENAME


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest config file above *start* (default: cwd), or None.

    RETH_BUILD_CONFIG, when set, is authoritative: its file or nothing.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    return next((c for c in _candidates(start or Path.cwd()) if c.is_file()), None)


def find_launcher_dir(start: Path | None = None) -> Path | None:
    """Return the nearest ``.dev`` directory holding a Dockerfile, or None."""
    for level in _levels(start or Path.cwd()):
        launcher = level / LAUNCHER_SUBDIR
        if (launcher / DOCKERFILE).is_file():
            return launcher
    return None
