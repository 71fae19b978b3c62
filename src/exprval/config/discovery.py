"""Locate ``exprval.toml``.

``EXPRVAL_CONFIG`` names the file outright. Otherwise the search starts
at a directory (CWD by default) and climbs towards the filesystem root,
stopping at the first directory that holds ``exprval.toml``.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from exprval.config.models import ExprvalConfig

CONFIG_FILENAME = "exprval.toml"
CONFIG_ENV_VAR = "EXPRVAL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start*, or None.

    A set but missing ``EXPRVAL_CONFIG`` disables the walk-up: the caller
    asked for a specific file and gets nothing rather than a surprise.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> ExprvalConfig:
    """Read *path* (or the discovered file) into an :class:`ExprvalConfig`.

    No file means all defaults. A present but malformed file raises
    ``tomllib.TOMLDecodeError`` or ``pydantic.ValidationError``.
    """
    target = path if path is not None else find_config(cwd)
    if target is None:
        return ExprvalConfig()
    with target.open("rb") as fh:
        return ExprvalConfig.model_validate(tomllib.load(fh))
