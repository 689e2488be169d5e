"""
ActionFlow version, as shown by ``actionflow --version``.

An installed distribution reports its own metadata. A source checkout
that was never installed reads the version line from ``pyproject.toml``.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

__all__ = ["VERSION", "APP_NAME"]

APP_NAME = "ActionFlow"
DISTRIBUTION = "actionflow"
_UNKNOWN_VERSION = "0.0.0"


def _pyproject_version() -> str | None:
    toml_path = Path(__file__).resolve().parent.parent / "pyproject.toml"
    try:
        lines = toml_path.read_text(encoding="utf-8").splitlines()
    except OSError:
        return None

    for line in lines:
        key, sep, value = line.partition("=")
        if sep and key.strip() == "version":
            return value.strip().strip("\"'")
    return None


def _read_version() -> str:
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        return _pyproject_version() or _UNKNOWN_VERSION


VERSION = _read_version()
