"""
ActionFlow Configuration — Settings and catalog root resolution.

The settings manage:
  - An explicit catalog root override (ACTIONFLOW_WORKFLOWS_ROOT)
  - Log level and output format for the CLI

Without an override, the catalog root is the first existing entry of
``candidate_roots()``, tried in order.
"""

from functools import lru_cache
from pathlib import Path
from typing import Sequence

from pydantic_settings import BaseSettings, SettingsConfigDict

WORKFLOWS_DIRNAME = "workflows"


class ActionFlowSettings(BaseSettings):
    """Tool-wide settings, read from ACTIONFLOW_* env vars and .env files."""

    model_config = SettingsConfigDict(
        env_prefix="ACTIONFLOW_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Catalog ──────────────────────────────────────────────────────
    workflows_root: str | None = None

    # ── Logging ──────────────────────────────────────────────────────
    log_level: str = "WARNING"
    log_json: bool = False


@lru_cache
def get_settings() -> ActionFlowSettings:
    """Singleton accessor — parsed once, cached forever."""
    return ActionFlowSettings()


def candidate_roots() -> list[Path]:
    """
    Ordered catalog root candidates.

      1. Development layout: ``<repo>/workflows`` next to the package
      2. Installed-package layout: ``<package>/workflows``, the bundled
         catalog shipped as package data
      3. Current working directory: ``./workflows``
    """
    package_dir = Path(__file__).resolve().parent
    return [
        package_dir.parent / WORKFLOWS_DIRNAME,
        package_dir / WORKFLOWS_DIRNAME,
        Path.cwd() / WORKFLOWS_DIRNAME,
    ]


def resolve_workflows_root(
    override: str | Path | None = None,
    candidates: Sequence[Path] | None = None,
) -> Path:
    """
    Pick the catalog root.

    An explicit override always wins, existing or not. Otherwise the first
    existing candidate is used; if none exists the first candidate is
    returned and discovery simply finds nothing there.
    """
    if override:
        return Path(override)

    roots = list(candidates) if candidates is not None else candidate_roots()
    for root in roots:
        if root.is_dir():
            return root
    return roots[0] if roots else Path(WORKFLOWS_DIRNAME)
