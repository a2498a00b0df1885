"""Hunter Evolution progress engine: assessment scoring, quests and XP."""

from __future__ import annotations

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

__all__ = ["DISTRIBUTION_NAME", "__version__"]

DISTRIBUTION_NAME = "hunter-evolution"


def _checkout_version() -> str | None:
    """Return the version from this project's pyproject.toml when running from a checkout."""
    for base in Path(__file__).resolve().parents:
        pyproject = base / "pyproject.toml"
        if not pyproject.is_file():
            continue
        with pyproject.open("rb") as handle:
            project = tomllib.load(handle).get("project", {})
        if project.get("name") == DISTRIBUTION_NAME:
            return str(project["version"])
        return None
    return None


def _resolve_version() -> str:
    checkout = _checkout_version()
    if checkout is not None:
        return checkout
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return "0+unknown"


__version__ = _resolve_version()
