"""TOML reading and writing utilities.

Uses tomlkit to preserve formatting and comments when modifying
pyproject.toml files. This is important for keeping the version bump
commit a one-line, diff-friendly change.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, cast

import tomlkit


def load_pyproject(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a pyproject.toml file.

    Returns a TOMLDocument that preserves formatting when modified and saved.
    """
    return tomlkit.parse(path.read_text())


def save_pyproject(path: Path, doc: tomlkit.TOMLDocument) -> None:
    """Save a TOMLDocument back to disk, preserving original formatting."""
    path.write_text(tomlkit.dumps(doc))


def get_project_version(doc: tomlkit.TOMLDocument) -> str | None:
    """Extract version from [project].version, or None when not declared."""
    version = doc.get("project", {}).get("version")
    return str(version) if version is not None else None


def is_version_dynamic(doc: tomlkit.TOMLDocument) -> bool:
    """True when [project].dynamic lists "version" (set by the build backend)."""
    return "version" in doc.get("project", {}).get("dynamic", [])


def set_project_version(pyproject_path: Path, new_version: str) -> None:
    """Update [project].version in place, keeping the rest of the file intact.

    Args:
        pyproject_path: Path to the pyproject.toml file.
        new_version: New version string to set (without prefix).
    """
    doc = load_pyproject(pyproject_path)
    # Cast needed because tomlkit types are complex unions
    project = cast(dict[str, Any], doc["project"])
    project["version"] = new_version
    save_pyproject(pyproject_path, doc)
