"""Persistence of the session config between runs.

The config is stored as TOML inside the repository's git directory, so it
is per-checkout and never shows up in the working tree.
"""

from __future__ import annotations

import logging
from pathlib import Path

import tomlkit

from .models import SessionConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "semver-release.toml"


class ConfigStore:
    """Loads and saves a SessionConfig at a fixed path."""

    def __init__(self, path: Path) -> None:
        self.path = path

    @classmethod
    def for_git_dir(cls, git_dir: Path) -> ConfigStore:
        return cls(git_dir / CONFIG_FILENAME)

    def load(self) -> SessionConfig:
        """Return the stored config, or an empty one if nothing is stored."""
        if not self.path.exists():
            logger.debug(f"No stored config at {self.path}, starting empty.")
            return SessionConfig()
        data = tomlkit.parse(self.path.read_text()).unwrap()
        return SessionConfig.model_validate(data.get("session", {}))

    def save(self, config: SessionConfig) -> None:
        # TOML has no null, so unset fields are left out
        doc = tomlkit.document()
        doc["session"] = config.model_dump(exclude_none=True)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(tomlkit.dumps(doc))
        logger.debug(f"Saved config to {self.path}")
