"""Manifest discovery: find the pyproject.toml whose version is authoritative.

The search starts in the working directory and walks up one directory at
a time, asking the user to confirm each candidate. It never looks above
the repository root, so the number of iterations is bounded by the
distance between the start directory and the root.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol

from tomlkit.exceptions import TOMLKitError

from .errors import (
    ExhaustedDirectoryError,
    InvalidLabelError,
    InvalidManifestVersionError,
    NoManifestError,
    UserAbortedError,
)
from .models import ManifestAnswer, ManifestRecord, SessionConfig
from .prompt import Prompt
from .toml import (
    get_project_version,
    is_version_dynamic,
    load_pyproject,
    set_project_version,
)
from .versions import is_valid

logger = logging.getLogger(__name__)

MANIFEST_NAME = "pyproject.toml"


class ManifestReader(Protocol):
    def read(self, directory: Path) -> ManifestRecord: ...

    def write_version(self, record: ManifestRecord, version: str) -> bool: ...


class PyprojectReader:
    """Reads and writes the version of a pyproject.toml manifest."""

    def read(self, directory: Path) -> ManifestRecord:
        """Load the manifest that lives directly in directory.

        Raises:
            NoManifestError: If directory has no pyproject.toml.
            InvalidManifestVersionError: If the file cannot be parsed or its
                version is not a semver label.
        """
        path = directory / MANIFEST_NAME
        if not path.is_file():
            raise NoManifestError(f"No {MANIFEST_NAME} found in {directory}.")
        try:
            doc = load_pyproject(path)
        except TOMLKitError as err:
            raise InvalidManifestVersionError(path, err) from err

        version = get_project_version(doc)
        if version is not None and not is_valid(version):
            raise InvalidManifestVersionError(path, InvalidLabelError(version))
        return ManifestRecord(path=path, version=version, raw=doc)

    def write_version(self, record: ManifestRecord, version: str) -> bool:
        """Set [project].version; returns False when the version is dynamic."""
        if is_version_dynamic(load_pyproject(record.path)):
            logger.debug(f"{record.path} declares a dynamic version, not writing.")
            return False
        set_project_version(record.path, version)
        return True


def _is_strictly_inside(directory: Path, repo_root: Path) -> bool:
    """True when directory is below repo_root (not the root, not outside it).

    The relative path from directory to the root must consist of ".."
    only; "." means they are the same directory, any named part means
    directory is outside the repository.
    """
    parts = Path(os.path.relpath(repo_root, directory)).parts
    return bool(parts) and all(part == os.pardir for part in parts)


def search_path(start_dir: Path, repo_root: Path) -> list[Path]:
    """The directories a search may visit, nearest first.

    Ends at repo_root, or is just [start_dir] when start_dir is not inside
    the repository.
    """
    current = start_dir.resolve()
    root = repo_root.resolve()
    dirs = [current]
    while _is_strictly_inside(current, root):
        current = current.parent
        dirs.append(current)
    return dirs


class ManifestResolver:
    """Interactive, bounded upward search for a project manifest.

    Args:
        reader: Loads a manifest from a single directory.
        prompt: Asks the user to confirm each candidate.
        config: Session config updated with the search outcome.
    """

    def __init__(
        self, reader: ManifestReader, prompt: Prompt, config: SessionConfig
    ) -> None:
        self.reader = reader
        self.prompt = prompt
        self.config = config

    def resolve(self, start_dir: Path, repo_root: Path) -> ManifestRecord | None:
        """Find the manifest the user accepts, walking up to repo_root.

        Returns:
            The accepted record, or None if the user stopped the search.
            Once the search is exhausted, later calls return the stored
            outcome without prompting.

        Raises:
            UserAbortedError: If the user picks "Abort".
            ExhaustedDirectoryError: If the user rejects the candidate found
                at (or outside) the repository root.
            InvalidManifestVersionError: If a manifest has a bad version.
        """
        if self.config.manifest_exhausted:
            logger.debug("Manifest search already exhausted, skipping.")
            return self.stored_record()

        # Explicit bounded stack, nearest directory on top
        pending = list(reversed(search_path(start_dir, repo_root)))
        while pending:
            directory = pending.pop()
            logger.debug(f"Looking for {MANIFEST_NAME} in {directory}")

            try:
                record = self.reader.read(directory)
            except NoManifestError:
                if not pending:
                    self._exhaust()
                    raise ExhaustedDirectoryError() from None
                if not self.prompt.confirm(
                    f"No {MANIFEST_NAME} found in {directory}, keep looking?"
                ):
                    self._exhaust()
                    return None
                continue

            self.config.manifest_found = True
            answer = self.prompt.list(
                f"{MANIFEST_NAME} found in {record.directory}, is this file correct?",
                [a.value for a in ManifestAnswer],
            )
            if answer == ManifestAnswer.YES.value:
                self.config.accept_manifest(record)
                logger.debug(f"Accepted manifest {record.path}")
                return record
            if answer == ManifestAnswer.ABORT.value:
                raise UserAbortedError()

            # Rejected: discard and move one level up if still inside the repo
            self.config.reject_manifest()
            if not _is_strictly_inside(record.directory, repo_root.resolve()):
                self._exhaust()
                raise ExhaustedDirectoryError()

        self._exhaust()
        raise ExhaustedDirectoryError()

    def _exhaust(self) -> None:
        self.config.manifest_exhausted = True
        self.config.manifest_valid = False

    def stored_record(self) -> ManifestRecord | None:
        """The accepted manifest as recorded in the session config, if any."""
        if not (self.config.manifest_valid and self.config.manifest_path):
            return None
        return ManifestRecord(
            path=Path(self.config.manifest_path),
            version=self.config.manifest_version,
        )
