"""Changelog file handling and the backup → regenerate → commit → cleanup step.

If regeneration or the commit fails, the backup copy stays on disk and the
error propagates. Restoring it is an explicit action (ChangelogFile.restore,
exposed as the ``restore-changelog`` command), never done automatically.
A later transaction refuses to start while that backup is still present.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from .commits import ChangelogGenerator
from .errors import ChangelogBackupExistsError, ChangelogNotFoundError
from .git import GitSurface
from .models import ReleaseOptions
from .shell import step

logger = logging.getLogger(__name__)

CHANGELOG_NAMES = ("changelog.md", "Changelog.md", "CHANGELOG.md")
DEFAULT_CHANGELOG = "CHANGELOG.md"
BACKUP_PREFIX = "backup"
COMMIT_MESSAGE = "docs(changelog): bump to {label}"


def backup_path(path: Path) -> Path:
    """Where the backup of a changelog lives: backup.<name> next to it."""
    return path.with_name(f"{BACKUP_PREFIX}.{path.name}")


class ChangelogFile:
    """The single changelog file of a directory (the cwd by default)."""

    def __init__(self, directory: Path | None = None) -> None:
        self.directory = directory or Path.cwd()

    def find(self) -> Path | None:
        """Return the existing changelog, trying each accepted name in order."""
        for name in CHANGELOG_NAMES:
            path = self.directory / name
            if path.is_file():
                return path
        return None

    def target(self) -> Path:
        """The file to regenerate: the existing changelog or CHANGELOG.md."""
        return self.find() or self.directory / DEFAULT_CHANGELOG

    def pending_backup(self) -> Path | None:
        """A backup left on disk by an unfinished transaction, if any."""
        for name in CHANGELOG_NAMES:
            backup = backup_path(self.directory / name)
            if backup.is_file():
                return backup
        return None

    def backup(self) -> Path | None:
        """Copy the existing changelog aside; None when there is none yet.

        Raises:
            ChangelogBackupExistsError: If an earlier backup was never
                restored or cleaned up.
        """
        pending = self.pending_backup()
        if pending is not None:
            raise ChangelogBackupExistsError(pending)

        path = self.find()
        if path is None:
            logger.debug("No prior changelog file, nothing to back up.")
            return None
        dest = backup_path(path)
        shutil.copy2(path, dest)
        logger.debug(f"Backed up {path.name} to {dest.name}")
        return dest

    def write(self, chunks: Iterable[str], append: bool) -> Path:
        """Stream chunks into the changelog, appending or overwriting."""
        path = self.target()
        with path.open("a" if append else "w", encoding="utf-8") as fh:
            for chunk in chunks:
                fh.write(chunk)
        return path

    def delete_backup(self, backup: Path | None) -> None:
        if backup is None:
            return
        backup.unlink(missing_ok=True)
        logger.debug(f"Removed backup {backup.name}")

    def restore(self) -> Path:
        """Copy the backup over the working file, then delete the backup.

        Raises:
            ChangelogNotFoundError: If no backup exists.
        """
        backup = self.pending_backup()
        if backup is None:
            raise ChangelogNotFoundError()
        original = backup.with_name(backup.name.removeprefix(f"{BACKUP_PREFIX}."))
        shutil.copy2(backup, original)
        backup.unlink()
        logger.info(f"Restored {original.name} from {backup.name}.")
        return original


class ChangelogTransaction:
    """Regenerates the changelog for a new label, keeping a backup until done.

    Args:
        changelog: The changelog file to operate on.
        generator: Produces the changelog text for a preset.
        git: Used to commit the regenerated file.
        options: Changelog mode, preset, append and commit flags.
    """

    def __init__(
        self,
        changelog: ChangelogFile,
        generator: ChangelogGenerator,
        git: GitSurface,
        options: ReleaseOptions,
    ) -> None:
        self.changelog = changelog
        self.generator = generator
        self.git = git
        self.options = options

    def run(self, label: str) -> None:
        if not self.options.changelog:
            logger.debug("Skipping changelog update, not in log mode.")
            return

        step("Updating changelog")

        # 1. Backup
        backup = self.changelog.backup()

        # 2. Regenerate
        preset = self.options.changelog_preset
        logger.debug(f"Setting changelog with preset {preset}")
        logger.debug(f"Should append to changelog {self.options.append_changelog}")
        path = self.changelog.write(
            self.generator.generate(preset, label), self.options.append_changelog
        )

        # 3. Commit
        if not self.options.commit:
            logger.info(f"Bump to {label} completed, no commits made.")
        else:
            message = COMMIT_MESSAGE.format(label=label)
            results = self.git.commit([str(path)], message)
            logger.debug(f"changelog commit results: {results}")
            logger.info(f"Changelog committed with message: '{message}'.")

        # 4. Cleanup
        self.changelog.delete_backup(backup)
