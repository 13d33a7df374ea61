"""Errors raised by the release engine.

Every error the core surfaces derives from ReleaseError so the CLI can
turn them into clean messages. None of them are retried internally.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class ReleaseError(Exception):
    """Base class for all release errors."""

    default_message = "Release failed."
    code = 1

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class UserAbortedError(ReleaseError):
    """The user declined a prompt whose consent was required to continue."""

    default_message = "User aborted the execution"


class ExhaustedDirectoryError(ReleaseError):
    """Manifest search reached the repository root without an accepted file."""

    default_message = "Exhausted all directories within repository."


class NoManifestError(ReleaseError):
    """No manifest exists in the searched directory."""

    default_message = "No pyproject.toml found."


class InvalidManifestVersionError(ReleaseError):
    """A manifest exists but its version field is not a valid semver."""

    def __init__(self, path: Path, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Invalid version in manifest {path}: {cause}")


class InvalidTagError(ReleaseError):
    """The current tag does not follow semver; tags must be fixed by hand."""

    default_message = "No valid semver tag found in repository."


class NoTagError(ReleaseError):
    """A tag was listed but could not be resolved to a commit."""

    default_message = "No tags are found."

    def __init__(self, label: str | None = None) -> None:
        self.label = label
        message = None
        if label:
            message = f"{self.default_message} Could not resolve '{label}'."
        super().__init__(message)


class NoNewCommitError(ReleaseError):
    """The latest tag already points at HEAD and no force flag was given."""

    default_message = "No new commits since last valid semver tag, aborting."


class InvalidLabelError(ReleaseError):
    """A version label does not follow semver."""

    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(f"The provided label {label} does not follow semver.")


class InvalidBumpTypeError(ReleaseError):
    """A bump type outside the supported set was requested."""

    def __init__(self, bump_type: str) -> None:
        self.bump_type = bump_type
        super().__init__(f"Unknown bump type '{bump_type}'.")


class ChangelogNotFoundError(ReleaseError):
    """The changelog backup required for a restore does not exist."""

    default_message = "The changelog backup file was not found."


class ChangelogBackupExistsError(ReleaseError):
    """A backup left by an unfinished changelog update is still on disk."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"Changelog backup {path} is left from an unfinished release. "
            "Run 'semver-release restore-changelog' before bumping again."
        )


class GitCommandError(ReleaseError):
    """A git subprocess exited with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str) -> None:
        self.command = tuple(args)
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr}" if stderr else ""
        super().__init__(
            f"git {' '.join(self.command)} failed with exit code {returncode}{detail}"
        )
