"""Data models for semver-release.

These Pydantic models represent the state that flows through one release
attempt: the options chosen on the command line, the session config that
survives between runs, and the manifest discovered along the way.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict


class RepositoryClassification(str, Enum):
    """Release readiness of the repository, recomputed on every attempt."""

    NO_TAG = "NoTag"
    FIRST_TAG = "FirstTag"
    INVALID_TAG = "InvalidTag"
    PRISTINE = "Pristine"
    VALID = "Valid"


class ManifestAnswer(str, Enum):
    """Choices offered when a candidate manifest is presented."""

    YES = "Yes"
    NO = "No"
    ABORT = "Abort"


class ManifestRecord(BaseModel):
    """A discovered project manifest.

    Attributes:
        path: Path to the pyproject.toml file.
        version: The static [project].version, or None when not declared.
        raw: The parsed document, kept so it can be written back unchanged.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    path: Path
    version: str | None = None
    raw: Any = None

    @property
    def directory(self) -> Path:
        return self.path.parent


class SessionConfig(BaseModel):
    """Process-scoped state filled in progressively during a release run.

    Persisted between runs by ConfigStore, so setup prompts only run once
    per checkout unless reset.
    """

    configured: bool = False
    manifest_found: bool = False
    manifest_valid: bool = False
    manifest_exhausted: bool = False
    manifest_path: str | None = None
    manifest_version: str | None = None
    current_semver: str | None = None
    develop_branch: str | None = None

    def reset(self) -> None:
        """Return every field to its default."""
        for name, field in type(self).model_fields.items():
            setattr(self, name, field.default)

    def accept_manifest(self, record: ManifestRecord) -> None:
        self.manifest_found = True
        self.manifest_valid = True
        self.manifest_exhausted = True
        self.manifest_path = str(record.path)
        self.manifest_version = record.version

    def reject_manifest(self) -> None:
        self.manifest_valid = False
        self.manifest_path = None
        self.manifest_version = None


class ReleaseOptions(BaseModel):
    """The flags of a release run that the engine reads.

    Attributes:
        release: Bump type, "automatic", or None to ask the user.
        prefix: Render labels and tags with a leading "v".
        identifier: Pre-release identifier (e.g., "beta") for pre bumps.
        force: Bump even when there are no commits since the last tag.
        commit: Commit the changelog and create the tag.
        changelog: Regenerate the changelog file.
        changelog_preset: Commit convention used to render the changelog.
        append_changelog: Append to the changelog instead of overwriting it.
        update_manifest: Write the new version back to pyproject.toml.
        strict_manifest: Fail when no manifest is accepted.
        reset: Forget the stored session config before running.
        find_manifest: Search for a manifest again even if already exhausted.
    """

    release: str | None = "minor"
    prefix: bool = True
    identifier: str | None = None
    force: bool = False
    commit: bool = True
    changelog: bool = True
    changelog_preset: str = "angular"
    append_changelog: bool = True
    update_manifest: bool = True
    strict_manifest: bool = False
    reset: bool = False
    find_manifest: bool = False
