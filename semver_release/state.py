"""Repository classification: is a new release warranted, and from which tag?"""

from __future__ import annotations

import logging

from .errors import UserAbortedError
from .git import GitSurface
from .models import ReleaseOptions, RepositoryClassification, SessionConfig
from .prompt import Prompt
from .versions import (
    FIRST_LABEL,
    PREFIXED_SEMVER_RE,
    UNPREFIXED_SEMVER_RE,
    VALID_SEMVER_RE,
    is_valid,
    latest,
    normalize,
    same_version,
)

logger = logging.getLogger(__name__)


def recorded_label(config: SessionConfig) -> str | None:
    """The version of record: the accepted manifest's, else the last semver."""
    if config.manifest_valid and config.manifest_version:
        return config.manifest_version
    return config.current_semver


class RepositoryState:
    """Classifies the repository into one RepositoryClassification.

    After classify() returns PRISTINE or VALID, current_tag holds the label
    the next version is computed from (normalized to the prefix flag) and
    tag_name the real git tag it was resolved through.
    """

    def __init__(
        self, git: GitSurface, prompt: Prompt, options: ReleaseOptions
    ) -> None:
        self.git = git
        self.prompt = prompt
        self.options = options
        self.current_tag: str | None = None
        self.tag_name: str | None = None

    def classify(self, config: SessionConfig) -> RepositoryClassification:
        """Derive the release readiness of the repository.

        Raises:
            UserAbortedError: If the recorded tag is missing and the user
                declines to continue.
            NoTagError: If the tag cannot be resolved to a commit.
        """
        self.current_tag = None
        self.tag_name = None

        if not self.git.any_tags():
            return RepositoryClassification.NO_TAG

        label = recorded_label(config) or FIRST_LABEL
        if not is_valid(label):
            logger.debug(f"Recorded label {label!r} is not semver")
            return RepositoryClassification.INVALID_TAG

        current = normalize(label, self.options.prefix)
        tag_name = self.find_tag(current)

        if tag_name is None:
            if not self.prompt.confirm(
                f"Tag {current} is not present in repository, continue?"
            ):
                raise UserAbortedError()

            pattern = (
                PREFIXED_SEMVER_RE if self.options.prefix else UNPREFIXED_SEMVER_RE
            )
            found = latest(self.git.list_tags(pattern))
            if found is None:
                return RepositoryClassification.FIRST_TAG
            current = tag_name = found

        commit = self.git.resolve_tag_to_commit(tag_name)
        self.current_tag = current
        self.tag_name = tag_name

        count = self.git.commit_count_since(commit)
        logger.debug(f"{count} commit(s) since {tag_name} ({commit[:12]})")
        if count == 0:
            return RepositoryClassification.PRISTINE
        return RepositoryClassification.VALID

    def find_tag(self, label: str) -> str | None:
        """Return the real tag carrying label's version, prefixed or not.

        The rendering that matches the prefix flag is preferred.
        """
        if self.git.tag_exists(label):
            return label
        for tag in self.git.list_tags(VALID_SEMVER_RE):
            if same_version(tag, label):
                return tag
        return None
