"""Release pipeline: setup → sync → classify → label → apply.

This module orchestrates one release attempt:
1. Set up the session (release type, manifest discovery, develop branch)
2. Sync the version of record from the manifest or the existing tags
3. Classify the repository (NoTag, FirstTag, InvalidTag, Pristine, Valid)
4. Compute the next label from the classification and the bump type
5. Apply it: changelog transaction, tag, manifest write-back

Every step runs strictly after the previous one. A UserAbortedError
raised at any prompt stops the run before any later side effect.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .changelog import ChangelogFile, ChangelogTransaction
from .commits import (
    BumpFinder,
    ConventionalBumpFinder,
    ConventionalChangelogGenerator,
)
from .config import ConfigStore
from .errors import (
    ExhaustedDirectoryError,
    InvalidTagError,
    NoManifestError,
    NoNewCommitError,
    NoTagError,
    ReleaseError,
    UserAbortedError,
)
from .git import GitRepository, GitSurface
from .manifest import ManifestReader, ManifestResolver, PyprojectReader
from .models import ReleaseOptions, RepositoryClassification, SessionConfig
from .prompt import ClickPrompt, Prompt
from .shell import step
from .state import RepositoryState
from .versions import (
    BUMP_TYPES,
    FIRST_LABEL,
    VALID_SEMVER_RE,
    increment,
    latest,
    normalize,
)

logger = logging.getLogger(__name__)

AUTOMATIC = "automatic"
RELEASE_CHOICES = [
    AUTOMATIC,
    "major",
    "minor",
    "patch",
    "premajor",
    "preminor",
    "prepatch",
]


class ReleaseOrchestrator:
    """Drives one release attempt from setup to the applied label.

    Args:
        options: Flags for this run. ``release`` is filled in by prompt
            when None.
        config: Session config, mutated in place as the run progresses.
        git: Repository query/mutation surface.
        prompt: Interactive prompts.
        manifest_reader: Loads and writes pyproject.toml manifests.
        bump_finder: Suggests a bump type for "automatic" releases.
        changelog: The changelog transaction run for the new label.
        cwd: Directory the manifest search starts from.
    """

    def __init__(
        self,
        options: ReleaseOptions,
        config: SessionConfig,
        git: GitSurface,
        prompt: Prompt,
        manifest_reader: ManifestReader,
        bump_finder: BumpFinder,
        changelog: ChangelogTransaction,
        cwd: Path | None = None,
    ) -> None:
        self.options = options
        self.config = config
        self.git = git
        self.prompt = prompt
        self.bump_finder = bump_finder
        self.changelog = changelog
        self.cwd = cwd or Path.cwd()
        self.manifest_reader = manifest_reader
        self.resolver = ManifestResolver(manifest_reader, prompt, config)
        self.state = RepositoryState(git, prompt, options)
        self.repo_root: Path | None = None

    def run(self) -> str:
        """Execute the release attempt and return the applied label."""
        logger.debug("starting")

        self.set_default_config()
        self.sync_versions()

        if self.config.manifest_valid or self.config.current_semver:
            return self.bump()

        raise ReleaseError("Unknown config state.")

    # -- setup -----------------------------------------------------------

    def set_default_config(self) -> None:
        """Run the one-time setup prompts unless the session is configured."""
        self.repo_root = self.git.repository_root_dir()

        if self.options.reset:
            self.config.reset()
        if self.options.find_manifest:
            self.config.manifest_exhausted = False

        self.check_release_type()

        # Also runs for a configured session when find_manifest reopened it
        if not self.config.manifest_exhausted:
            self.resolve_manifest(self.repo_root)

        if self.config.configured:
            logger.debug("Already configured, skipping default config.")
            return

        self.ask_about_develop_branch()

        self.config.configured = True
        logger.debug("configuration completed.")

    def check_release_type(self) -> None:
        """Ask for the increment type when none was given."""
        logger.debug(f"release is set to {self.options.release}")
        if self.options.release is not None:
            return

        answer = self.prompt.list(
            "What type of increment do you want?", RELEASE_CHOICES
        )
        logger.debug(f"setting release as {answer}")
        self.options.release = answer

    def resolve_manifest(self, repo_root: Path) -> None:
        """Look for the pyproject.toml to take the version from.

        Ending the search without an accepted file is not an error unless
        strict_manifest is set.
        """
        step("Looking for pyproject.toml")
        try:
            record = self.resolver.resolve(self.cwd, repo_root)
        except (ExhaustedDirectoryError, NoManifestError) as err:
            if self.options.strict_manifest:
                raise
            logger.debug(f"No file found, skipping: {err}")
            return

        if record is None:
            if self.options.strict_manifest:
                raise NoManifestError()
            logger.debug("Manifest search stopped by user, skipping.")
            return
        print(f"  {record.path} ({record.version or '<dynamic version>'})")

    def ask_about_develop_branch(self) -> None:
        if not self.prompt.confirm("Is this repo using a develop branch?"):
            return
        self.config.develop_branch = self.prompt.input(
            "What's the develop branch name? [develop]", "develop"
        )

    def sync_versions(self) -> None:
        """Record the newest known version as the current semver.

        The accepted manifest's version wins over tags. With neither, the
        user must agree to start from the baseline label.
        """
        if self.config.manifest_valid and self.config.manifest_version:
            self.config.current_semver = self.config.manifest_version
            return

        tags = self.git.list_tags(VALID_SEMVER_RE)

        if not tags:
            self.config.current_semver = None
            if not self.prompt.confirm("No valid semver tags found, continue?"):
                raise UserAbortedError()

        self.config.current_semver = latest(tags) or FIRST_LABEL
        logger.debug(f"current semver is {self.config.current_semver}")

    # -- bump ------------------------------------------------------------

    def bump(self) -> str:
        """Classify the repository and bump from the matching base label."""
        step("Checking repository state")
        status = self.state.classify(self.config)
        logger.debug(f"the branch status is {status.value}")
        at = f" at {self.state.tag_name}" if self.state.tag_name else ""
        print(f"  {status.value}{at}")

        if status is RepositoryClassification.PRISTINE:
            if not self.options.force:
                raise NoNewCommitError()
            return self.apply(self.construct_label(self._tag_label()))

        if status is RepositoryClassification.VALID:
            manifest_version = self._manifest_version()
            if manifest_version:
                return self.apply(self.label_from_manifest(manifest_version))
            return self.apply(self.construct_label(self._tag_label()))

        if status is RepositoryClassification.FIRST_TAG:
            return self.apply(self.construct_label(self._first_label()))

        if status is RepositoryClassification.NO_TAG:
            # An accepted manifest is trusted to hold a valid version
            manifest_version = self._manifest_version()
            if manifest_version:
                return self.apply(self.label_from_manifest(manifest_version))
            question = f"{NoTagError.default_message} Create first tag?"
            if not self.prompt.confirm(question):
                raise UserAbortedError()
            return self.apply(self.construct_label(self._first_label()))

        raise InvalidTagError()

    def label_from_manifest(self, version: str) -> str:
        return self.construct_label(normalize(version, self.options.prefix))

    def construct_label(self, name: str) -> str:
        """Increment name by the resolved bump type, rendered per the prefix flag."""
        bump_type = self.resolve_bump_type()
        identifier = self.options.identifier
        label = increment(name, bump_type, identifier)

        logger.debug(
            f"made {label}, with {name}, {bump_type} and identifier {identifier}"
        )
        return normalize(label, self.options.prefix)

    def resolve_bump_type(self) -> str:
        """The bump type for this run, as a pre-release on the develop branch."""
        release = self.options.release
        bump_type = (
            self.bump_finder.suggest_bump_type() if release == AUTOMATIC else release
        )
        logger.debug(f"Bump type set to {bump_type}, with release type {release}")

        if bump_type is None:
            raise ReleaseError("No release type was chosen.")
        develop = self.config.develop_branch
        if (
            develop
            and bump_type in BUMP_TYPES[:3]
            and self.git.current_branch_name() == develop
        ):
            return f"pre{bump_type}"
        return bump_type

    # -- apply -----------------------------------------------------------

    def apply(self, label: str) -> str:
        """Changelog transaction, then tag, then manifest write-back."""
        self.changelog.run(label)
        self.create_tag(label)
        self.update_manifest_version(label)

        print(f"\n{'=' * 60}\nReleased {label}\n{'=' * 60}")
        return label

    def create_tag(self, label: str) -> None:
        """Record label in the session config and tag HEAD if committing."""
        if self.config.manifest_valid:
            self.config.manifest_version = normalize(label, False)
        self.config.current_semver = label

        if not self.options.commit:
            logger.info(f"Bump to {label} completed, not committing.")
            return

        tag = normalize(label, self.options.prefix)
        step("Tagging release")
        logger.info(f"Creating new tag as '{tag}'.")
        self.git.create_tag(tag)

    def update_manifest_version(self, label: str) -> None:
        if not self.options.update_manifest:
            logger.debug("Skipping pyproject.toml version update, flag not set.")
            return
        record = self.resolver.stored_record()
        if record is None:
            logger.debug("Skipping pyproject.toml version update, invalid file.")
            return

        version = normalize(label, False)
        if self.manifest_reader.write_version(record, version):
            logger.info(f"Manifest updated with version '{version}'.")

    def _manifest_version(self) -> str | None:
        return self.config.manifest_version if self.config.manifest_valid else None

    def _tag_label(self) -> str:
        if self.state.current_tag is None:
            raise NoTagError()
        return self.state.current_tag

    def _first_label(self) -> str:
        return normalize(FIRST_LABEL, self.options.prefix)


def run_release(
    options: ReleaseOptions,
    *,
    prompt: Prompt | None = None,
    cwd: Path | None = None,
) -> str:
    """Execute a release against the git repository at cwd.

    The session config is loaded from and saved back to the repository's
    git directory, also when the run fails part-way.

    Returns:
        The applied label.
    """
    cwd = cwd or Path.cwd()
    git = GitRepository(cwd)
    store = ConfigStore.for_git_dir(git.git_dir())
    config = store.load()

    transaction = ChangelogTransaction(
        ChangelogFile(cwd), ConventionalChangelogGenerator(git), git, options
    )
    orchestrator = ReleaseOrchestrator(
        options=options,
        config=config,
        git=git,
        prompt=prompt or ClickPrompt(),
        manifest_reader=PyprojectReader(),
        bump_finder=ConventionalBumpFinder(git),
        changelog=transaction,
        cwd=cwd,
    )
    try:
        return orchestrator.run()
    finally:
        store.save(config)
