"""Shared test fixtures."""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from pathlib import Path

import pytest

from semver_release.changelog import ChangelogFile, ChangelogTransaction
from semver_release.errors import GitCommandError, NoManifestError, NoTagError
from semver_release.models import ManifestRecord, ReleaseOptions, SessionConfig
from semver_release.pipeline import ReleaseOrchestrator
from semver_release.versions import sort_descending


class ScriptedPrompt:
    """Prompt that answers from scripted responses keyed by message.

    Unscripted confirms answer False, lists pick the first choice and
    inputs take the default. Every question asked is recorded.
    """

    def __init__(
        self,
        confirms: dict[str, bool] | None = None,
        lists: dict[str, str] | None = None,
        inputs: dict[str, str] | None = None,
    ) -> None:
        self.confirms = confirms or {}
        self.lists = lists or {}
        self.inputs = inputs or {}
        self.asked: list[str] = []

    def confirm(self, message: str) -> bool:
        self.asked.append(message)
        return self.confirms.get(message, False)

    def input(self, message: str, default: str) -> str:
        self.asked.append(message)
        return self.inputs.get(message, default)

    def list(self, message: str, choices: Sequence[str]) -> str:
        self.asked.append(message)
        return self.lists.get(message, choices[0])


class FakeGit:
    """In-memory repository: a linear history, tags and a current branch."""

    def __init__(self, root: Path, branch: str = "main") -> None:
        self.root = root
        self.branch = branch
        self.history: list[str] = ["c0"]
        self.messages: list[str] = []
        self.tags: dict[str, str] = {}
        self.unresolvable: set[str] = set()
        self.commits: list[tuple[list[str], str]] = []
        self.created_tags: list[str] = []

    # helpers for arranging a scenario
    def add_commit(self, message: str = "fix: something") -> str:
        sha = f"c{len(self.history)}"
        self.history.append(sha)
        self.messages.append(message)
        return sha

    def tag(self, label: str) -> None:
        self.tags[label] = self.history[-1]

    # GitSurface
    def any_tags(self) -> bool:
        return bool(self.tags)

    def list_tags(self, pattern: re.Pattern[str] | None = None) -> list[str]:
        if pattern is None:
            return list(self.tags)
        return sort_descending([t for t in self.tags if pattern.match(t)])

    def tag_exists(self, label: str) -> bool:
        return label in self.tags

    def resolve_tag_to_commit(self, label: str) -> str:
        if label not in self.tags or label in self.unresolvable:
            raise NoTagError(label)
        return self.tags[label]

    def commit_count_since(self, commit: str) -> int:
        return len(self.history) - self.history.index(commit) - 1

    def create_tag(self, label: str) -> None:
        if label in self.tags:
            raise GitCommandError(("tag", label), 128, "already exists")
        self.tag(label)
        self.created_tags.append(label)

    def commit(self, paths: list[str], message: str) -> str:
        self.commits.append((paths, message))
        self.add_commit(message)
        return f"[{self.branch}] {message}"

    def current_branch_name(self) -> str:
        return self.branch

    def repository_root_dir(self) -> Path:
        return self.root

    def messages_since(self, ref: str | None) -> list[str]:
        return list(self.messages)


class FakeManifestReader:
    """Serves manifests from a directory → version map and records writes."""

    def __init__(self, manifests: dict[Path, str | None] | None = None) -> None:
        self.manifests = manifests or {}
        self.visited: list[Path] = []
        self.written: list[tuple[Path, str]] = []

    def read(self, directory: Path) -> ManifestRecord:
        self.visited.append(directory)
        if directory not in self.manifests:
            raise NoManifestError()
        return ManifestRecord(
            path=directory / "pyproject.toml", version=self.manifests[directory]
        )

    def write_version(self, record: ManifestRecord, version: str) -> bool:
        self.written.append((record.path, version))
        return True


class FakeGenerator:
    def __init__(self, text: str = "## notes\n", fail: bool = False) -> None:
        self.text = text
        self.fail = fail
        self.calls: list[tuple[str, str | None]] = []

    def generate(self, preset: str, version: str | None = None) -> Iterator[str]:
        self.calls.append((preset, version))
        if self.fail:
            raise RuntimeError("generator failed")
        yield f"## {version}\n"
        yield self.text


class FixedBumpFinder:
    def __init__(self, bump_type: str = "patch") -> None:
        self.bump_type = bump_type

    def suggest_bump_type(self) -> str:
        return self.bump_type


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    return tmp_path.resolve()


@pytest.fixture
def fake_git(repo_root: Path) -> FakeGit:
    return FakeGit(repo_root)


@pytest.fixture
def make_orchestrator(repo_root: Path, fake_git: FakeGit):
    """Build a ReleaseOrchestrator wired to fakes; keyword args override parts."""

    def _make(
        options: ReleaseOptions | None = None,
        config: SessionConfig | None = None,
        prompt: ScriptedPrompt | None = None,
        reader: FakeManifestReader | None = None,
        bump_finder: FixedBumpFinder | None = None,
        generator: FakeGenerator | None = None,
        cwd: Path | None = None,
    ) -> ReleaseOrchestrator:
        options = options or ReleaseOptions()
        transaction = ChangelogTransaction(
            ChangelogFile(repo_root), generator or FakeGenerator(), fake_git, options
        )
        return ReleaseOrchestrator(
            options=options,
            config=config if config is not None else SessionConfig(),
            git=fake_git,
            prompt=prompt or ScriptedPrompt(),
            manifest_reader=reader or FakeManifestReader(),
            bump_finder=bump_finder or FixedBumpFinder(),
            changelog=transaction,
            cwd=cwd or repo_root,
        )

    return _make
