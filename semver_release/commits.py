"""Conventional commit analysis.

Reads the commit messages since the last semver tag and derives two
things from them: the bump type an "automatic" release should use, and
the markdown section the changelog gets for the new version.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from .git import GitSurface
from .versions import VALID_SEMVER_RE, latest

_HEADER_RE = re.compile(
    r"^(?P<type>\w+)(?:\((?P<scope>[^)]*)\))?(?P<bang>!?):\s*(?P<subject>.+)$"
)
_BREAKING_RE = re.compile(r"^BREAKING[ -]CHANGE:\s*(?P<note>.+)$", re.MULTILINE)

# Section titles per preset, in the order they are rendered
PRESETS: dict[str, dict[str, str]] = {
    "angular": {
        "feat": "Features",
        "fix": "Bug Fixes",
        "perf": "Performance Improvements",
        "revert": "Reverts",
    },
    "conventionalcommits": {
        "feat": "Features",
        "fix": "Bug Fixes",
        "perf": "Performance Improvements",
        "revert": "Reverts",
        "docs": "Documentation",
        "refactor": "Code Refactoring",
        "build": "Build System",
        "ci": "Continuous Integration",
    },
}


@dataclass(frozen=True)
class ConventionalCommit:
    type: str
    scope: str | None
    subject: str
    breaking_notes: tuple[str, ...] = ()

    @property
    def breaking(self) -> bool:
        return bool(self.breaking_notes)


def parse_commit(message: str) -> ConventionalCommit | None:
    """Parse a full commit message; None when the header is not conventional."""
    header, _, body = message.partition("\n")
    m = _HEADER_RE.match(header.strip())
    if m is None:
        return None
    notes = [n.group("note").strip() for n in _BREAKING_RE.finditer(body)]
    if m.group("bang") and not notes:
        notes.append(m.group("subject").strip())
    return ConventionalCommit(
        type=m.group("type").lower(),
        scope=m.group("scope") or None,
        subject=m.group("subject").strip(),
        breaking_notes=tuple(notes),
    )


def _last_semver_tag(git: GitSurface) -> str | None:
    return latest(git.list_tags(VALID_SEMVER_RE))


class BumpFinder(Protocol):
    def suggest_bump_type(self) -> str: ...


class ConventionalBumpFinder:
    """Suggests major/minor/patch from the commits since the last semver tag.

    Any breaking change → major, any feat → minor, anything else → patch.
    """

    def __init__(self, git: GitSurface) -> None:
        self.git = git

    def suggest_bump_type(self) -> str:
        messages = self.git.messages_since(_last_semver_tag(self.git))
        parsed = [c for c in (parse_commit(m) for m in messages) if c is not None]
        if any(c.breaking for c in parsed):
            return "major"
        if any(c.type == "feat" for c in parsed):
            return "minor"
        return "patch"


class ChangelogGenerator(Protocol):
    def generate(self, preset: str, version: str | None = None) -> Iterator[str]: ...


class ConventionalChangelogGenerator:
    """Renders the commits since the last semver tag as a markdown section."""

    def __init__(self, git: GitSurface) -> None:
        self.git = git

    def generate(self, preset: str, version: str | None = None) -> Iterator[str]:
        """Yield the changelog section for version chunk by chunk.

        Raises:
            ValueError: If preset is not one of PRESETS.
        """
        if preset not in PRESETS:
            raise ValueError(
                f"Unknown changelog preset '{preset}', "
                f"expected one of {sorted(PRESETS)}"
            )
        sections = PRESETS[preset]

        messages = self.git.messages_since(_last_semver_tag(self.git))
        commits = [c for c in (parse_commit(m) for m in messages) if c is not None]

        date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        yield f"## {version or 'Unreleased'} ({date})\n\n"

        for commit_type, title in sections.items():
            entries = [c for c in commits if c.type == commit_type]
            if not entries:
                continue
            yield f"### {title}\n\n"
            for c in entries:
                yield f"* {_entry(c)}\n"
            yield "\n"

        breaking = [note for c in commits for note in c.breaking_notes]
        if breaking:
            yield "### BREAKING CHANGES\n\n"
            for note in breaking:
                yield f"* {note}\n"
            yield "\n"


def _entry(commit: ConventionalCommit) -> str:
    if commit.scope:
        return f"**{commit.scope}:** {commit.subject}"
    return commit.subject
