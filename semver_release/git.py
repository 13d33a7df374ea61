"""Git query and mutation surface used by the release engine.

Every call is a blocking git subprocess issued through shell.git; the
engine never overlaps two of them.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Protocol

from .errors import GitCommandError, NoTagError
from .shell import git, git_lines
from .versions import sort_descending

logger = logging.getLogger(__name__)


class GitSurface(Protocol):
    """What the engine needs from a repository."""

    def any_tags(self) -> bool: ...

    def list_tags(self, pattern: re.Pattern[str] | None = None) -> list[str]: ...

    def tag_exists(self, label: str) -> bool: ...

    def resolve_tag_to_commit(self, label: str) -> str: ...

    def commit_count_since(self, commit: str) -> int: ...

    def create_tag(self, label: str) -> None: ...

    def commit(self, paths: list[str], message: str) -> str: ...

    def current_branch_name(self) -> str: ...

    def repository_root_dir(self) -> Path: ...

    def messages_since(self, ref: str | None) -> list[str]: ...


class GitRepository:
    """GitSurface backed by the git executable.

    Args:
        cwd: Working directory to run git in, defaults to the process cwd.
    """

    def __init__(self, cwd: Path | None = None) -> None:
        self.cwd = cwd

    def any_tags(self) -> bool:
        return bool(git("tag", "--list", cwd=self.cwd))

    def list_tags(self, pattern: re.Pattern[str] | None = None) -> list[str]:
        """List tags newest first, keeping only those matching pattern.

        When a pattern is given every kept tag is a semver label, so the
        result is ordered by semver precedence rather than by refname.
        """
        tags = git_lines("tag", "--list", cwd=self.cwd)
        if pattern is None:
            return tags
        return sort_descending([t for t in tags if pattern.match(t)])

    def tag_exists(self, label: str) -> bool:
        return bool(git("tag", "--list", label, cwd=self.cwd))

    def resolve_tag_to_commit(self, label: str) -> str:
        """Return the commit hash a tag points at.

        Raises:
            NoTagError: If git cannot resolve the tag.
        """
        try:
            return git("rev-list", "-n", "1", label, "--", cwd=self.cwd)
        except GitCommandError as err:
            raise NoTagError(label) from err

    def commit_count_since(self, commit: str) -> int:
        return int(git("rev-list", "--count", f"{commit}..HEAD", cwd=self.cwd))

    def create_tag(self, label: str) -> None:
        """Create a lightweight tag on HEAD; git refuses an existing name."""
        git("tag", label, cwd=self.cwd)

    def commit(self, paths: list[str], message: str) -> str:
        """Stage paths and commit them, returning git's summary output."""
        git("add", "--", *paths, cwd=self.cwd)
        return git("commit", "-m", message, "--", *paths, cwd=self.cwd)

    def current_branch_name(self) -> str:
        return git("rev-parse", "--abbrev-ref", "HEAD", cwd=self.cwd)

    def repository_root_dir(self) -> Path:
        return Path(git("rev-parse", "--show-toplevel", cwd=self.cwd)).resolve()

    def git_dir(self) -> Path:
        out = git("rev-parse", "--absolute-git-dir", cwd=self.cwd)
        return Path(out)

    def messages_since(self, ref: str | None) -> list[str]:
        """Commit messages (subject and body) reachable from HEAD but not ref.

        Messages are separated with a NUL byte so multi-line bodies survive.
        """
        rev_range = f"{ref}..HEAD" if ref else "HEAD"
        out = git("log", "--format=%B%x00", rev_range, check=False, cwd=self.cwd)
        return [msg.strip() for msg in out.split("\x00") if msg.strip()]
