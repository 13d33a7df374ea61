"""Shell and git utilities.

Provides a thin wrapper around subprocess calls for git operations, plus
the output formatting helper used to separate the phases of a release.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from .errors import GitCommandError


def git(*args: str, check: bool = True, cwd: Path | None = None) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "tag", "--list").
        check: If True (default), raise on non-zero exit. Set to False
               for commands that may legitimately fail (e.g., tag lookup).
        cwd: Directory to run git in, defaults to the process cwd.

    Returns:
        Stripped stdout from the git command.

    Raises:
        GitCommandError: If check is True and git exits non-zero, or if
            git is not installed.
    """
    try:
        result = subprocess.run(
            ["git", *args], capture_output=True, text=True, check=False, cwd=cwd
        )
    except FileNotFoundError as err:
        raise GitCommandError(args, 127, f"git executable not found: {err}") from err
    if check and result.returncode != 0:
        raise GitCommandError(args, result.returncode, result.stderr.strip())
    return result.stdout.strip()


def git_lines(*args: str, check: bool = True, cwd: Path | None = None) -> list[str]:
    """Run a git command and return its non-empty output lines."""
    out = git(*args, check=check, cwd=cwd)
    return [line for line in out.splitlines() if line.strip()]


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate major phases of the release in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")
