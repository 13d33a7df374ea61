"""Interactive prompts.

The engine only depends on the Prompt call contract; ClickPrompt renders
the questions on the terminal with click.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

import click


class Prompt(Protocol):
    def confirm(self, message: str) -> bool: ...

    def input(self, message: str, default: str) -> str: ...

    def list(self, message: str, choices: Sequence[str]) -> str: ...


class ClickPrompt:
    """Prompt implementation backed by click's terminal prompts."""

    def confirm(self, message: str) -> bool:
        return click.confirm(message, default=True)

    def input(self, message: str, default: str) -> str:
        return click.prompt(message, default=default, show_default=False)

    def list(self, message: str, choices: Sequence[str]) -> str:
        """Ask for one of choices; the answer is returned verbatim."""
        return click.prompt(
            message,
            type=click.Choice(list(choices), case_sensitive=False),
            default=choices[0],
            show_choices=True,
        )
