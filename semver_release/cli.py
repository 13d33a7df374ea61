"""CLI entry point for semver-release."""

from __future__ import annotations

from pathlib import Path

import click

from semver_release.changelog import ChangelogFile
from semver_release.commits import PRESETS
from semver_release.config import ConfigStore
from semver_release.errors import ReleaseError, UserAbortedError
from semver_release.git import GitRepository
from semver_release.logging import configure_logging
from semver_release.models import ReleaseOptions
from semver_release.pipeline import AUTOMATIC, run_release
from semver_release.versions import BUMP_TYPES


@click.group()
@click.version_option(package_name="semver-release")
@click.option("-v", "--verbose", count=True, help="Show debug output.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
def cli(verbose: int, quiet: bool) -> None:
    """Semantic-version releases from git tags, changelog and pyproject.toml."""
    configure_logging(verbosity=verbose, quiet=quiet)


@cli.command()
@click.option(
    "-r",
    "--release",
    type=click.Choice([AUTOMATIC, *BUMP_TYPES]),
    default="minor",
    show_default=True,
    help="Increment type.",
)
@click.option(
    "--ask",
    is_flag=True,
    help="Ask for the increment type instead of using --release.",
)
@click.option(
    "--prefix/--no-prefix",
    default=True,
    show_default=True,
    help="Prefix tags with 'v'.",
)
@click.option("-i", "--identifier", default=None, help="Pre-release identifier.")
@click.option("-f", "--force", is_flag=True, help="Bump even without new commits.")
@click.option(
    "--commit/--no-commit",
    default=True,
    show_default=True,
    help="Commit the changelog and create the tag.",
)
@click.option(
    "--changelog/--no-changelog",
    default=True,
    show_default=True,
    help="Regenerate the changelog file.",
)
@click.option(
    "-p",
    "--preset",
    type=click.Choice(sorted(PRESETS)),
    default="angular",
    show_default=True,
    help="Changelog commit convention.",
)
@click.option(
    "--append/--overwrite",
    default=True,
    show_default=True,
    help="Append to the changelog or overwrite it.",
)
@click.option(
    "--update-manifest/--no-update-manifest",
    default=True,
    show_default=True,
    help="Write the new version to pyproject.toml.",
)
@click.option(
    "--strict-manifest",
    is_flag=True,
    help="Fail when no pyproject.toml is accepted.",
)
@click.option("--reset", is_flag=True, help="Forget the stored configuration.")
@click.option(
    "--find-manifest",
    is_flag=True,
    help="Search for pyproject.toml again.",
)
def bump(
    release: str,
    ask: bool,
    prefix: bool,
    identifier: str | None,
    force: bool,
    commit: bool,
    changelog: bool,
    preset: str,
    append: bool,
    update_manifest: bool,
    strict_manifest: bool,
    reset: bool,
    find_manifest: bool,
) -> None:
    """Compute the next version and apply it: changelog, tag, pyproject.toml."""
    options = ReleaseOptions(
        release=None if ask else release,
        prefix=prefix,
        identifier=identifier,
        force=force,
        commit=commit,
        changelog=changelog,
        changelog_preset=preset,
        append_changelog=append,
        update_manifest=update_manifest,
        strict_manifest=strict_manifest,
        reset=reset,
        find_manifest=find_manifest,
    )
    try:
        run_release(options)
    except UserAbortedError as err:
        click.echo(str(err))
    except ReleaseError as err:
        raise click.ClickException(str(err)) from err


@cli.command("restore-changelog")
def restore_changelog() -> None:
    """Put the changelog backup left by a failed bump back in place."""
    try:
        restored = ChangelogFile(Path.cwd()).restore()
    except ReleaseError as err:
        raise click.ClickException(str(err)) from err
    click.echo(f"✓ Restored {restored.name}")


@cli.command("config")
def show_config() -> None:
    """Show where the session config is stored and what it holds."""
    try:
        store = ConfigStore.for_git_dir(GitRepository().git_dir())
    except ReleaseError as err:
        raise click.ClickException(str(err)) from err

    click.echo(f"{store.path}")
    for key, value in store.load().model_dump().items():
        click.echo(f"  {key} = {value}")
