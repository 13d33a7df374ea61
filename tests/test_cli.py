"""Tests for semver_release.cli."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from semver_release.cli import cli
from semver_release.errors import NoNewCommitError, UserAbortedError
from semver_release.models import ReleaseOptions


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestBump:
    """Tests for the bump command."""

    @patch("semver_release.cli.run_release")
    def test_defaults(self, mock_run: MagicMock, runner: CliRunner) -> None:
        """Without flags the options match the documented defaults."""
        result = runner.invoke(cli, ["bump"])

        assert result.exit_code == 0, result.output
        mock_run.assert_called_once_with(ReleaseOptions())

    @patch("semver_release.cli.run_release")
    def test_flags_map_to_options(self, mock_run: MagicMock, runner: CliRunner) -> None:
        result = runner.invoke(
            cli,
            [
                "bump",
                "-r",
                "premajor",
                "--no-prefix",
                "-i",
                "beta",
                "--force",
                "--no-commit",
                "--overwrite",
                "-p",
                "conventionalcommits",
                "--no-update-manifest",
                "--strict-manifest",
                "--reset",
                "--find-manifest",
            ],
        )

        assert result.exit_code == 0, result.output
        options = mock_run.call_args.args[0]
        assert options == ReleaseOptions(
            release="premajor",
            prefix=False,
            identifier="beta",
            force=True,
            commit=False,
            changelog_preset="conventionalcommits",
            append_changelog=False,
            update_manifest=False,
            strict_manifest=True,
            reset=True,
            find_manifest=True,
        )

    @patch("semver_release.cli.run_release")
    def test_ask_leaves_release_unset(
        self, mock_run: MagicMock, runner: CliRunner
    ) -> None:
        result = runner.invoke(cli, ["bump", "--ask"])

        assert result.exit_code == 0, result.output
        assert mock_run.call_args.args[0].release is None

    @patch("semver_release.cli.run_release")
    def test_rejects_unknown_release(
        self, mock_run: MagicMock, runner: CliRunner
    ) -> None:
        result = runner.invoke(cli, ["bump", "-r", "build"])

        assert result.exit_code == 2
        mock_run.assert_not_called()

    @patch("semver_release.cli.run_release")
    def test_release_error_exits_non_zero(
        self, mock_run: MagicMock, runner: CliRunner
    ) -> None:
        mock_run.side_effect = NoNewCommitError()

        result = runner.invoke(cli, ["bump"])

        assert result.exit_code == 1
        assert "No new commits since last valid semver tag" in result.output

    @patch("semver_release.cli.run_release")
    def test_abort_is_not_a_failure(
        self, mock_run: MagicMock, runner: CliRunner
    ) -> None:
        mock_run.side_effect = UserAbortedError()

        result = runner.invoke(cli, ["bump"])

        assert result.exit_code == 0
        assert "User aborted the execution" in result.output


class TestRestoreChangelog:
    """Tests for the restore-changelog command."""

    def test_restores_backup(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            Path("CHANGELOG.md").write_text("broken")
            Path("backup.CHANGELOG.md").write_text("good\n")

            result = runner.invoke(cli, ["restore-changelog"])

            assert result.exit_code == 0, result.output
            assert "Restored CHANGELOG.md" in result.output
            assert Path("CHANGELOG.md").read_text() == "good\n"

    def test_missing_backup(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["restore-changelog"])

        assert result.exit_code == 1
        assert "backup file was not found" in result.output


class TestConfig:
    """Tests for the config command."""

    @patch("semver_release.cli.GitRepository")
    def test_shows_stored_values(
        self, mock_repo: MagicMock, runner: CliRunner, tmp_path: Path
    ) -> None:
        mock_repo.return_value.git_dir.return_value = tmp_path
        (tmp_path / "semver-release.toml").write_text(
            '[session]\nconfigured = true\ndevelop_branch = "develop"\n'
        )

        result = runner.invoke(cli, ["config"])

        assert result.exit_code == 0, result.output
        assert str(tmp_path / "semver-release.toml") in result.output
        assert "configured = True" in result.output
        assert "develop_branch = develop" in result.output


def test_version_option(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "0.1.0" in result.output
