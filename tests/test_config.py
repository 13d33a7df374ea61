"""Tests for semver_release.config and the session config model."""

from __future__ import annotations

from pathlib import Path

from semver_release.config import CONFIG_FILENAME, ConfigStore
from semver_release.models import ManifestRecord, SessionConfig


class TestConfigStore:
    def test_load_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert ConfigStore(tmp_path / "nope.toml").load() == SessionConfig()

    def test_save_then_load(self, tmp_path: Path) -> None:
        store = ConfigStore.for_git_dir(tmp_path / ".git")
        config = SessionConfig(
            configured=True,
            manifest_exhausted=True,
            current_semver="v1.2.0",
            develop_branch="develop",
        )

        store.save(config)

        assert store.path == tmp_path / ".git" / CONFIG_FILENAME
        assert store.load() == config

    def test_unset_fields_are_not_written(self, tmp_path: Path) -> None:
        store = ConfigStore(tmp_path / "config.toml")

        store.save(SessionConfig(configured=True))

        text = store.path.read_text()
        assert "[session]" in text
        assert "configured = true" in text
        assert "develop_branch" not in text


class TestSessionConfig:
    def test_reset_restores_defaults(self) -> None:
        config = SessionConfig(
            configured=True, manifest_valid=True, current_semver="1.0.0"
        )

        config.reset()

        assert config == SessionConfig()

    def test_accept_then_reject_manifest(self) -> None:
        config = SessionConfig()
        record = ManifestRecord(path=Path("/repo/pyproject.toml"), version="1.0.0")

        config.accept_manifest(record)
        assert config.manifest_valid
        assert config.manifest_exhausted
        assert config.manifest_path == str(Path("/repo/pyproject.toml"))

        config.reject_manifest()
        assert not config.manifest_valid
        assert config.manifest_version is None
        assert config.manifest_path is None
