"""Tests for layered settings resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from tstack_cli.helpers.config import (
    load_settings,
    packaged_templates_dir,
    read_config_file,
    write_config_value,
)


class TestLoadSettings:
    def test_defaults(self, tstack_home: Path) -> None:
        settings = load_settings()

        assert settings.home_dir == tstack_home
        assert settings.db_user == "postgres"
        assert settings.db_password == "password"
        assert settings.templates_dir == packaged_templates_dir()
        assert settings.visibility == "private"
        assert settings.github_org is None
        assert settings.test_mode is True

    def test_test_mode_uses_separate_store(self, tstack_home: Path,
                                           monkeypatch: pytest.MonkeyPatch) -> None:
        assert load_settings().store_path == tstack_home / "projects-test.db"
        monkeypatch.setenv("TSTACK_CLI_TEST", "0")
        assert load_settings().store_path == tstack_home / "projects.db"

    def test_config_file_overrides_defaults(self, tstack_home: Path) -> None:
        tstack_home.mkdir(parents=True)
        (tstack_home / "config.yaml").write_text(
            "db_user: admin\ngithub_org: acme\nvisibility: public\n"
        )

        settings = load_settings()

        assert settings.db_user == "admin"
        assert settings.github_org == "acme"
        assert settings.visibility == "public"

    def test_environment_overrides_config_file(
        self, tstack_home: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        tstack_home.mkdir(parents=True)
        (tstack_home / "config.yaml").write_text("db_user: admin\ndb_password: filepw\n")
        monkeypatch.setenv("PGUSER", "envuser")
        monkeypatch.setenv("PGPASSWORD", "envpw")
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_test")
        monkeypatch.setenv("TSTACK_TEMPLATES_DIR", str(tmp_path / "tpl"))

        settings = load_settings()

        assert settings.db_user == "envuser"
        assert settings.db_password == "envpw"
        assert settings.github_token == "ghp_test"
        assert settings.templates_dir == tmp_path / "tpl"

    def test_unreadable_config_falls_back_to_defaults(self, tstack_home: Path, capsys) -> None:
        tstack_home.mkdir(parents=True)
        (tstack_home / "config.yaml").write_text("db_user: [unclosed\n")

        settings = load_settings()

        assert settings.db_user == "postgres"
        assert "Could not load config" in capsys.readouterr().out


class TestWriteConfigValue:
    def test_creates_file_and_keeps_other_keys(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.yaml"
        write_config_value(config_path, "db_user", "admin")
        write_config_value(config_path, "github_org", "acme")

        data = read_config_file(config_path)

        assert data["db_user"] == "admin"
        assert data["github_org"] == "acme"

    def test_unknown_key(self, tmp_path: Path) -> None:
        with pytest.raises(KeyError):
            write_config_value(tmp_path / "config.yaml", "colour", "blue")
