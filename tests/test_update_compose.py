"""Tests for rewriting the starter's postgres service."""

from __future__ import annotations

from pathlib import Path

import yaml

from tstack_cli.helpers.update_compose import update_postgres_service


def _write_compose(path: Path, environment: object) -> Path:
    compose_file = path / "docker-compose.yml"
    compose_file.write_text(yaml.dump({
        "services": {
            "postgres": {"image": "postgres:16", "environment": environment},
            "api": {"build": "."},
        },
    }))
    return compose_file


class TestUpdatePostgresService:
    def test_sets_database_credentials_and_healthcheck(self, tmp_path: Path) -> None:
        compose_file = _write_compose(tmp_path, {"POSTGRES_DB": "tonystack", "TZ": "UTC"})

        assert update_postgres_service(compose_file, "shop_api_dev", "tstack", "secret")

        config = yaml.safe_load(compose_file.read_text())
        postgres = config["services"]["postgres"]
        assert postgres["environment"] == {
            "POSTGRES_DB": "shop_api_dev",
            "TZ": "UTC",
            "POSTGRES_USER": "tstack",
            "POSTGRES_PASSWORD": "secret",
        }
        assert postgres["healthcheck"]["test"] == [
            "CMD-SHELL", "pg_isready -U tstack -d shop_api_dev",
        ]
        assert config["services"]["api"] == {"build": "."}

    def test_accepts_list_environment(self, tmp_path: Path) -> None:
        compose_file = _write_compose(tmp_path, ["POSTGRES_DB=tonystack", "TZ=UTC"])

        update_postgres_service(compose_file, "db", "u", "p")

        environment = yaml.safe_load(compose_file.read_text())["services"]["postgres"]["environment"]
        assert environment["POSTGRES_DB"] == "db"
        assert environment["TZ"] == "UTC"

    def test_missing_file_warns(self, tmp_path: Path, capsys) -> None:
        assert update_postgres_service(tmp_path / "docker-compose.yml", "db", "u", "p") is False
        assert "not found" in capsys.readouterr().out

    def test_missing_service_leaves_file_untouched(self, tmp_path: Path) -> None:
        compose_file = tmp_path / "docker-compose.yml"
        compose_file.write_text("services:\n  web:\n    image: nginx\n")

        assert update_postgres_service(compose_file, "db", "u", "p") is False
        assert compose_file.read_text() == "services:\n  web:\n    image: nginx\n"
