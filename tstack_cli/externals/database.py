"""PostgreSQL database administration through ``psql`` subprocesses.

Creation tries, per database, a password-authenticated ``psql`` on
localhost, then ``docker exec`` into a running ``postgres`` container,
then ``sudo -u postgres psql``. Every failure is reported as a warning;
nothing here raises.
"""

from __future__ import annotations

import os
import subprocess

from tstack_cli.helpers.helpers_logging import (
    print_code,
    print_info,
    print_step,
    print_success,
    print_warning,
)

ENV_LABELS: dict[str, str] = {
    "dev": "Development database",
    "test": "Test database",
    "prod": "Production database",
}


def _run(
    cmd: list[str],
    env: dict[str, str] | None = None,
    interactive: bool = False,
) -> subprocess.CompletedProcess[str] | None:
    """Run ``cmd``; None when the executable is missing or cannot start."""
    try:
        if interactive:
            return subprocess.run(cmd, env=env, text=True, check=False)
        return subprocess.run(cmd, env=env, capture_output=True, text=True, check=False)
    except (FileNotFoundError, OSError):
        return None


class DatabaseAdmin:
    """Creates, drops and probes databases on the local PostgreSQL server."""

    def __init__(
        self,
        db_user: str,
        db_password: str,
        host: str = "localhost",
        interactive: bool = True,
    ) -> None:
        self.db_user = db_user
        self.db_password = db_password
        self.host = host
        self.interactive = interactive

    # ------------------------------------------------------------------
    # psql with password
    # ------------------------------------------------------------------

    def _psql_env(self) -> dict[str, str]:
        return {**os.environ, "PGPASSWORD": self.db_password}

    def _psql(self, sql: str, *extra: str) -> subprocess.CompletedProcess[str] | None:
        cmd = [
            "psql",
            "-U", self.db_user,
            "-d", "postgres",
            "-h", self.host,
            *extra,
            "-c", sql,
        ]
        return _run(cmd, env=self._psql_env())

    def _sudo_psql(self, sql: str) -> bool:
        if self.interactive:
            print_info(
                "Attempting with sudo (you may be prompted for your password)..."
            )
            result = _run(["sudo", "-u", "postgres", "psql", "-c", sql], interactive=True)
        else:
            result = _run(["sudo", "-n", "-u", "postgres", "psql", "-c", sql])
        return result is not None and result.returncode == 0

    # ------------------------------------------------------------------
    # docker
    # ------------------------------------------------------------------

    @staticmethod
    def docker_postgres_running() -> bool:
        result = _run(["docker", "ps", "--filter", "name=postgres", "--format", "{{.Names}}"])
        return result is not None and result.returncode == 0 and "postgres" in result.stdout

    @staticmethod
    def _docker_psql(sql: str) -> bool:
        result = _run(["docker", "exec", "-i", "postgres", "psql", "-U", "postgres", "-c", sql])
        return result is not None and result.returncode == 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def database_exists(self, name: str) -> bool:
        result = self._psql(f"SELECT 1 FROM pg_database WHERE datname = '{name}'", "-tA")
        return result is not None and result.returncode == 0 and result.stdout.strip() == "1"

    def create_database(self, name: str) -> str | None:
        """Create ``name`` with the first method that works.

        Returns:
            The method used (``psql``, ``docker``, ``sudo``), or None if all failed.
        """
        sql = f"CREATE DATABASE {name}"

        result = self._psql(sql)
        if result is not None and result.returncode == 0:
            return "psql"

        if self.docker_postgres_running() and self._docker_psql(sql):
            return "docker"

        if self._sudo_psql(sql):
            return "sudo"

        return None

    def drop_database(self, name: str) -> bool:
        """Drop ``name`` if it exists. A database that is already gone is success."""
        sql = f"DROP DATABASE IF EXISTS {name}"

        result = self._psql(sql)
        if result is not None and result.returncode == 0:
            return True
        return self._sudo_psql(sql)

    def setup_databases(self, databases: dict[str, str]) -> list[str]:
        """Create each ``env -> name`` database, warning on failure.

        Returns:
            Names of the databases that could not be created.
        """
        print_step("Creating databases...")
        failed: list[str] = []

        for env, name in databases.items():
            label = ENV_LABELS.get(env, f"{env} database")
            method = self.create_database(name)
            if method == "psql":
                print_success(f'{label} "{name}" created')
            elif method is not None:
                print_success(f'{label} "{name}" created via {method}')
            else:
                print_warning(
                    f'Could not create {label} "{name}" '
                    "(may already exist or PostgreSQL is not accessible)"
                )
                failed.append(name)

        if failed:
            print_info("Create the missing databases manually:")
            for name in failed:
                print_code(
                    f'PGPASSWORD={self.db_password} psql -U {self.db_user} '
                    f'-h {self.host} -c "CREATE DATABASE {name}"'
                )
        return failed

    def drop_databases(self, names: list[str]) -> list[str]:
        """Drop every database in ``names``, warning on failure.

        Returns:
            Names that could not be dropped.
        """
        print_step("Dropping databases...")
        failed: list[str] = []
        for name in names:
            if self.drop_database(name):
                print_success(f"Dropped database: {name}")
            else:
                print_warning(f"Could not drop {name}")
                print_code(f'sudo -u postgres psql -c "DROP DATABASE IF EXISTS {name}"')
                failed.append(name)
        return failed
