"""Shared fixtures for the tstack test suite.

Every test gets an isolated ``TSTACK_HOME`` (config file and SQLite store)
and works inside ``tmp_path``. External collaborators that would touch
the machine (PostgreSQL, registries, deno, git remotes) are replaced with
mocks; the starter templates are the real packaged ones.
"""

from __future__ import annotations

import argparse
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from tstack_cli.core.lifecycle import ProjectLifecycle
from tstack_cli.externals.database import DatabaseAdmin
from tstack_cli.externals.versions import VersionResolver
from tstack_cli.helpers.config import Settings, packaged_templates_dir
from tstack_cli.models import (
    DatabaseNames,
    ProjectMetadata,
    ProjectStatus,
    ProjectType,
)
from tstack_cli.store import MetadataStore, ProjectStore, WorkspaceStore

# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def tstack_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point tstack at a throwaway home and scrub credentials from the env."""
    home = tmp_path / ".tstack"
    monkeypatch.setenv("TSTACK_HOME", str(home))
    monkeypatch.setenv("TSTACK_CLI_TEST", "true")
    for var in ("PGUSER", "PGPASSWORD", "GITHUB_TOKEN", "TSTACK_TEMPLATES_DIR"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture()
def workdir(tmp_path: Path) -> Iterator[Path]:
    """Empty directory used as the current working directory."""
    target = tmp_path / "work"
    target.mkdir()
    original_cwd = Path.cwd()
    os.chdir(target)
    try:
        yield target
    finally:
        os.chdir(original_cwd)


@pytest.fixture(autouse=True)
def no_deno_install() -> Iterator[MagicMock]:
    """Frontend creators run ``deno install``; never spawn it in tests."""
    with patch("tstack_cli.creators.admin_ui.run_deno_install", return_value=True) as mock:
        yield mock


# ---------------------------------------------------------------------------
# Settings and store
# ---------------------------------------------------------------------------


@pytest.fixture()
def settings(tstack_home: Path) -> Settings:
    return Settings(
        home_dir=tstack_home,
        db_user="tstack",
        db_password="secret",
        templates_dir=packaged_templates_dir(),
        test_mode=True,
    )


@pytest.fixture()
def metadata_store(settings: Settings) -> Iterator[MetadataStore]:
    store = MetadataStore(settings.store_path)
    try:
        yield store
    finally:
        store.close()


@pytest.fixture()
def projects(metadata_store: MetadataStore) -> ProjectStore:
    return ProjectStore(metadata_store)


@pytest.fixture()
def workspaces(metadata_store: MetadataStore) -> WorkspaceStore:
    return WorkspaceStore(metadata_store)


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@pytest.fixture()
def db_admin() -> MagicMock:
    admin = MagicMock(spec=DatabaseAdmin)
    admin.setup_databases.return_value = []
    admin.drop_databases.return_value = []
    return admin


@pytest.fixture()
def versions() -> MagicMock:
    resolver = MagicMock(spec=VersionResolver)
    resolver.resolve.return_value = {}
    return resolver


@pytest.fixture()
def lifecycle(
    projects: ProjectStore,
    settings: Settings,
    db_admin: MagicMock,
    versions: MagicMock,
) -> ProjectLifecycle:
    """Non-interactive engine with mocked database and registry access."""
    return ProjectLifecycle(projects, settings, db_admin=db_admin, versions=versions)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_project(
    folder_name: str,
    *,
    path: Path,
    name: str | None = None,
    project_type: ProjectType = ProjectType.API,
    status: ProjectStatus = ProjectStatus.CREATED,
    created_at: str = "2025-01-01T00:00:00+00:00",
    with_databases: bool = True,
) -> ProjectMetadata:
    """Project record as the lifecycle engine would have saved it."""
    base = folder_name.replace("-", "_")
    return ProjectMetadata(
        name=name or folder_name,
        type=project_type,
        folder_name=folder_name,
        path=str(path),
        status=status,
        created_at=created_at,
        updated_at=created_at,
        databases=(
            DatabaseNames(dev=f"{base}_dev", test=f"{base}_test", prod=f"{base}_prod")
            if with_databases
            else None
        ),
    )


_CLI_DEFAULTS: dict[str, dict[str, Any]] = {
    "create": {
        "type": "api",
        "dir": None,
        "latest": False,
        "skip_db_setup": True,
        "force_overwrite": False,
        "interactive": False,
    },
    "destroy": {
        "type": None,
        "dir": None,
        "force": False,
        "skip_db_setup": True,
        "interactive": False,
    },
    "workspace_create": {
        "dir": None,
        "namespace": None,
        "with_components": [],
        "skip_components": [],
        "github_org": None,
        "github_token": None,
        "visibility": None,
        "skip_remote": False,
        "skip_git": True,
        "skip_db_setup": True,
    },
    "workspace_destroy": {
        "force": True,
        "delete_remote": False,
        "interactive": False,
    },
}


def make_namespace(command: str, **overrides: Any) -> argparse.Namespace:
    """Namespace as built by click_commands for ``command``."""
    values = {**_CLI_DEFAULTS[command], **overrides}
    return argparse.Namespace(**values)
