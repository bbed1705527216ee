"""Tests for component selection and the workspace orchestrator."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

from tstack_cli.core.lifecycle import ProjectLifecycle
from tstack_cli.core.workspace import (
    WorkspaceCreateOptions,
    WorkspaceOrchestrator,
    component_flags,
    determine_components,
)
from tstack_cli.errors import (
    AlreadyExists,
    ExternalToolUnavailable,
    InvalidName,
    NotFound,
    ReservedName,
    TStackError,
    UntrackedConflict,
)
from tstack_cli.externals.github import RemoteRepoProvider
from tstack_cli.models import ProjectStatus, ProjectType, WorkspaceStatus
from tstack_cli.store import ProjectStore, WorkspaceStore

ALL_IMPLEMENTED = [ProjectType.API, ProjectType.ADMIN_UI, ProjectType.STORE, ProjectType.STATUS]


class TestDetermineComponents:
    def test_default_is_every_implemented_kind(self) -> None:
        assert determine_components(set(), set()) == ALL_IMPLEMENTED

    def test_with_selects_only_named(self) -> None:
        assert determine_components({"status", "api"}, set()) == [
            ProjectType.API, ProjectType.STATUS,
        ]

    def test_skip_removes(self) -> None:
        assert determine_components(set(), {"store", "status"}) == [
            ProjectType.API, ProjectType.ADMIN_UI,
        ]

    def test_mixing_flags_fails(self) -> None:
        with pytest.raises(TStackError, match="both"):
            determine_components({"api"}, {"store"})

    def test_future_only_fails(self) -> None:
        with pytest.raises(TStackError, match="No components"):
            determine_components({"mobile", "infra"}, set())

    def test_future_kinds_warn(self, capsys) -> None:
        assert determine_components({"api", "metrics"}, set()) == [ProjectType.API]
        assert "not yet implemented: metrics" in capsys.readouterr().out

    def test_skip_everything_fails(self) -> None:
        with pytest.raises(TStackError):
            determine_components(set(), {"api", "admin-ui", "store", "status"})


class TestComponentFlags:
    def test_record_keys(self) -> None:
        flags = component_flags([ProjectType.API, ProjectType.ADMIN_UI])
        assert flags["api"] is True
        assert flags["adminUi"] is True
        assert flags["store"] is False
        assert flags["mobile"] is False


@pytest.fixture()
def orchestrator(workspaces: WorkspaceStore, lifecycle: ProjectLifecycle) -> WorkspaceOrchestrator:
    return WorkspaceOrchestrator(workspaces, lifecycle)


def _local_options(workdir: Path, **overrides) -> WorkspaceCreateOptions:
    values = {
        "name": "acme",
        "target_dir": workdir,
        "with_components": {"api", "admin-ui"},
        "skip_git": True,
    }
    values.update(overrides)
    return WorkspaceCreateOptions(**values)


class TestWorkspaceCreate:
    def test_local_workspace(
        self,
        orchestrator: WorkspaceOrchestrator,
        workspaces: WorkspaceStore,
        projects: ProjectStore,
        db_admin: MagicMock,
        workdir: Path,
    ) -> None:
        workspace = orchestrator.create(_local_options(workdir))

        root = workdir / "acme"
        assert workspace.status == WorkspaceStatus.CREATED
        assert workspace.namespace == "acme"
        assert [p.folder_name for p in workspace.projects] == ["acme-api", "acme-admin-ui"]
        assert workspace.components["api"] is True
        assert workspace.components["adminUi"] is True
        assert workspace.components["store"] is False
        assert (root / "acme-api" / "deno.json").is_file()
        assert (root / "acme-admin-ui" / "deno.json").is_file()
        assert (root / "docker-compose.dev.yml").is_file()
        assert (root / "deno.json").is_file()

        assert workspaces.get("acme") == workspace
        assert projects.get("acme-api").status == ProjectStatus.CREATED
        assert projects.get("acme-admin-ui").status == ProjectStatus.CREATED
        # Only the api owns databases
        db_admin.setup_databases.assert_called_once()

    def test_skip_db_setup_is_forwarded(
        self, orchestrator: WorkspaceOrchestrator, db_admin: MagicMock, workdir: Path
    ) -> None:
        orchestrator.create(_local_options(workdir, skip_db_setup=True))
        db_admin.setup_databases.assert_not_called()

    def test_custom_namespace(self, orchestrator: WorkspaceOrchestrator, workdir: Path) -> None:
        workspace = orchestrator.create(_local_options(workdir, namespace="acme-prod"))
        assert workspace.namespace == "acme-prod"

    def test_reserved_name(self, orchestrator: WorkspaceOrchestrator, workdir: Path) -> None:
        with pytest.raises(ReservedName):
            orchestrator.create(_local_options(workdir, name="acme-api"))
        assert list(workdir.iterdir()) == []

    def test_name_must_start_with_letter(
        self, orchestrator: WorkspaceOrchestrator, workspaces: WorkspaceStore, workdir: Path
    ) -> None:
        with pytest.raises(InvalidName):
            orchestrator.create(_local_options(workdir, name="9shop"))
        assert list(workdir.iterdir()) == []
        assert workspaces.get("9shop") is None

    def test_already_tracked(self, orchestrator: WorkspaceOrchestrator, workdir: Path) -> None:
        orchestrator.create(_local_options(workdir))
        with pytest.raises(AlreadyExists):
            orchestrator.create(_local_options(workdir))

    def test_existing_directory(
        self, orchestrator: WorkspaceOrchestrator, workspaces: WorkspaceStore, workdir: Path
    ) -> None:
        (workdir / "acme").mkdir()
        with pytest.raises(UntrackedConflict):
            orchestrator.create(_local_options(workdir))
        assert workspaces.get("acme") is None

    def test_component_failure_marks_partial(
        self,
        orchestrator: WorkspaceOrchestrator,
        lifecycle: ProjectLifecycle,
        projects: ProjectStore,
        workdir: Path,
    ) -> None:
        real_create = lifecycle.create

        def _flaky(options):
            if options.project_type == ProjectType.ADMIN_UI:
                raise OSError("disk full")
            return real_create(options)

        with patch.object(lifecycle, "create", side_effect=_flaky):
            workspace = orchestrator.create(_local_options(workdir))

        assert workspace.status == WorkspaceStatus.PARTIAL
        assert [p.folder_name for p in workspace.projects] == ["acme-api"]
        assert projects.get("acme-api") is not None

    def test_unexpected_component_error_is_collected(
        self,
        orchestrator: WorkspaceOrchestrator,
        projects: ProjectStore,
        workdir: Path,
        capsys,
    ) -> None:
        with patch("tstack_cli.creators.api.update_postgres_service",
                   side_effect=yaml.YAMLError("mapping values are not allowed here")):
            workspace = orchestrator.create(_local_options(workdir))

        assert workspace.status == WorkspaceStatus.PARTIAL
        assert [p.folder_name for p in workspace.projects] == ["acme-admin-ui"]
        assert projects.get("acme-admin-ui").status == ProjectStatus.CREATED
        assert projects.get("acme-api").status == ProjectStatus.CREATING
        assert "Failed to create api project" in capsys.readouterr().out

    def test_escaping_error_leaves_partial_record(
        self, orchestrator: WorkspaceOrchestrator, workspaces: WorkspaceStore, workdir: Path
    ) -> None:
        with patch("tstack_cli.core.workspace.generate_workspace_docker",
                   side_effect=RuntimeError("store contention")), \
                pytest.raises(RuntimeError):
            orchestrator.create(_local_options(workdir))

        workspace = workspaces.get("acme")
        assert workspace.status == WorkspaceStatus.PARTIAL
        assert len(workspace.projects) == 2

    def test_git_initialised_per_component(
        self, orchestrator: WorkspaceOrchestrator, workdir: Path
    ) -> None:
        with patch("tstack_cli.core.workspace.initialize_repo", return_value=True) as mock_init:
            orchestrator.create(_local_options(workdir, skip_git=False))

        assert [c.args[1] for c in mock_init.call_args_list] == ["acme-api", "acme-admin-ui"]


class TestWorkspaceRemote:
    def _remote(self, uses_api: bool = True) -> MagicMock:
        remote = MagicMock(spec=RemoteRepoProvider)
        remote.uses_api = uses_api
        remote.create.side_effect = lambda name, org, private: f"https://github.com/{org}/{name}.git"
        return remote

    @patch("tstack_cli.core.workspace.add_remote_and_push", return_value=True)
    @patch("tstack_cli.core.workspace.initialize_repo", return_value=True)
    def test_creates_and_pushes_repositories(
        self,
        _mock_init: MagicMock,
        mock_push: MagicMock,
        workspaces: WorkspaceStore,
        lifecycle: ProjectLifecycle,
        workdir: Path,
    ) -> None:
        remote = self._remote()
        orchestrator = WorkspaceOrchestrator(workspaces, lifecycle, remote=remote)

        workspace = orchestrator.create(_local_options(
            workdir, skip_git=False, github_org="acme-org", github_token="ghp_test",
        ))

        remote.ensure_available.assert_called_once()
        assert [r.name for r in workspace.github_repos] == ["acme-api", "acme-admin-ui"]
        assert workspace.github_org == "acme-org"
        assert remote.create.call_args_list[0].kwargs == {"private": True}
        assert mock_push.call_args_list[0].args[1] == "https://github.com/acme-org/acme-api.git"
        assert mock_push.call_args_list[0].args[2] == "ghp_test"

    @patch("tstack_cli.core.workspace.add_remote_and_push", return_value=True)
    @patch("tstack_cli.core.workspace.initialize_repo", return_value=True)
    def test_public_visibility(
        self,
        _mock_init: MagicMock,
        _mock_push: MagicMock,
        workspaces: WorkspaceStore,
        lifecycle: ProjectLifecycle,
        workdir: Path,
    ) -> None:
        remote = self._remote(uses_api=False)
        orchestrator = WorkspaceOrchestrator(workspaces, lifecycle, remote=remote)

        orchestrator.create(_local_options(
            workdir, skip_git=False, github_org="acme-org", visibility="public",
        ))

        assert remote.create.call_args_list[0].kwargs == {"private": False}
        # gh CLI pushes with its own credentials
        assert _mock_push.call_args_list[0].args[2] is None

    def test_unavailable_backend_aborts_before_creating(
        self, workspaces: WorkspaceStore, lifecycle: ProjectLifecycle, workdir: Path
    ) -> None:
        remote = self._remote()
        remote.ensure_available.side_effect = ExternalToolUnavailable("no token")
        orchestrator = WorkspaceOrchestrator(workspaces, lifecycle, remote=remote)

        with pytest.raises(ExternalToolUnavailable):
            orchestrator.create(_local_options(workdir, github_org="acme-org"))

        assert workspaces.get("acme") is None
        assert not (workdir / "acme").exists()

    def test_skip_remote(
        self, workspaces: WorkspaceStore, lifecycle: ProjectLifecycle, workdir: Path
    ) -> None:
        remote = self._remote()
        orchestrator = WorkspaceOrchestrator(workspaces, lifecycle, remote=remote)

        workspace = orchestrator.create(_local_options(
            workdir, github_org="acme-org", skip_remote=True,
        ))

        remote.ensure_available.assert_not_called()
        remote.create.assert_not_called()
        assert workspace.github_repos == []


class TestWorkspaceDestroy:
    def test_removes_everything(
        self,
        orchestrator: WorkspaceOrchestrator,
        workspaces: WorkspaceStore,
        projects: ProjectStore,
        db_admin: MagicMock,
        workdir: Path,
    ) -> None:
        orchestrator.create(_local_options(workdir))

        orchestrator.destroy("acme")

        assert not (workdir / "acme").exists()
        assert workspaces.get("acme") is None
        assert projects.get("acme-api") is None
        assert projects.get("acme-admin-ui") is None
        db_admin.drop_databases.assert_called_once_with(
            ["acme_api_dev", "acme_api_test", "acme_api_prod"]
        )

    def test_not_found(self, orchestrator: WorkspaceOrchestrator) -> None:
        with pytest.raises(NotFound):
            orchestrator.destroy("ghost")

    def test_continues_past_project_failure(
        self,
        orchestrator: WorkspaceOrchestrator,
        lifecycle: ProjectLifecycle,
        workspaces: WorkspaceStore,
        workdir: Path,
        capsys,
    ) -> None:
        orchestrator.create(_local_options(workdir))

        with patch.object(lifecycle, "destroy", side_effect=PermissionError("busy")):
            orchestrator.destroy("acme")

        assert "Failed to destroy acme-api" in capsys.readouterr().out
        assert not (workdir / "acme").exists()
        assert workspaces.get("acme") is None

    def test_delete_remote(
        self, workspaces: WorkspaceStore, lifecycle: ProjectLifecycle, workdir: Path
    ) -> None:
        remote = MagicMock(spec=RemoteRepoProvider)
        remote.uses_api = True
        remote.create.return_value = "https://github.com/acme-org/repo.git"
        remote.delete.return_value = True
        orchestrator = WorkspaceOrchestrator(workspaces, lifecycle, remote=remote)
        with patch("tstack_cli.core.workspace.initialize_repo", return_value=True), \
                patch("tstack_cli.core.workspace.add_remote_and_push", return_value=True):
            orchestrator.create(_local_options(workdir, skip_git=False, github_org="acme-org"))

        orchestrator.destroy("acme", delete_remote=True)

        assert [c.args[0] for c in remote.delete.call_args_list] == [
            "acme-org/acme-api", "acme-org/acme-admin-ui",
        ]

    def test_keeps_remote_by_default(
        self, workspaces: WorkspaceStore, lifecycle: ProjectLifecycle, workdir: Path
    ) -> None:
        remote = MagicMock(spec=RemoteRepoProvider)
        orchestrator = WorkspaceOrchestrator(workspaces, lifecycle, remote=remote)
        orchestrator.create(_local_options(workdir))

        orchestrator.destroy("acme")

        remote.delete.assert_not_called()
