"""Workspace orchestration: several component projects under one name.

Creation fans out to the project lifecycle engine once per component and
never aborts on a single failure; the workspace ends ``partial`` instead.
Destruction is best-effort: every step is attempted even if an earlier
one failed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from tstack_cli.core.lifecycle import CreateOptions, DestroyOptions, ProjectLifecycle
from tstack_cli.core.naming import resolve_folder_name, validate_workspace_name
from tstack_cli.core.workspace_docker import generate_workspace_docker
from tstack_cli.errors import AlreadyExists, NotFound, TStackError, UntrackedConflict
from tstack_cli.externals.git import add_remote_and_push, initialize_repo
from tstack_cli.externals.github import RemoteRepoProvider
from tstack_cli.helpers.fs import path_exists, remove_tree
from tstack_cli.helpers.helpers_logging import (
    print_code,
    print_divider,
    print_error,
    print_header,
    print_info,
    print_step,
    print_success,
    print_warning,
)
from tstack_cli.models import (
    COMPONENT_KEYS,
    GitHubRepo,
    ProjectType,
    WorkspaceMetadata,
    WorkspaceProject,
    WorkspaceStatus,
    utc_now,
)
from tstack_cli.store.workspace_store import WorkspaceStore

# Component flags accepted on the command line, in creation order.
IMPLEMENTED_COMPONENTS: dict[str, ProjectType] = {
    "api": ProjectType.API,
    "admin-ui": ProjectType.ADMIN_UI,
    "store": ProjectType.STORE,
    "status": ProjectType.STATUS,
}
FUTURE_COMPONENTS: tuple[str, ...] = ("ui", "infra", "mobile", "metrics")
ALL_COMPONENTS: tuple[str, ...] = (*IMPLEMENTED_COMPONENTS, *FUTURE_COMPONENTS)

# Workspace ``components`` map key per implemented component flag.
_COMPONENT_RECORD_KEYS: dict[str, str] = {
    "api": "api",
    "admin-ui": "adminUi",
    "store": "store",
    "status": "status",
}


@dataclass
class WorkspaceCreateOptions:
    name: str
    target_dir: Path | None = None
    namespace: str | None = None
    with_components: set[str] = field(default_factory=set)
    skip_components: set[str] = field(default_factory=set)
    github_org: str | None = None
    github_token: str | None = None
    visibility: str = "private"
    skip_remote: bool = False
    skip_git: bool = False
    skip_db_setup: bool = False


def determine_components(
    with_components: set[str],
    skip_components: set[str],
) -> list[ProjectType]:
    """Resolve ``--with-*`` / ``--skip-*`` flags to the kinds to create.

    ``--with-*`` selects only the named components, ``--skip-*`` removes
    them from the default (every implemented kind). Future kinds are
    accepted but skipped with a warning.

    Raises:
        TStackError: If both flag families are used or nothing implemented
            remains selected.
    """
    if with_components and skip_components:
        raise TStackError(
            "Cannot use both --with-* and --skip-* flags together",
            hint="Use --with-* to include specific components, "
            "or --skip-* to exclude specific ones",
        )

    if with_components:
        requested = [c for c in ALL_COMPONENTS if c in with_components]
    else:
        requested = [c for c in IMPLEMENTED_COMPONENTS if c not in skip_components]

    implemented = [c for c in requested if c in IMPLEMENTED_COMPONENTS]
    future = [c for c in requested if c not in IMPLEMENTED_COMPONENTS]

    if not implemented:
        raise TStackError(
            "No components selected for creation",
            hint=f"Currently available: {', '.join(IMPLEMENTED_COMPONENTS)}. "
            f"Future: {', '.join(FUTURE_COMPONENTS)}",
        )
    if future:
        print_warning(
            f"Components not yet implemented: {', '.join(future)}. "
            f"Only creating: {', '.join(implemented)}"
        )
    return [IMPLEMENTED_COMPONENTS[c] for c in implemented]


def component_flags(project_types: list[ProjectType]) -> dict[str, bool]:
    """``components`` map of a workspace record."""
    flags = dict.fromkeys(COMPONENT_KEYS, False)
    for flag, ptype in IMPLEMENTED_COMPONENTS.items():
        if ptype in project_types:
            flags[_COMPONENT_RECORD_KEYS[flag]] = True
    return flags


class WorkspaceOrchestrator:
    """Creates and destroys workspaces through a project lifecycle engine."""

    def __init__(
        self,
        workspaces: WorkspaceStore,
        lifecycle: ProjectLifecycle,
        remote: RemoteRepoProvider | None = None,
    ) -> None:
        self.workspaces = workspaces
        self.lifecycle = lifecycle
        self.settings = lifecycle.settings
        self._remote = remote

    def remote_provider(self, token: str | None) -> RemoteRepoProvider:
        if self._remote is None:
            self._remote = RemoteRepoProvider(token)
        return self._remote

    # ------------------------------------------------------------------
    # create
    # ------------------------------------------------------------------

    def create(self, options: WorkspaceCreateOptions) -> WorkspaceMetadata:
        """Create a workspace and as many of its components as possible.

        Raises:
            InvalidName / ReservedName: Bad workspace name.
            TStackError: Invalid component selection.
            ExternalToolUnavailable: Remote repos requested without token or gh.
            AlreadyExists: Workspace already tracked.
            UntrackedConflict: Target directory already exists.
        """
        name = options.name
        print_step(f"Validating workspace name: {name}")
        validate_workspace_name(name)
        components = determine_components(options.with_components, options.skip_components)

        token = options.github_token or self.settings.github_token
        remote: RemoteRepoProvider | None = None
        if options.github_org and not options.skip_remote:
            remote = self.remote_provider(token)
            remote.ensure_available()
        elif options.github_org:
            print_warning("Remote repository creation skipped (--skip-remote)")
            print_info("   You'll need to create and link GitHub repos manually.")
        else:
            print_warning("No --github-org specified, creating local workspace only")
            print_info("   To create GitHub repos, use: --github-org your-org")

        print_info(f"Creating workspace with components: {', '.join(c.value for c in components)}")

        existing = self.workspaces.get(name)
        if existing is not None:
            raise AlreadyExists(
                name,
                hint=f"Workspace is at {existing.path}. Use a different name "
                f"or run: tstack workspace destroy {name}",
            )

        target_dir = (options.target_dir or Path.cwd()).resolve()
        workspace_path = target_dir / name
        if path_exists(workspace_path):
            raise UntrackedConflict(str(workspace_path))

        now = utc_now()
        metadata = WorkspaceMetadata(
            name=name,
            path=str(workspace_path),
            namespace=options.namespace or name,
            status=WorkspaceStatus.CREATING,
            created_at=now,
            updated_at=now,
            components=component_flags(components),
            github_org=options.github_org,
        )
        if not self.workspaces.insert(metadata):
            raise AlreadyExists(name, hint="Another tstack process is creating it")

        try:
            created, failed = self._populate(name, components, workspace_path, options, remote, token)
        except Exception:
            self._set_status(name, WorkspaceStatus.PARTIAL)
            raise

        metadata = self._set_status(
            name, WorkspaceStatus.PARTIAL if failed else WorkspaceStatus.CREATED
        )

        if failed:
            print_warning(
                f"Workspace '{name}' created with failures in: "
                f"{', '.join(p.value for p in failed)}"
            )
        else:
            print_success(f"Workspace '{name}' created successfully!")
        _print_structure(metadata, has_docker_files=bool(created))
        return metadata

    def _set_status(self, name: str, status: WorkspaceStatus) -> WorkspaceMetadata:
        def _apply(workspace: WorkspaceMetadata) -> None:
            workspace.status = status

        return self.workspaces.update(name, _apply)

    def _populate(
        self,
        name: str,
        components: list[ProjectType],
        workspace_path: Path,
        options: WorkspaceCreateOptions,
        remote: RemoteRepoProvider | None,
        token: str | None,
    ) -> tuple[list[ProjectType], list[ProjectType]]:
        """Create the directory, every component and the Docker files.

        Returns:
            (created, failed) component kinds.
        """
        print_step(f"Creating workspace directory: {workspace_path}")
        workspace_path.mkdir(parents=True)

        failed: list[ProjectType] = []
        created: list[ProjectType] = []
        for ptype in components:
            if self._create_component(name, ptype, workspace_path, options, remote, token):
                created.append(ptype)
            else:
                failed.append(ptype)

        if created:
            try:
                generate_workspace_docker(
                    workspace_path,
                    name,
                    created,
                    self.settings.db_user,
                    self.settings.db_password,
                )
            except OSError as exc:
                print_warning(f"Failed to generate Docker configuration: {exc}")

        return created, failed

    def _create_component(
        self,
        name: str,
        ptype: ProjectType,
        workspace_path: Path,
        options: WorkspaceCreateOptions,
        remote: RemoteRepoProvider | None,
        token: str | None,
    ) -> bool:
        folder_name = resolve_folder_name(name, ptype)
        print_divider()
        print_step(f"Creating {ptype.value} project: {folder_name}")
        try:
            project = self.lifecycle.create(
                CreateOptions(
                    name=name,
                    project_type=ptype,
                    target_dir=workspace_path,
                    skip_db_setup=options.skip_db_setup or ptype != ProjectType.API,
                )
            )
        except Exception as exc:
            print_error(f"Failed to create {ptype.value} project: {exc}")
            return False

        def _add_project(workspace: WorkspaceMetadata) -> None:
            workspace.projects.append(
                WorkspaceProject(
                    folder_name=project.folder_name,
                    path=project.path,
                    type=ptype,
                    added_at=utc_now(),
                )
            )

        self.workspaces.update(name, _add_project)
        print_success(f"{ptype.value} project created successfully")

        if options.skip_git:
            return True
        project_path = Path(project.path)
        print_step("Initializing Git repository...")
        git_ready = initialize_repo(project_path, project.folder_name)

        if remote is None:
            return True
        if not git_ready:
            print_warning(f"  Skipping remote for {folder_name}: no local repository")
            return True

        url = remote.create(folder_name, options.github_org, private=options.visibility != "public")
        if url is None:
            print_warning(f"  Remote repository for {folder_name} was not created")
            return True

        def _add_repo(workspace: WorkspaceMetadata) -> None:
            workspace.github_repos.append(GitHubRepo(name=folder_name, url=url, type=ptype))

        self.workspaces.update(name, _add_repo)
        print_success(f"  Remote repository created: {url}")
        add_remote_and_push(project_path, url, token if remote.uses_api else None)
        return True

    # ------------------------------------------------------------------
    # destroy
    # ------------------------------------------------------------------

    def destroy(
        self,
        name: str,
        delete_remote: bool = False,
        skip_db_setup: bool = False,
    ) -> None:
        """Tear a workspace down, continuing past individual failures.

        Raises:
            NotFound: If no workspace of that name is tracked.
        """
        workspace = self.workspaces.get(name)
        if workspace is None:
            raise NotFound(name, hint="Run 'tstack list' to see tracked projects")

        print_header(f"Destroying workspace: {name}")
        print_info(f"   Path: {workspace.path}")

        def _mark(ws: WorkspaceMetadata) -> None:
            ws.status = WorkspaceStatus.DESTROYING

        self.workspaces.update(name, _mark)

        if delete_remote and workspace.github_repos:
            self._delete_remotes(workspace)

        if workspace.projects:
            print_step(f"Destroying {len(workspace.projects)} projects...")
        for project in workspace.projects:
            print_info(f"  {project.folder_name}")
            try:
                self.lifecycle.destroy(
                    DestroyOptions(
                        name=project.folder_name,
                        project_type=project.type,
                        target_dir=Path(project.path).parent,
                        force=True,
                        skip_db_setup=skip_db_setup,
                    )
                )
            except (TStackError, OSError) as exc:
                print_warning(f"  Failed to destroy {project.folder_name}: {exc}")

        print_step("Removing workspace directory...")
        workspace_path = Path(workspace.path).resolve()
        try:
            if remove_tree(workspace_path):
                print_success("  Directory removed")
            else:
                print_warning("  Directory already removed")
        except OSError as exc:
            print_warning(f"  Failed to remove {workspace_path}: {exc}")

        self.workspaces.delete(name)
        print_success(f"Workspace '{name}' destroyed")

    def _delete_remotes(self, workspace: WorkspaceMetadata) -> None:
        print_step(f"Deleting {len(workspace.github_repos)} remote repositories...")
        remote = self.remote_provider(self.settings.github_token)
        for repo in workspace.github_repos:
            full_name = (
                f"{workspace.github_org}/{repo.name}" if workspace.github_org else repo.name
            )
            if remote.delete(full_name):
                print_success(f"  Deleted: {full_name}")
            else:
                print_warning(f"  Failed to delete: {full_name}")


def _print_structure(metadata: WorkspaceMetadata, has_docker_files: bool) -> None:
    repos = {repo.name: repo.url for repo in metadata.github_repos}
    print_header("Workspace Structure:")
    print_code(f"{metadata.path}/")
    for project in metadata.projects:
        print_code(f"  |-- {project.folder_name}/")
        if project.folder_name in repos:
            print_code(f"  |   +-- remote: {repos[project.folder_name]}")
    if has_docker_files:
        for file_name in (
            "docker-compose.dev.yml",
            "docker-compose.test.yml",
            "docker-compose.yml",
            "start-dev.sh",
            "start-test.sh",
            "start-prod.sh",
            "stop.sh",
        ):
            print_code(f"  |-- {file_name}")
        print_code("  +-- deno.json")

        print_header("Quick Start:")
        print_code(f"cd {metadata.name}")
        print_info("Without Docker (local dev):")
        print_code("deno task dev")
        print_info("With Docker (hot reload):")
        print_code("./start-dev.sh")
        print_info("With Docker (production mode):")
        print_code("./start-prod.sh")
