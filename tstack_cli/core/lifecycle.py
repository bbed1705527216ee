"""Create and destroy a single tracked project.

Create reconciles the stored record against what is on disk before it
touches anything:

    record      folder   action
    ---------   ------   ------------------------------------------------
    none        yes      UntrackedConflict
    none        no       fresh create
    created     yes      confirm / force -> overwrite, else AlreadyExists
    created     no       orphaned record -> warn and recreate
    destroyed   yes      UntrackedConflict (folder appeared after teardown)
    destroyed   no       recreate
    creating    any      crashed earlier run -> clear leftovers, recreate
    destroying  any      interrupted destroy -> clear leftovers, recreate

A ``creating`` record is written before the first file is copied and only
flips to ``created`` once every step succeeded, so a crash is detected on
the next attempt. ``created_at`` of an existing record always survives.

Destroy resolves its target in order: exact store key, name + type,
unique ``name-`` prefix among tracked projects, then an untracked folder
under the target directory. Removing an untracked folder needs a confirmation
prompt or force.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from tstack_cli.core.naming import (
    database_names,
    resolve_folder_name,
    validate_project_name,
)
from tstack_cli.creators import get_creator
from tstack_cli.creators.base import CreateContext, ProjectCreator, read_deno_json, write_deno_json
from tstack_cli.errors import (
    AlreadyExists,
    AmbiguousTarget,
    NotFound,
    TemplateNotFound,
    UntrackedConflict,
)
from tstack_cli.externals.database import DatabaseAdmin
from tstack_cli.externals.versions import VersionResolver
from tstack_cli.helpers.config import Settings
from tstack_cli.helpers.fs import copy_tree_no_overwrite, is_directory, path_exists, remove_tree
from tstack_cli.helpers.helpers_logging import (
    print_header,
    print_info,
    print_step,
    print_success,
    print_warning,
)
from tstack_cli.models import ProjectMetadata, ProjectStatus, ProjectType, utc_now
from tstack_cli.store.project_store import ProjectStore

# Injected prompts. ``None`` means non-interactive: never ask, fail closed.
ConfirmFn = Callable[[str], bool]
ChooseFn = Callable[[str, list[str]], str | None]


@dataclass
class CreateOptions:
    name: str
    project_type: ProjectType = ProjectType.API
    target_dir: Path | None = None
    latest: bool = False
    skip_db_setup: bool = False
    force_overwrite: bool = False


@dataclass
class DestroyOptions:
    name: str
    project_type: ProjectType | None = None
    target_dir: Path | None = None
    force: bool = False
    skip_db_setup: bool = False


class DestroyResult(Enum):
    DESTROYED = "destroyed"
    ALREADY_DESTROYED = "already-destroyed"
    REMOVED_UNTRACKED = "removed-untracked"
    CANCELLED = "cancelled"


@dataclass
class DestroyOutcome:
    result: DestroyResult
    folder_name: str
    path: Path
    record_deleted: bool = False


class ProjectLifecycle:
    """Create/destroy engine bound to one open store.

    Args:
        projects: Project records of the current store.
        settings: Resolved configuration.
        db_admin: Database collaborator; built from settings when omitted.
        versions: Version resolver used with ``latest``.
        confirm: Yes/no prompt for destructive steps, or None.
        choose: Picks one of several candidates, or None.
    """

    def __init__(
        self,
        projects: ProjectStore,
        settings: Settings,
        db_admin: DatabaseAdmin | None = None,
        versions: VersionResolver | None = None,
        confirm: ConfirmFn | None = None,
        choose: ChooseFn | None = None,
    ) -> None:
        self.projects = projects
        self.settings = settings
        self.db_admin = db_admin or DatabaseAdmin(
            settings.db_user,
            settings.db_password,
            interactive=confirm is not None,
        )
        self.versions = versions or VersionResolver()
        self.confirm = confirm
        self.choose = choose

    # ------------------------------------------------------------------
    # create
    # ------------------------------------------------------------------

    def template_dir(self, creator: ProjectCreator) -> Path:
        """
        Raises:
            TemplateNotFound: If the starter directory is missing.
        """
        path = self.settings.templates_dir / creator.template_name
        if not is_directory(path):
            raise TemplateNotFound(creator.template_name, str(path))
        return path

    def create(self, options: CreateOptions) -> ProjectMetadata:
        """Scaffold a project and record it as ``created``.

        Raises:
            InvalidName: Bad logical name.
            TemplateNotFound: Broken installation.
            UntrackedConflict: Folder exists without a record.
            AlreadyExists: Project exists and overwrite was not authorised.
        """
        validate_project_name(options.name)
        creator = get_creator(options.project_type)
        folder_name = resolve_folder_name(options.name, options.project_type)
        target_dir = (options.target_dir or Path.cwd()).resolve()
        project_path = target_dir / folder_name
        template_dir = self.template_dir(creator)

        print_header(f"Creating {options.project_type.value} project: {folder_name}")

        created_at = self._reconcile_for_create(folder_name, project_path, options.force_overwrite)
        self._mark_creating(options, folder_name, project_path, created_at)

        print_step(f"Copying {creator.template_name} into {project_path}")
        skipped = copy_tree_no_overwrite(template_dir, project_path)
        for path in skipped:
            print_info(f"  ⊘ Skipped (exists): {path.relative_to(project_path)}")

        ctx = CreateContext(
            name=options.name,
            project_type=options.project_type,
            folder_name=folder_name,
            project_path=project_path,
            settings=self.settings,
            db_admin=self.db_admin,
            skip_db_setup=options.skip_db_setup,
            databases=database_names(folder_name) if creator.owns_database else None,
        )

        print_step("Configuring project...")
        creator.configure(ctx)

        if options.latest and creator.dependencies:
            self._update_dependencies(creator, ctx)

        creator.post_create(ctx)

        metadata = creator.build_metadata(ctx, created_at, utc_now())
        self.projects.save(metadata)

        creator.summarize(ctx)
        return metadata

    def _reconcile_for_create(self, folder_name: str, project_path: Path, force: bool) -> str:
        """Resolve the existing-record/folder state; returns the ``created_at`` to keep."""
        existing = self.projects.get(folder_name)
        folder_exists = path_exists(project_path)

        if existing is None:
            if folder_exists:
                raise UntrackedConflict(str(project_path))
            return utc_now()

        if existing.status == ProjectStatus.CREATED:
            if folder_exists:
                self._authorise_overwrite(folder_name, project_path, force)
                self.projects.set_status(folder_name, ProjectStatus.DESTROYING)
                remove_tree(project_path)
                self.projects.set_status(folder_name, ProjectStatus.DESTROYED)
                print_success(f"Removed existing project at {project_path}")
            else:
                print_warning(
                    f"Project '{folder_name}' is tracked but its folder is missing; recreating"
                )
        elif existing.status == ProjectStatus.DESTROYED:
            if folder_exists:
                raise UntrackedConflict(str(project_path))
            print_info(f"Recreating previously destroyed project '{folder_name}'")
        else:
            print_warning(
                f"Previous {existing.status.value} run of '{folder_name}' did not finish; "
                "cleaning up and starting over"
            )
            remove_tree(project_path)

        return existing.created_at

    def _authorise_overwrite(self, folder_name: str, project_path: Path, force: bool) -> None:
        if force:
            print_warning(f"Overwriting existing project '{folder_name}' (--force-overwrite)")
            return
        question = f"Project '{folder_name}' already exists at {project_path}. Overwrite it?"
        if self.confirm is not None and self.confirm(question):
            return
        raise AlreadyExists(
            folder_name,
            hint=f"Use --force-overwrite, or run: tstack destroy {folder_name}",
        )

    def _mark_creating(
        self,
        options: CreateOptions,
        folder_name: str,
        project_path: Path,
        created_at: str,
    ) -> None:
        now = utc_now()
        record = ProjectMetadata(
            name=options.name,
            type=options.project_type,
            folder_name=folder_name,
            path=str(project_path),
            status=ProjectStatus.CREATING,
            created_at=created_at,
            updated_at=now,
        )
        if self.projects.get(folder_name) is None:
            if not self.projects.insert(record):
                raise AlreadyExists(folder_name, hint="Another tstack process is creating it")
            return

        def _reset(project: ProjectMetadata) -> None:
            project.name = options.name
            project.type = options.project_type
            project.path = str(project_path)
            project.status = ProjectStatus.CREATING

        self.projects.update(folder_name, _reset)

    def _update_dependencies(self, creator: ProjectCreator, ctx: CreateContext) -> None:
        deno_json = read_deno_json(ctx.project_path)
        imports = deno_json.setdefault("imports", {})
        versions = self.versions.resolve(creator.dependencies, imports)
        creator.update_dependency_imports(ctx, imports, versions)
        write_deno_json(ctx.project_path, deno_json)
        print_success("Updated deno.json with latest stable versions")

    # ------------------------------------------------------------------
    # destroy
    # ------------------------------------------------------------------

    def resolve_destroy_target(self, options: DestroyOptions) -> ProjectMetadata | Path:
        """Find what ``destroy`` should act on.

        Returns:
            The tracked record, or the path of an untracked folder.

        Raises:
            InvalidName: ``name`` is not a project name (``.``, ``..``, paths).
            AmbiguousTarget: Several tracked matches and no chooser.
            NotFound: Nothing tracked or on disk.
        """
        name = options.name
        validate_project_name(name)

        record = self.projects.get(name)
        if record is not None:
            return record

        if options.project_type is not None:
            record = self.projects.get(resolve_folder_name(name, options.project_type))
            if record is not None:
                return record

        matches = self.projects.find_by_prefix(f"{name}-")
        if len(matches) == 1:
            print_info(f"Found project: {matches[0].folder_name}")
            return matches[0]
        if len(matches) > 1:
            candidates = [m.folder_name for m in matches]
            chosen = (
                self.choose(f"'{name}' matches several projects. Which one?", candidates)
                if self.choose is not None
                else None
            )
            if chosen is None:
                raise AmbiguousTarget(name, candidates)
            return next(m for m in matches if m.folder_name == chosen)

        target_dir = (options.target_dir or Path.cwd()).resolve()
        candidates_on_disk = [target_dir / name]
        if options.project_type is not None:
            candidates_on_disk.append(
                target_dir / resolve_folder_name(name, options.project_type)
            )
        for path in candidates_on_disk:
            if is_directory(path):
                return path

        raise NotFound(
            name,
            hint=f"Searched the project store and {target_dir}. Run 'tstack list' to see tracked projects",
        )

    def destroy(self, options: DestroyOptions) -> DestroyOutcome:
        """Remove a project folder, its databases and (with force) its record.

        Raises:
            AmbiguousTarget: See ``resolve_destroy_target``.
            NotFound: See ``resolve_destroy_target``.
            UntrackedConflict: Untracked folder, no prompt and no force.
            OSError: Folder removal failed; the record stays ``destroying``.
        """
        target = self.resolve_destroy_target(options)

        if isinstance(target, Path):
            return self._destroy_untracked(target, options.force)

        record = target
        path = Path(record.path)
        print_header(f"Destroying project: {record.folder_name}")

        if record.status == ProjectStatus.DESTROYED:
            if not options.force:
                print_info(f"Project '{record.folder_name}' is already destroyed")
                return DestroyOutcome(DestroyResult.ALREADY_DESTROYED, record.folder_name, path)
            remove_tree(path)
            self.projects.delete(record.folder_name)
            print_success(f"Removed record of '{record.folder_name}'")
            return DestroyOutcome(
                DestroyResult.DESTROYED, record.folder_name, path, record_deleted=True
            )

        if not options.force and not self._confirm_destroy(record.folder_name, path, record):
            return DestroyOutcome(DestroyResult.CANCELLED, record.folder_name, path)

        self.projects.set_status(record.folder_name, ProjectStatus.DESTROYING)

        print_step("Removing project directory...")
        if remove_tree(path):
            print_success(f"Removed: {path}")
        else:
            print_warning(f"Directory already gone: {path}")

        if record.databases is not None and not options.skip_db_setup:
            self.db_admin.drop_databases(record.databases.as_list())

        if options.force:
            self.projects.delete(record.folder_name)
        else:
            self.projects.set_status(record.folder_name, ProjectStatus.DESTROYED)

        print_success(f"Project '{record.folder_name}' destroyed")
        return DestroyOutcome(
            DestroyResult.DESTROYED, record.folder_name, path, record_deleted=options.force
        )

    def _confirm_destroy(self, folder_name: str, path: Path, record: ProjectMetadata | None) -> bool:
        """Ask before deleting; non-interactive callers proceed."""
        if self.confirm is None:
            return True
        print_warning("This will permanently delete:")
        print_info(f"   - Project directory: {path}")
        if record is not None and record.databases is not None:
            for db_name in record.databases.as_list():
                print_info(f"   - Database: {db_name}")
        if self.confirm(f"Destroy '{folder_name}'?"):
            return True
        print_info("Destruction cancelled")
        return False

    def _destroy_untracked(self, path: Path, force: bool) -> DestroyOutcome:
        if not force and self.confirm is None:
            raise UntrackedConflict(
                str(path),
                hint=f"Re-run with --force to remove it: tstack destroy {path.name} --force",
            )
        print_header(f"Destroying untracked folder: {path}")
        if not force and not self._confirm_destroy(path.name, path, None):
            return DestroyOutcome(DestroyResult.CANCELLED, path.name, path)
        remove_tree(path)
        print_success(f"Removed: {path}")
        return DestroyOutcome(DestroyResult.REMOVED_UNTRACKED, path.name, path)
