"""Creator strategy interface and the helpers creators share.

A creator holds everything type-specific about scaffolding one kind of
project. The lifecycle engine owns the control flow and calls the
creator's hooks in a fixed order:

    configure -> update_dependency_imports (only with --latest)
              -> post_create -> build_metadata -> summarize
"""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from tstack_cli.externals.database import DatabaseAdmin
from tstack_cli.externals.versions import Dependency, update_import_map
from tstack_cli.helpers.config import Settings
from tstack_cli.helpers.helpers_env import write_env_from_example
from tstack_cli.helpers.helpers_logging import (
    print_code,
    print_divider,
    print_header,
    print_info,
    print_step,
    print_warning,
)
from tstack_cli.models import (
    DatabaseNames,
    ProjectMetadata,
    ProjectStatus,
    ProjectType,
)


@dataclass
class CreateContext:
    """Everything a creator hook needs to know about the project being built."""

    name: str
    project_type: ProjectType
    folder_name: str
    project_path: Path
    settings: Settings
    db_admin: DatabaseAdmin
    skip_db_setup: bool = False
    databases: DatabaseNames | None = None


class ProjectCreator(Protocol):
    """Type-specific scaffolding steps."""

    project_type: ProjectType
    template_name: str
    owns_database: bool
    dependencies: list[Dependency]

    def configure(self, ctx: CreateContext) -> None:
        """Patch copied template files (env, compose, manifest)."""
        ...

    def update_dependency_imports(
        self,
        ctx: CreateContext,
        imports: dict[str, Any],
        versions: dict[str, str],
    ) -> None:
        """Rewrite the import map with freshly resolved versions."""
        ...

    def post_create(self, ctx: CreateContext) -> None:
        """Materialize env files and provision external resources."""
        ...

    def build_metadata(self, ctx: CreateContext, created_at: str, now: str) -> ProjectMetadata:
        ...

    def summarize(self, ctx: CreateContext) -> None:
        ...


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def read_deno_json(project_path: Path) -> dict[str, Any]:
    return json.loads((project_path / "deno.json").read_text())


def write_deno_json(project_path: Path, data: dict[str, Any]) -> None:
    (project_path / "deno.json").write_text(json.dumps(data, indent=2) + "\n")


def apply_versions(
    imports: dict[str, Any],
    dependencies: list[Dependency],
    versions: dict[str, str],
) -> None:
    """Default ``update_dependency_imports`` body."""
    changed = update_import_map(imports, dependencies, versions)
    print_info(f"Updated {changed} import(s) in deno.json")


def copy_env_example(ctx: CreateContext, overrides: dict[str, str] | None = None) -> bool:
    """Write ``.env`` from ``.env.example``; False if there is no example."""
    written = write_env_from_example(
        ctx.project_path / ".env.example",
        ctx.project_path / ".env",
        overrides,
    )
    if written:
        print_info(".env file created")
    return written


def run_deno_install(project_path: Path) -> bool:
    """Install npm dependencies; a missing or failing deno only warns."""
    print_step("Installing dependencies...")
    try:
        result = subprocess.run(
            ["deno", "install"],
            cwd=project_path,
            capture_output=True,
            text=True,
            check=False,
        )
    except (FileNotFoundError, OSError):
        print_warning("deno not found. Run 'deno install' manually.")
        return False
    if result.returncode != 0:
        print_warning("Failed to install dependencies. Run 'deno install' manually.")
        return False
    print_info("Dependencies installed")
    return True


def project_metadata(ctx: CreateContext, created_at: str, now: str) -> ProjectMetadata:
    """Record for a freshly created project."""
    return ProjectMetadata(
        name=ctx.name,
        type=ctx.project_type,
        folder_name=ctx.folder_name,
        path=str(ctx.project_path),
        status=ProjectStatus.CREATED,
        created_at=created_at,
        updated_at=now,
        databases=ctx.databases,
    )


def print_next_steps(ctx: CreateContext, url: str, extra: list[str] | None = None) -> None:
    """Common tail of every success summary."""
    print_divider()
    print_header("Setup Complete!")
    print_info("1. Navigate to your project:")
    print_code(f"cd {ctx.folder_name}")
    print_info("2. Start development server:")
    print_code("deno task dev")
    for line in extra or []:
        print_info(line)
    print_info("Your project will be available at:")
    print_code(url)
