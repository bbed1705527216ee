"""Admin UI project creator (Fresh + Preact + DaisyUI)."""

from __future__ import annotations

from typing import Any

from tstack_cli.creators.base import (
    CreateContext,
    apply_versions,
    copy_env_example,
    print_next_steps,
    project_metadata,
    run_deno_install,
)
from tstack_cli.externals.versions import Dependency
from tstack_cli.helpers.helpers_logging import print_info, print_step, print_success
from tstack_cli.models import ProjectMetadata, ProjectType

FRESH_UI_DEPENDENCIES: list[Dependency] = [
    Dependency("fresh", "jsr", "@fresh/core"),
    Dependency("@fresh/plugin-vite", "jsr", "@fresh/plugin-vite"),
    Dependency("preact", "npm", "preact"),
    Dependency("@preact/signals", "npm", "@preact/signals"),
    Dependency("vite", "npm", "vite"),
    Dependency("tailwindcss", "npm", "tailwindcss"),
]

ADMIN_UI_DEPENDENCIES: list[Dependency] = [
    *FRESH_UI_DEPENDENCIES,
    Dependency("daisyui", "npm", "daisyui"),
    Dependency("autoprefixer", "npm", "autoprefixer"),
    Dependency("postcss", "npm", "postcss"),
]


class AdminUiCreator:
    """Scaffolds the admin panel frontend. Owns no database."""

    project_type = ProjectType.ADMIN_UI
    template_name = "admin-ui-starter"
    owns_database = False
    dependencies = ADMIN_UI_DEPENDENCIES
    dev_url = "http://localhost:5173"
    label = "Admin UI"

    def configure(self, ctx: CreateContext) -> None:
        if (ctx.project_path / ".env.example").exists():
            print_info(f"{self.label} environment configured")

    def update_dependency_imports(
        self,
        ctx: CreateContext,
        imports: dict[str, Any],
        versions: dict[str, str],
    ) -> None:
        apply_versions(imports, self.dependencies, versions)

    def post_create(self, ctx: CreateContext) -> None:
        print_step(f"Setting up {self.label} environment...")
        copy_env_example(ctx)
        run_deno_install(ctx.project_path)

    def build_metadata(self, ctx: CreateContext, created_at: str, now: str) -> ProjectMetadata:
        return project_metadata(ctx, created_at, now)

    def summarize(self, ctx: CreateContext) -> None:
        print_success(f"{self.label} project created successfully!")
        print_next_steps(
            ctx,
            self.dev_url,
            extra=["Point API_BASE_URL in .env at your API (default http://localhost:8000)"],
        )
