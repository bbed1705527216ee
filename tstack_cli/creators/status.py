"""Status page project creator."""

from __future__ import annotations

from typing import Any

from tstack_cli.core.naming import title_case
from tstack_cli.creators.base import (
    CreateContext,
    copy_env_example,
    print_next_steps,
    project_metadata,
)
from tstack_cli.externals.versions import Dependency
from tstack_cli.helpers.helpers_logging import print_info, print_success
from tstack_cli.models import ProjectMetadata, ProjectType


class StatusCreator:
    project_type = ProjectType.STATUS
    template_name = "status-starter"
    owns_database = False
    dependencies: list[Dependency] = []

    def configure(self, ctx: CreateContext) -> None:
        print_info("Status page environment configured")

    def update_dependency_imports(
        self,
        ctx: CreateContext,
        imports: dict[str, Any],
        versions: dict[str, str],
    ) -> None:
        # Status pages pin their few imports; nothing to refresh.
        return None

    def post_create(self, ctx: CreateContext) -> None:
        copy_env_example(ctx, {"SITE_TITLE": f"{title_case(ctx.name)} Status"})

    def build_metadata(self, ctx: CreateContext, created_at: str, now: str) -> ProjectMetadata:
        return project_metadata(ctx, created_at, now)

    def summarize(self, ctx: CreateContext) -> None:
        print_success("Status page created successfully!")
        print_next_steps(ctx, "http://localhost:8001")
