"""API project creator (Hono + Drizzle + PostgreSQL)."""

from __future__ import annotations

import secrets
from typing import Any

from tstack_cli.creators.base import (
    CreateContext,
    apply_versions,
    print_next_steps,
    project_metadata,
    read_deno_json,
    write_deno_json,
)
from tstack_cli.externals.versions import Dependency
from tstack_cli.helpers.helpers_env import EnvFile, append_env_vars
from tstack_cli.helpers.helpers_logging import (
    print_code,
    print_header,
    print_info,
    print_step,
    print_success,
)
from tstack_cli.helpers.update_compose import update_postgres_service
from tstack_cli.models import DatabaseNames, ProjectMetadata, ProjectType

JOSE_SPECIFIER = "npm:jose@^5.9.6"
SEED_TASK = "deno run --allow-all scripts/seed-superadmin.ts"

API_DEPENDENCIES: list[Dependency] = [
    Dependency("@std/dotenv", "jsr", "@std/dotenv"),
    Dependency("hono", "jsr", "@hono/hono"),
    Dependency("jose", "npm", "jose"),
    Dependency("drizzle-orm", "npm", "drizzle-orm"),
    Dependency("drizzle-kit", "npm", "drizzle-kit"),
    Dependency("drizzle-zod", "npm", "drizzle-zod"),
    Dependency("postgres", "npm", "postgres"),
    Dependency("zod", "npm", "zod"),
]


def database_url(user: str, password: str, db_name: str, host: str = "localhost") -> str:
    return f"postgresql://{user}:{password}@{host}:5432/{db_name}"


def _require_databases(ctx: CreateContext) -> DatabaseNames:
    if ctx.databases is None:
        raise ValueError(f"No database names resolved for {ctx.folder_name}")
    return ctx.databases


class ApiCreator:
    """Scaffolds an API project and provisions its three databases."""

    project_type = ProjectType.API
    template_name = "api-starter"
    owns_database = True
    dependencies = API_DEPENDENCIES

    def configure(self, ctx: CreateContext) -> None:
        databases = _require_databases(ctx)
        settings = ctx.settings
        dev_url = database_url(settings.db_user, settings.db_password, databases.dev)

        print_header("Database Configuration:")
        print_info(f"Development: {databases.dev}")
        print_info(f"Test: {databases.test}")
        print_info(f"User: {settings.db_user}")

        # .env.example is required: every later env file is derived from it
        env_example = ctx.project_path / ".env.example"
        EnvFile.read(env_example).set("DATABASE_URL", dev_url).write(env_example)

        update_postgres_service(
            ctx.project_path / "docker-compose.yml",
            db_name=databases.dev,
            db_user=settings.db_user,
            db_password=settings.db_password,
        )

        added = append_env_vars(
            env_example,
            {
                "JWT_SECRET": f"change-this-to-random-secret-in-production-{secrets.token_hex(8)}",
                "JWT_ISSUER": "tonystack",
                "JWT_EXPIRY": "7d",
            },
            "JWT Authentication Configuration",
        )
        if added:
            print_info("Authentication system configured")

        deno_json = read_deno_json(ctx.project_path)
        imports = deno_json.setdefault("imports", {})
        tasks = deno_json.setdefault("tasks", {})
        imports.setdefault("jose", JOSE_SPECIFIER)
        tasks.setdefault("db:seed", SEED_TASK)
        write_deno_json(ctx.project_path, deno_json)

    def update_dependency_imports(
        self,
        ctx: CreateContext,
        imports: dict[str, Any],
        versions: dict[str, str],
    ) -> None:
        apply_versions(imports, self.dependencies, versions)

    def post_create(self, ctx: CreateContext) -> None:
        databases = _require_databases(ctx)
        settings = ctx.settings
        user, password = settings.db_user, settings.db_password
        project_path = ctx.project_path

        print_step("Setting up environment...")
        _enable_migrations_tracking(ctx)

        env = EnvFile.read(project_path / ".env.example")
        env.set("DATABASE_URL", database_url(user, password, databases.dev))
        env.write(project_path / ".env")
        print_info(".env file created")

        (project_path / ".env.development.local").write_text(
            "# Development environment - auto-generated by tstack CLI\n"
            "ENVIRONMENT=development\n"
            f"DATABASE_URL={database_url(user, password, databases.dev)}\n"
        )
        print_info(".env.development.local configured")

        (project_path / ".env.test.local").write_text(
            "# Test environment - auto-generated by tstack CLI\n"
            "ENVIRONMENT=test\n"
            f"DATABASE_URL={database_url(user, password, databases.test)}\n"
        )
        print_info(f".env.test.local configured (database: {databases.test})")

        (project_path / ".env.production.local").write_text(
            "# Production environment - configure before deployment\n"
            "ENVIRONMENT=production\n"
            f"DATABASE_URL={database_url('your_user', 'your_password', databases.prod, 'your_host')}\n"
        )
        print_info(f".env.production.local template ready (database: {databases.prod})")

        if ctx.skip_db_setup:
            print_info("Skipping database creation (--skip-db-setup)")
            return

        ctx.db_admin.setup_databases(
            {"dev": databases.dev, "test": databases.test, "prod": databases.prod}
        )

    def build_metadata(self, ctx: CreateContext, created_at: str, now: str) -> ProjectMetadata:
        return project_metadata(ctx, created_at, now)

    def summarize(self, ctx: CreateContext) -> None:
        databases = _require_databases(ctx)
        settings = ctx.settings
        print_success("API project created successfully!")
        if not ctx.skip_db_setup:
            print_header("Database Configuration:")
            print_code(f"Database: {databases.dev}")
            print_code(f"User: {settings.db_user}")
            print_code(f"Password: {settings.db_password}")
            print_code(
                f"URL: {database_url(settings.db_user, settings.db_password, databases.dev)}"
            )
        print_next_steps(
            ctx,
            "http://localhost:8000",
            extra=[
                "Generate and run migrations: deno task migrate:generate && deno task migrate:run",
                "Seed the superadmin user: deno task db:seed",
            ],
        )


def _enable_migrations_tracking(ctx: CreateContext) -> None:
    """Generated projects commit their migrations, unlike the starter itself."""
    gitignore = ctx.project_path / ".gitignore"
    if not gitignore.exists():
        return
    lines = gitignore.read_text().split("\n")
    kept = [line for line in lines if line.strip() not in ("migrations/", "migrations")]
    if len(kept) != len(lines):
        gitignore.write_text("\n".join(kept))
