"""Read-only views over tracked projects."""

from __future__ import annotations

from datetime import datetime

from tstack_cli.helpers.helpers_logging import print_code, print_header, print_info
from tstack_cli.models import ProjectMetadata, ProjectStatus

STATUS_ACTIVE = "active"
STATUS_ALL = "all"

# Values accepted by ``list --status``.
STATUS_FILTERS: tuple[str, ...] = (
    STATUS_ACTIVE,
    STATUS_ALL,
    *(s.value for s in ProjectStatus),
)


def filter_projects(
    projects: list[ProjectMetadata],
    status: str = STATUS_ACTIVE,
) -> list[ProjectMetadata]:
    """Apply a ``--status`` filter, keeping the input order.

    ``active`` hides destroyed records, ``all`` keeps everything, anything
    else must be an exact status value.

    Raises:
        ValueError: On an unknown status value.
    """
    if status == STATUS_ALL:
        return list(projects)
    if status == STATUS_ACTIVE:
        return [p for p in projects if p.status != ProjectStatus.DESTROYED]
    wanted = ProjectStatus(status)
    return [p for p in projects if p.status == wanted]


def sort_by_recency(projects: list[ProjectMetadata]) -> list[ProjectMetadata]:
    return sorted(projects, key=lambda p: p.created_at, reverse=True)


def format_created_date(created_at: str) -> str:
    try:
        return datetime.fromisoformat(created_at).date().isoformat()
    except ValueError:
        return created_at


def project_lines(project: ProjectMetadata) -> list[str]:
    """Detail lines shown under a project's header."""
    lines = [
        f"Type:    {project.type.value}",
        f"Status:  {project.status.value}",
        f"Path:    {project.path}",
        f"Created: {format_created_date(project.created_at)}",
    ]
    if project.databases is not None:
        lines.append("Databases:")
        lines.append(f"  Dev:  {project.databases.dev}")
        lines.append(f"  Test: {project.databases.test}")
        lines.append(f"  Prod: {project.databases.prod}")
    return lines


def print_project_list(projects: list[ProjectMetadata], status: str = STATUS_ACTIVE) -> None:
    print_header("Tracked Projects")

    shown = sort_by_recency(filter_projects(projects, status))
    status_note = f" with status '{status}'" if status not in (STATUS_ACTIVE, STATUS_ALL) else ""

    if not shown:
        print_info(f"No projects tracked{status_note}.")
        print_info("Create a project with: tstack create my-project --type api")
        return

    plural = "s" if len(shown) != 1 else ""
    print_info(f"Found {len(shown)} project{plural}{status_note}:")
    for project in shown:
        print_header(project.folder_name)
        for line in project_lines(project):
            print_code(line)
