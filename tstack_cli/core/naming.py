"""Folder and resource naming for projects and workspaces.

Every function here is pure; the lifecycle engine and the workspace
orchestrator call them to derive store keys and database names.
"""

from __future__ import annotations

import re

from tstack_cli.errors import InvalidName, ReservedName
from tstack_cli.models import DatabaseNames, ProjectType

PROJECT_NAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_-]*$")
WORKSPACE_NAME_PATTERN = re.compile(r"^[a-z0-9-]+$")

# Suffix appended to the logical name to build a project's folder name.
TYPE_SUFFIXES: dict[ProjectType, str] = {
    ProjectType.API: "-api",
    ProjectType.ADMIN_UI: "-admin-ui",
    ProjectType.STORE: "-store",
    ProjectType.STATUS: "-status",
    ProjectType.WORKSPACE: "",
}

# Workspace names may not end with these, so component folders stay unambiguous.
RESERVED_WORKSPACE_SUFFIXES: tuple[str, ...] = (
    "-api",
    "-admin-ui",
    "-status",
    "-ui",
    "-infra",
    "-mobile",
    "-metrics",
)

ENVIRONMENTS: tuple[str, ...] = ("dev", "test", "prod")


def resolve_folder_name(name: str, project_type: ProjectType) -> str:
    """Folder name for ``name``, appending the type suffix only if missing.

    Example:
        >>> resolve_folder_name("shop", ProjectType.API)
        'shop-api'
        >>> resolve_folder_name("shop-api", ProjectType.API)
        'shop-api'
    """
    suffix = TYPE_SUFFIXES[project_type]
    if not suffix or name.endswith(suffix):
        return name
    return f"{name}{suffix}"


def database_base_name(folder_name: str) -> str:
    return folder_name.replace("-", "_")


def database_names(folder_name: str) -> DatabaseNames:
    """Per-environment database names.

    Example:
        >>> database_names("my-cool-app-api").dev
        'my_cool_app_api_dev'
    """
    base = database_base_name(folder_name)
    return DatabaseNames(dev=f"{base}_dev", test=f"{base}_test", prod=f"{base}_prod")


def validate_project_name(name: str) -> None:
    """
    Raises:
        InvalidName: If ``name`` does not start with a letter or contains
            characters other than letters, digits, ``-`` and ``_``.
    """
    if not name or not PROJECT_NAME_PATTERN.match(name):
        raise InvalidName(
            f"Invalid project name: '{name}'",
            hint="Names must start with a letter and contain only "
            "letters, numbers, hyphens and underscores",
        )


def validate_workspace_name(name: str) -> None:
    """
    Raises:
        InvalidName: On characters outside ``[a-z0-9-]``, a leading or
            trailing hyphen, or a first character that is not a letter.
        ReservedName: If the name ends with a component suffix.
    """
    if not name or not WORKSPACE_NAME_PATTERN.match(name):
        raise InvalidName(
            f"Invalid workspace name: '{name}'",
            hint="Use lowercase letters, numbers and hyphens only",
        )
    if name.startswith("-") or name.endswith("-"):
        raise InvalidName(
            f"Invalid workspace name: '{name}'",
            hint="Workspace names cannot start or end with a hyphen",
        )
    # Component folders are derived from the workspace name
    try:
        validate_project_name(name)
    except InvalidName as exc:
        raise InvalidName(
            f"Invalid workspace name: '{name}'",
            hint="Workspace names must start with a letter",
        ) from exc
    for suffix in RESERVED_WORKSPACE_SUFFIXES:
        if name.endswith(suffix):
            suggestion = name[: -len(suffix)]
            raise ReservedName(name, suffix, suggestion)


def title_case(name: str) -> str:
    """``my-cool_app`` -> ``My Cool App``."""
    words = re.split(r"[-_\s]+", name)
    return " ".join(word[:1].upper() + word[1:] for word in words if word)
