"""Metadata records persisted in the tstack store.

Records are stored as JSON objects; ``to_dict`` / ``from_dict`` define the
on-disk shape so the store layer never has to know about these classes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def utc_now() -> str:
    """Current instant as an ISO-8601 UTC string."""
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ProjectType(Enum):
    """Kind of scaffolded unit."""

    API = "api"
    ADMIN_UI = "admin-ui"
    STORE = "store"
    STATUS = "status"
    WORKSPACE = "workspace"


class ProjectStatus(Enum):
    """Lifecycle state of a tracked project."""

    CREATING = "creating"
    CREATED = "created"
    DESTROYING = "destroying"
    DESTROYED = "destroyed"


class WorkspaceStatus(Enum):
    """Lifecycle state of a tracked workspace."""

    CREATING = "creating"
    CREATED = "created"
    PARTIAL = "partial"
    DESTROYING = "destroying"
    DESTROYED = "destroyed"


# ---------------------------------------------------------------------------
# Project records
# ---------------------------------------------------------------------------


@dataclass
class DatabaseNames:
    """Per-environment database names for data-owning projects."""

    dev: str
    test: str
    prod: str

    def as_list(self) -> list[str]:
        return [self.dev, self.test, self.prod]


@dataclass
class ProjectMetadata:
    """One tracked project, keyed by ``folder_name``.

    Attributes:
        name: Logical name as typed by the user (before the type suffix).
        type: Component kind.
        folder_name: On-disk directory name, also the store key.
        path: Absolute path of the project folder.
        status: Current lifecycle state.
        created_at: First successful creation; kept across re-creation.
        updated_at: Last mutating operation.
        databases: Database names, only for kinds that own a database.
    """

    name: str
    type: ProjectType
    folder_name: str
    path: str
    status: ProjectStatus
    created_at: str
    updated_at: str
    databases: DatabaseNames | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "folder_name": self.folder_name,
            "path": self.path,
            "status": self.status.value,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
        if self.databases is not None:
            data["databases"] = {
                "dev": self.databases.dev,
                "test": self.databases.test,
                "prod": self.databases.prod,
            }
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectMetadata:
        databases = data.get("databases")
        return cls(
            name=data["name"],
            type=ProjectType(data["type"]),
            folder_name=data["folder_name"],
            path=data["path"],
            status=ProjectStatus(data["status"]),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
            databases=DatabaseNames(**databases) if databases else None,
        )


# ---------------------------------------------------------------------------
# Workspace records
# ---------------------------------------------------------------------------

# Keys of the workspace ``components`` map, in display order.
COMPONENT_KEYS: tuple[str, ...] = (
    "api",
    "adminUi",
    "store",
    "status",
    "ui",
    "infra",
    "mobile",
)


@dataclass
class WorkspaceProject:
    """Reference from a workspace to one of its component projects."""

    folder_name: str
    path: str
    type: ProjectType
    added_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "folder_name": self.folder_name,
            "path": self.path,
            "type": self.type.value,
            "added_at": self.added_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorkspaceProject:
        return cls(
            folder_name=data["folder_name"],
            path=data["path"],
            type=ProjectType(data["type"]),
            added_at=data["added_at"],
        )


@dataclass
class GitHubRepo:
    """A remote repository provisioned for a workspace component."""

    name: str
    url: str
    type: ProjectType

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "url": self.url, "type": self.type.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GitHubRepo:
        return cls(name=data["name"], url=data["url"], type=ProjectType(data["type"]))


@dataclass
class WorkspaceMetadata:
    """One tracked workspace, keyed by ``name``."""

    name: str
    path: str
    namespace: str
    status: WorkspaceStatus
    created_at: str
    updated_at: str
    components: dict[str, bool] = field(
        default_factory=lambda: dict.fromkeys(COMPONENT_KEYS, False)
    )
    projects: list[WorkspaceProject] = field(default_factory=list)
    github_org: str | None = None
    github_repos: list[GitHubRepo] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "namespace": self.namespace,
            "status": self.status.value,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "components": dict(self.components),
            "projects": [p.to_dict() for p in self.projects],
            "github_org": self.github_org,
            "github_repos": [r.to_dict() for r in self.github_repos],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorkspaceMetadata:
        return cls(
            name=data["name"],
            path=data["path"],
            namespace=data["namespace"],
            status=WorkspaceStatus(data["status"]),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
            components=dict(data.get("components", {})),
            projects=[WorkspaceProject.from_dict(p) for p in data.get("projects", [])],
            github_org=data.get("github_org"),
            github_repos=[GitHubRepo.from_dict(r) for r in data.get("github_repos", [])],
        )
