"""Typed access to project records in the ``projects`` namespace."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from tstack_cli.models import ProjectMetadata, ProjectStatus, utc_now
from tstack_cli.store.metadata_store import PROJECTS, MetadataStore


class ProjectStore:
    """Project records keyed by folder name."""

    def __init__(self, store: MetadataStore) -> None:
        self._store = store

    def get(self, folder_name: str) -> ProjectMetadata | None:
        entry = self._store.get(PROJECTS, folder_name)
        if entry is None:
            return None
        return ProjectMetadata.from_dict(entry.value)

    def save(self, project: ProjectMetadata) -> None:
        self._store.set(PROJECTS, project.folder_name, project.to_dict())

    def insert(self, project: ProjectMetadata) -> bool:
        """Save only if no record exists yet; False if one appeared meanwhile."""
        return self._store.compare_and_set(
            PROJECTS, project.folder_name, project.to_dict(), None
        )

    def update(
        self,
        folder_name: str,
        mutate: Callable[[ProjectMetadata], None],
    ) -> ProjectMetadata:
        """Apply ``mutate`` to the current record and bump ``updated_at``.

        Raises:
            NotFound: If no record exists for ``folder_name``.
        """

        def _apply(raw: dict[str, Any]) -> dict[str, Any]:
            project = ProjectMetadata.from_dict(raw)
            mutate(project)
            project.updated_at = utc_now()
            return project.to_dict()

        return ProjectMetadata.from_dict(self._store.update(PROJECTS, folder_name, _apply))

    def set_status(self, folder_name: str, status: ProjectStatus) -> ProjectMetadata:
        def _set(project: ProjectMetadata) -> None:
            project.status = status

        return self.update(folder_name, _set)

    def delete(self, folder_name: str) -> None:
        self._store.delete(PROJECTS, folder_name)

    def list_all(self) -> list[ProjectMetadata]:
        """Every tracked project, most recently created first."""
        projects = [ProjectMetadata.from_dict(e.value) for e in self._store.list(PROJECTS)]
        projects.sort(key=lambda p: p.created_at, reverse=True)
        return projects

    def find_by_prefix(self, prefix: str) -> list[ProjectMetadata]:
        return [
            ProjectMetadata.from_dict(e.value)
            for e in self._store.list(PROJECTS, prefix)
        ]
