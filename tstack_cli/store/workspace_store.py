"""Typed access to workspace records in the ``workspaces`` namespace."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from tstack_cli.models import WorkspaceMetadata, utc_now
from tstack_cli.store.metadata_store import WORKSPACES, MetadataStore


class WorkspaceStore:
    """Workspace records keyed by workspace name."""

    def __init__(self, store: MetadataStore) -> None:
        self._store = store

    def get(self, name: str) -> WorkspaceMetadata | None:
        entry = self._store.get(WORKSPACES, name)
        if entry is None:
            return None
        return WorkspaceMetadata.from_dict(entry.value)

    def save(self, workspace: WorkspaceMetadata) -> None:
        self._store.set(WORKSPACES, workspace.name, workspace.to_dict())

    def insert(self, workspace: WorkspaceMetadata) -> bool:
        """Save only if no record exists yet; False if one appeared meanwhile."""
        return self._store.compare_and_set(WORKSPACES, workspace.name, workspace.to_dict(), None)

    def update(
        self,
        name: str,
        mutate: Callable[[WorkspaceMetadata], None],
    ) -> WorkspaceMetadata:
        def _apply(raw: dict[str, Any]) -> dict[str, Any]:
            workspace = WorkspaceMetadata.from_dict(raw)
            mutate(workspace)
            workspace.updated_at = utc_now()
            return workspace.to_dict()

        return WorkspaceMetadata.from_dict(self._store.update(WORKSPACES, name, _apply))

    def delete(self, name: str) -> None:
        self._store.delete(WORKSPACES, name)

    def list_all(self) -> list[WorkspaceMetadata]:
        workspaces = [WorkspaceMetadata.from_dict(e.value) for e in self._store.list(WORKSPACES)]
        workspaces.sort(key=lambda w: w.created_at, reverse=True)
        return workspaces
