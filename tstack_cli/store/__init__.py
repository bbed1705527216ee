"""Local metadata store for tracked projects and workspaces."""

from tstack_cli.store.metadata_store import MetadataStore, StoreEntry, open_store
from tstack_cli.store.project_store import ProjectStore
from tstack_cli.store.workspace_store import WorkspaceStore

__all__ = [
    "MetadataStore",
    "ProjectStore",
    "StoreEntry",
    "WorkspaceStore",
    "open_store",
]
