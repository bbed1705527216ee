"""Per-type project creators."""

from __future__ import annotations

from tstack_cli.creators.admin_ui import AdminUiCreator
from tstack_cli.creators.api import ApiCreator
from tstack_cli.creators.base import CreateContext, ProjectCreator
from tstack_cli.creators.status import StatusCreator
from tstack_cli.creators.store import StoreCreator
from tstack_cli.models import ProjectType

CREATORS: dict[ProjectType, type[ProjectCreator]] = {
    ProjectType.API: ApiCreator,
    ProjectType.ADMIN_UI: AdminUiCreator,
    ProjectType.STORE: StoreCreator,
    ProjectType.STATUS: StatusCreator,
}


def get_creator(project_type: ProjectType) -> ProjectCreator:
    """
    Raises:
        ValueError: For kinds that are not scaffolded from a template.
    """
    creator_cls = CREATORS.get(project_type)
    if creator_cls is None:
        raise ValueError(f"No creator for project type '{project_type.value}'")
    return creator_cls()


__all__ = ["CREATORS", "CreateContext", "ProjectCreator", "get_creator"]
