"""Storefront project creator."""

from __future__ import annotations

from tstack_cli.creators.admin_ui import FRESH_UI_DEPENDENCIES, AdminUiCreator
from tstack_cli.externals.versions import Dependency
from tstack_cli.models import ProjectType

STORE_DEPENDENCIES: list[Dependency] = [
    *FRESH_UI_DEPENDENCIES,
    Dependency("@tailwindcss/vite", "npm", "@tailwindcss/vite"),
]


class StoreCreator(AdminUiCreator):
    """Same Fresh flow as the admin UI, different starter and port."""

    project_type = ProjectType.STORE
    template_name = "storefront-starter"
    dependencies = STORE_DEPENDENCIES
    dev_url = "http://localhost:5174"
    label = "Storefront"
