"""List tracked projects."""

from __future__ import annotations

import argparse

from tstack_cli.cli.session import open_session
from tstack_cli.core.listing import STATUS_ACTIVE, print_project_list


def handle_list(args: argparse.Namespace) -> int:
    status = args.status or STATUS_ACTIVE
    with open_session() as session:
        projects = session.projects.list_all()
    print_project_list(projects, status)
    return 0
