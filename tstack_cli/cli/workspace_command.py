"""
Create or destroy a multi-component workspace.

Usage:
    tstack workspace create acme                          # api, admin-ui, store, status
    tstack workspace create acme --with-api --with-admin-ui
    tstack workspace create acme --skip-store --github-org acme-inc
    tstack workspace destroy acme --force --delete-remote
"""

from __future__ import annotations

import argparse
from pathlib import Path

from tstack_cli.cli.session import (
    build_lifecycle,
    confirm_prompt,
    open_session,
    report_error,
    report_os_error,
    resolve_interactive,
)
from tstack_cli.core.workspace import WorkspaceCreateOptions, WorkspaceOrchestrator
from tstack_cli.errors import TStackError
from tstack_cli.helpers.helpers_logging import print_info


def handle_workspace_create(args: argparse.Namespace) -> int:
    with open_session() as session:
        settings = session.settings
        options = WorkspaceCreateOptions(
            name=args.name,
            target_dir=Path(args.dir) if args.dir else None,
            namespace=args.namespace,
            with_components=set(args.with_components),
            skip_components=set(args.skip_components),
            github_org=args.github_org or settings.github_org,
            github_token=args.github_token,
            visibility=args.visibility or settings.visibility,
            skip_remote=args.skip_remote,
            skip_git=args.skip_git,
            skip_db_setup=args.skip_db_setup,
        )
        # Components inside a fresh workspace never need an overwrite prompt.
        orchestrator = WorkspaceOrchestrator(
            session.workspaces, build_lifecycle(session, interactive=False)
        )
        try:
            workspace = orchestrator.create(options)
        except TStackError as exc:
            return report_error(exc)
        except OSError as exc:
            return report_os_error(
                exc, f"Inspect the workspace, then run: tstack workspace destroy {args.name} --force"
            )
    return 0 if workspace.projects else 1


def handle_workspace_destroy(args: argparse.Namespace) -> int:
    with open_session() as session:
        interactive = resolve_interactive(args.interactive, session.settings)
        if not args.force and interactive:
            question = f"Destroy workspace '{args.name}' and all of its projects?"
            if not confirm_prompt(question):
                print_info("Destruction cancelled")
                return 1
        orchestrator = WorkspaceOrchestrator(
            session.workspaces, build_lifecycle(session, interactive=False)
        )
        try:
            orchestrator.destroy(args.name, delete_remote=args.delete_remote)
        except TStackError as exc:
            return report_error(exc)
    return 0
