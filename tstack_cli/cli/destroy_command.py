"""
Destroy a project: folder, databases and (with --force) its record.

Usage:
    tstack destroy my-shop-api            # exact folder name
    tstack destroy my-shop --type api     # logical name + type
    tstack destroy my-shop --force        # also forget the project
"""

from __future__ import annotations

import argparse
from pathlib import Path

from tstack_cli.cli.session import (
    build_lifecycle,
    open_session,
    report_error,
    report_os_error,
    resolve_interactive,
)
from tstack_cli.core.lifecycle import DestroyOptions, DestroyResult
from tstack_cli.errors import TStackError
from tstack_cli.helpers.helpers_logging import print_info
from tstack_cli.models import ProjectType


def handle_destroy(args: argparse.Namespace) -> int:
    options = DestroyOptions(
        name=args.name,
        project_type=ProjectType(args.type) if args.type else None,
        target_dir=Path(args.dir) if args.dir else None,
        force=args.force,
        skip_db_setup=args.skip_db_setup,
    )
    with open_session() as session:
        interactive = resolve_interactive(args.interactive, session.settings)
        lifecycle = build_lifecycle(session, interactive)
        try:
            outcome = lifecycle.destroy(options)
        except TStackError as exc:
            return report_error(exc)
        except OSError as exc:
            return report_os_error(
                exc, "Fix the cause and re-run destroy; an interrupted destroy is resumed"
            )

    if outcome.result == DestroyResult.ALREADY_DESTROYED:
        print_info(f"Use --force to also remove the record: tstack destroy {outcome.folder_name} --force")
    elif outcome.result == DestroyResult.CANCELLED:
        return 1
    return 0
