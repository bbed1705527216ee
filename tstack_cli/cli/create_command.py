"""
Create a single project from a starter template.

Usage:
    tstack create my-shop                     # api project in ./my-shop-api
    tstack create my-shop --type admin-ui     # ./my-shop-admin-ui
    tstack create my-shop --latest            # pin latest dependency versions
    tstack create my-shop --force-overwrite   # replace an existing project
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
from tstack_cli.core.lifecycle import CreateOptions
from tstack_cli.errors import TStackError
from tstack_cli.models import ProjectType


def handle_create(args: argparse.Namespace) -> int:
    """Handle ``tstack create``.

    Expects ``name``, ``type``, ``dir``, ``latest``, ``skip_db_setup``,
    ``force_overwrite`` and ``interactive`` on ``args``.
    """
    options = CreateOptions(
        name=args.name,
        project_type=ProjectType(args.type),
        target_dir=Path(args.dir) if args.dir else None,
        latest=args.latest,
        skip_db_setup=args.skip_db_setup,
        force_overwrite=args.force_overwrite,
    )
    with open_session() as session:
        interactive = resolve_interactive(args.interactive, session.settings)
        lifecycle = build_lifecycle(session, interactive)
        try:
            lifecycle.create(options)
        except TStackError as exc:
            return report_error(exc)
        except OSError as exc:
            return report_os_error(
                exc,
                f"Fix the problem above and re-run: tstack create {args.name} --type {args.type}",
            )
    return 0
