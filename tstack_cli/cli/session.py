"""Per-invocation plumbing shared by the command handlers.

Each handler opens one session: settings are resolved, the metadata store
is opened and is closed again when the handler returns.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import click

from tstack_cli.core.lifecycle import ProjectLifecycle
from tstack_cli.errors import TStackError
from tstack_cli.helpers.config import Settings, load_settings
from tstack_cli.helpers.helpers_logging import print_code, print_error, print_info
from tstack_cli.store import ProjectStore, WorkspaceStore, open_store


@dataclass
class Session:
    settings: Settings
    projects: ProjectStore
    workspaces: WorkspaceStore


@contextmanager
def open_session() -> Iterator[Session]:
    settings = load_settings()
    with open_store(settings.store_path) as store:
        yield Session(settings, ProjectStore(store), WorkspaceStore(store))


def resolve_interactive(flag: bool | None, settings: Settings) -> bool:
    """``--interactive/--no-interactive``, defaulting to "is this a terminal"."""
    if flag is not None:
        return flag
    return not settings.test_mode and sys.stdin.isatty()


def confirm_prompt(question: str) -> bool:
    return click.confirm(question, default=False)


def choose_prompt(question: str, candidates: list[str]) -> str | None:
    """Numbered pick list; 0 cancels."""
    print_info(question)
    for index, candidate in enumerate(candidates, start=1):
        print_code(f"{index}. {candidate}")
    choice = click.prompt(
        "Enter a number (0 to cancel)",
        type=click.IntRange(0, len(candidates)),
        default=0,
    )
    if choice == 0:
        return None
    return candidates[choice - 1]


def build_lifecycle(session: Session, interactive: bool) -> ProjectLifecycle:
    return ProjectLifecycle(
        session.projects,
        session.settings,
        confirm=confirm_prompt if interactive else None,
        choose=choose_prompt if interactive else None,
    )


def report_error(exc: TStackError) -> int:
    print_error(str(exc))
    if exc.hint:
        print_info(f"💡 {exc.hint}")
    return 1


def report_os_error(exc: OSError, hint: str) -> int:
    """Filesystem failure in the middle of a command."""
    detail = f"{exc.strerror}: {exc.filename}" if exc.filename else str(exc)
    print_error(detail)
    print_info(f"💡 {hint}")
    return 1
