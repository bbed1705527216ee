#!/usr/bin/env python3
"""TStack CLI - Main Entry Point.

Scaffolds, tracks and destroys TStack projects and workspaces.

Usage:
    tstack <command> [options]

Commands:
    create <name>            Create a project (api, admin-ui, store, status)
    destroy <name>           Destroy a project, its folder and databases
    list                     List tracked projects
    workspace create <name>  Create a workspace with several components
    workspace destroy <name> Destroy a workspace and all of its projects
    config show|set          Show or change settings
    version                  Print the tstack version
    help                     Show this help message
"""

from __future__ import annotations

import sys

import click

from tstack_cli.helpers.config import get_home_dir, is_test_mode

# Minimum number of CLI args (program name + command)
_MIN_ARGS = 2


def print_help() -> None:
    """Print help message with all available commands."""
    print(__doc__)
    print(f"📍 Settings and project store: {get_home_dir()}")
    if is_test_mode():
        print("🧪 Test mode: using the isolated test store")
    print("\n💡 Run 'tstack <command> --help' for the options of a command")


@click.group(invoke_without_command=True)
@click.pass_context
def _click_cli(ctx: click.Context) -> int:
    """Top-level tstack command group."""
    if ctx.invoked_subcommand is not None:
        return 0
    print_help()
    return 0


def _register_commands() -> None:
    """Register all commands declared in click_commands.py."""
    from tstack_cli.cli.click_commands import CLICK_COMMANDS

    for _name, cmd_obj in CLICK_COMMANDS.items():
        _click_cli.add_command(cmd_obj)

    @click.command(name="help", help="Show help message")
    def _help_cmd() -> int:
        print_help()
        return 0

    _click_cli.add_command(_help_cmd)


_register_commands()


def main() -> int:
    """Main CLI entry point."""
    if len(sys.argv) < _MIN_ARGS or sys.argv[1] in ["help", "--help", "-h"]:
        print_help()
        return 0

    try:
        result = _click_cli.main(
            args=sys.argv[1:],
            prog_name="tstack",
            standalone_mode=False,
        )
    except click.Abort:
        print("\n⚠️  Cancelled by user")
        return 130
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    return 0 if result is None else int(result)


if __name__ == "__main__":
    sys.exit(main())
