"""Click command definitions.

Every command declares its options here and hands an
``argparse.Namespace`` to a ``handle_<command>`` function, so handlers
stay testable without going through Click. Handler modules are imported
lazily to keep ``tstack --help`` fast.
"""

from __future__ import annotations

import argparse
from collections.abc import Callable
from typing import Any

import click

from tstack_cli import __version__
from tstack_cli.core.listing import STATUS_ACTIVE, STATUS_FILTERS
from tstack_cli.core.workspace import ALL_COMPONENTS
from tstack_cli.helpers.config import CONFIG_DEFAULTS
from tstack_cli.models import ProjectType

_PROJECT_TYPES = [t.value for t in ProjectType if t != ProjectType.WORKSPACE]

_INTERACTIVE_HELP = "Prompt before destructive steps (default: on when attached to a terminal)"


def _flag_name(prefix: str, component: str) -> str:
    return f"{prefix}_{component.replace('-', '_')}"


def _component_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach ``--with-<component>`` and ``--skip-<component>`` flags."""
    for component in reversed(ALL_COMPONENTS):
        func = click.option(
            f"--skip-{component}",
            _flag_name("skip", component),
            is_flag=True,
            help=f"Create every component except {component}",
        )(func)
    for component in reversed(ALL_COMPONENTS):
        func = click.option(
            f"--with-{component}",
            _flag_name("with", component),
            is_flag=True,
            help=f"Include {component} (only the listed components are created)",
        )(func)
    return func


# ============================================================================
# create / destroy
# ============================================================================

@click.command(name="create", help="Create a project from a starter template")
@click.argument("name")
@click.option("--type", "project_type", type=click.Choice(_PROJECT_TYPES),
              default=ProjectType.API.value, show_default=True,
              help="Project type")
@click.option("--dir", "target_dir", type=click.Path(file_okay=False),
              help="Parent directory (default: current directory)")
@click.option("--latest", is_flag=True,
              help="Update dependencies to the latest published versions")
@click.option("--skip-db-setup", is_flag=True,
              help="Do not create the dev/test/prod databases")
@click.option("--force-overwrite", is_flag=True,
              help="Replace an existing project without asking")
@click.option("--interactive/--no-interactive", default=None, help=_INTERACTIVE_HELP)
def create_cmd(
    name: str,
    project_type: str,
    target_dir: str | None,
    latest: bool,
    skip_db_setup: bool,
    force_overwrite: bool,
    interactive: bool | None,
) -> int:
    from tstack_cli.cli.create_command import handle_create

    return handle_create(argparse.Namespace(
        name=name,
        type=project_type,
        dir=target_dir,
        latest=latest,
        skip_db_setup=skip_db_setup,
        force_overwrite=force_overwrite,
        interactive=interactive,
    ))


@click.command(name="destroy", help="Destroy a project and its databases")
@click.argument("name")
@click.option("--type", "project_type", type=click.Choice(_PROJECT_TYPES),
              default=None, help="Project type, to resolve a logical name")
@click.option("--dir", "target_dir", type=click.Path(file_okay=False),
              help="Directory to search for untracked folders")
@click.option("--force", is_flag=True,
              help="Skip confirmation and delete the project record too")
@click.option("--skip-db-setup", is_flag=True,
              help="Do not drop the project's databases")
@click.option("--interactive/--no-interactive", default=None, help=_INTERACTIVE_HELP)
def destroy_cmd(
    name: str,
    project_type: str | None,
    target_dir: str | None,
    force: bool,
    skip_db_setup: bool,
    interactive: bool | None,
) -> int:
    from tstack_cli.cli.destroy_command import handle_destroy

    return handle_destroy(argparse.Namespace(
        name=name,
        type=project_type,
        dir=target_dir,
        force=force,
        skip_db_setup=skip_db_setup,
        interactive=interactive,
    ))


# ============================================================================
# list
# ============================================================================

@click.command(name="list", help="List tracked projects")
@click.option("--status", type=click.Choice(STATUS_FILTERS), default=STATUS_ACTIVE,
              show_default=True, help="Filter by status ('all' shows everything)")
def list_cmd(status: str) -> int:
    from tstack_cli.cli.list_command import handle_list

    return handle_list(argparse.Namespace(status=status))


# ============================================================================
# workspace
# ============================================================================

@click.group(name="workspace", help="Create or destroy multi-component workspaces")
def workspace_cmd() -> None:
    pass


@workspace_cmd.command(name="create", help="Create a workspace with its component projects")
@click.argument("name")
@click.option("--dir", "target_dir", type=click.Path(file_okay=False),
              help="Parent directory (default: current directory)")
@click.option("--namespace", help="Workspace namespace (default: the workspace name)")
@_component_options
@click.option("--github-org", help="Create one GitHub repository per component in ORG")
@click.option("--github-token", help="GitHub token (default: $GITHUB_TOKEN)")
@click.option("--visibility", type=click.Choice(["private", "public"]), default=None,
              help="Visibility of created repositories")
@click.option("--skip-remote", is_flag=True, help="Do not create remote repositories")
@click.option("--skip-git", is_flag=True, help="Do not initialise git repositories")
@click.option("--skip-db-setup", is_flag=True, help="Do not create databases")
def workspace_create_cmd(name: str, **kwargs: Any) -> int:
    from tstack_cli.cli.workspace_command import handle_workspace_create

    return handle_workspace_create(argparse.Namespace(
        name=name,
        dir=kwargs["target_dir"],
        namespace=kwargs["namespace"],
        with_components=[c for c in ALL_COMPONENTS if kwargs[_flag_name("with", c)]],
        skip_components=[c for c in ALL_COMPONENTS if kwargs[_flag_name("skip", c)]],
        github_org=kwargs["github_org"],
        github_token=kwargs["github_token"],
        visibility=kwargs["visibility"],
        skip_remote=kwargs["skip_remote"],
        skip_git=kwargs["skip_git"],
        skip_db_setup=kwargs["skip_db_setup"],
    ))


@workspace_cmd.command(name="destroy", help="Destroy a workspace and all of its projects")
@click.argument("name")
@click.option("--force", is_flag=True, help="Skip confirmation")
@click.option("--delete-remote", is_flag=True, help="Also delete the GitHub repositories")
@click.option("--interactive/--no-interactive", default=None, help=_INTERACTIVE_HELP)
def workspace_destroy_cmd(
    name: str,
    force: bool,
    delete_remote: bool,
    interactive: bool | None,
) -> int:
    from tstack_cli.cli.workspace_command import handle_workspace_destroy

    return handle_workspace_destroy(argparse.Namespace(
        name=name,
        force=force,
        delete_remote=delete_remote,
        interactive=interactive,
    ))


# ============================================================================
# config / version
# ============================================================================

@click.group(name="config", help="Show or change tstack settings")
def config_cmd() -> None:
    pass


@config_cmd.command(name="show", help="Print the resolved settings")
def config_show_cmd() -> int:
    from tstack_cli.cli.config_command import handle_config_show

    return handle_config_show(argparse.Namespace())


@config_cmd.command(name="set", help="Store a setting in ~/.tstack/config.yaml")
@click.argument("key", type=click.Choice(list(CONFIG_DEFAULTS)))
@click.argument("value")
def config_set_cmd(key: str, value: str) -> int:
    from tstack_cli.cli.config_command import handle_config_set

    return handle_config_set(argparse.Namespace(key=key, value=value))


@click.command(name="version", help="Print the tstack version")
def version_cmd() -> int:
    click.echo(f"tstack {__version__}")
    return 0


# ============================================================================
# Registry of all typed commands
# ============================================================================

CLICK_COMMANDS: dict[str, click.Command] = {
    "create": create_cmd,
    "destroy": destroy_cmd,
    "list": list_cmd,
    "workspace": workspace_cmd,
    "config": config_cmd,
    "version": version_cmd,
}
