"""Show or change settings stored in ``~/.tstack/config.yaml``."""

from __future__ import annotations

import argparse

from tstack_cli.helpers.config import CONFIG_DEFAULTS, load_settings, write_config_value
from tstack_cli.helpers.helpers_logging import (
    print_code,
    print_error,
    print_header,
    print_info,
    print_success,
)


def _mask(secret: str | None) -> str:
    if not secret:
        return "(not set)"
    return "*" * min(len(secret), 8)


def handle_config_show(_args: argparse.Namespace) -> int:
    settings = load_settings()
    print_header("tstack configuration")
    print_info(f"Config file: {settings.config_path}")
    print_info(f"Store:       {settings.store_path}")
    print_code(f"db_user:       {settings.db_user}")
    print_code(f"db_password:   {_mask(settings.db_password)}")
    print_code(f"templates_dir: {settings.templates_dir}")
    print_code(f"github_org:    {settings.github_org or '(not set)'}")
    print_code(f"visibility:    {settings.visibility}")
    print_code(f"github_token:  {_mask(settings.github_token)}")
    if settings.test_mode:
        print_info("Test mode is on (TSTACK_CLI_TEST)")
    return 0


def handle_config_set(args: argparse.Namespace) -> int:
    settings = load_settings()
    try:
        write_config_value(settings.config_path, args.key, args.value)
    except KeyError:
        print_error(f"Unknown setting: {args.key}")
        print_info(f"Known settings: {', '.join(CONFIG_DEFAULTS)}")
        return 1
    except (OSError, ValueError) as exc:
        print_error(f"Could not update {settings.config_path}: {exc}")
        return 1
    print_success(f"Set {args.key} in {settings.config_path}")
    return 0
