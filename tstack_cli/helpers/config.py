"""Runtime settings for tstack commands.

Settings are layered, later sources winning:

1. Built-in defaults
2. ``~/.tstack/config.yaml`` (``TSTACK_HOME`` relocates ``~/.tstack``)
3. Environment variables (``PGUSER``, ``PGPASSWORD``, ``GITHUB_TOKEN``,
   ``TSTACK_TEMPLATES_DIR``, ``TSTACK_CLI_TEST``)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ruamel.yaml.error import YAMLError

from tstack_cli.helpers.helpers_logging import print_warning
from tstack_cli.helpers.yaml_loader import ConfigDict, load_yaml_file, save_yaml_file

CONFIG_FILE_NAME = "config.yaml"
STORE_FILE_NAME = "projects.db"
TEST_STORE_FILE_NAME = "projects-test.db"

# Keys accepted in config.yaml, with their defaults.
CONFIG_DEFAULTS: dict[str, str | None] = {
    "db_user": "postgres",
    "db_password": "password",
    "templates_dir": None,
    "github_org": None,
    "visibility": "private",
}

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Resolved configuration for one command invocation."""

    home_dir: Path
    db_user: str
    db_password: str
    templates_dir: Path
    github_token: str | None = None
    github_org: str | None = None
    visibility: str = "private"
    test_mode: bool = False

    @property
    def store_path(self) -> Path:
        """SQLite file holding project and workspace records."""
        name = TEST_STORE_FILE_NAME if self.test_mode else STORE_FILE_NAME
        return self.home_dir / name

    @property
    def config_path(self) -> Path:
        return self.home_dir / CONFIG_FILE_NAME


def get_home_dir() -> Path:
    """Directory holding tstack's config file and store."""
    override = os.environ.get("TSTACK_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".tstack"


def packaged_templates_dir() -> Path:
    """Starter templates shipped inside the package."""
    return Path(__file__).resolve().parent.parent / "templates"


def is_test_mode() -> bool:
    return os.environ.get("TSTACK_CLI_TEST", "").lower() in _TRUTHY


def read_config_file(config_path: Path) -> ConfigDict:
    """Read config.yaml, returning {} when it is absent or unreadable."""
    if not config_path.exists():
        return {}
    try:
        return load_yaml_file(config_path)
    except (OSError, ValueError, YAMLError) as exc:
        print_warning(f"Could not load config from {config_path}: {exc}")
        return {}


def write_config_value(config_path: Path, key: str, value: str) -> None:
    """Set one key in config.yaml, keeping existing comments.

    Raises:
        KeyError: If ``key`` is not a known setting.
    """
    if key not in CONFIG_DEFAULTS:
        raise KeyError(key)
    data = load_yaml_file(config_path) if config_path.exists() else {}
    data[key] = value
    save_yaml_file(data, config_path)


def load_settings() -> Settings:
    """Build ``Settings`` from defaults, config file and environment."""
    home_dir = get_home_dir()
    file_values = read_config_file(home_dir / CONFIG_FILE_NAME)

    def _value(key: str) -> str | None:
        raw = file_values.get(key, CONFIG_DEFAULTS[key])
        return None if raw is None else str(raw)

    templates_dir = os.environ.get("TSTACK_TEMPLATES_DIR") or _value("templates_dir")

    return Settings(
        home_dir=home_dir,
        db_user=os.environ.get("PGUSER") or _value("db_user") or "postgres",
        db_password=os.environ.get("PGPASSWORD") or _value("db_password") or "password",
        templates_dir=(
            Path(templates_dir).expanduser() if templates_dir else packaged_templates_dir()
        ),
        github_token=os.environ.get("GITHUB_TOKEN") or None,
        github_org=_value("github_org"),
        visibility=_value("visibility") or "private",
        test_mode=is_test_mode(),
    )
