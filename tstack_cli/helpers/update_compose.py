"""
Point the starter docker-compose.yml's postgres service at a project's database.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from tstack_cli.helpers.helpers_logging import print_success, print_warning


def postgres_healthcheck(db_user: str, db_name: str) -> dict[str, Any]:
    """Healthcheck block for a postgres service."""
    return {
        'test': ['CMD-SHELL', f'pg_isready -U {db_user} -d {db_name}'],
        'interval': '10s',
        'timeout': '5s',
        'retries': 5,
    }


def update_postgres_service(
    compose_file: Path,
    db_name: str,
    db_user: str,
    db_password: str,
    service_name: str = "postgres",
) -> bool:
    """
    Set database name, credentials and healthcheck on the postgres service.

    Args:
        compose_file: Path to the project's docker-compose.yml
        db_name: Database created on container start
        db_user: Database superuser
        db_password: Password for ``db_user``
        service_name: Name of the postgres service in the compose file

    Returns:
        bool: True if the file was updated, False if it or the service is missing
    """
    if not compose_file.exists():
        print_warning(f"docker-compose.yml not found at {compose_file}")
        return False

    with open(compose_file) as f:
        compose_config = yaml.safe_load(f) or {}

    services = compose_config.get('services') or {}
    service = services.get(service_name)
    if not isinstance(service, dict):
        print_warning(f"No '{service_name}' service in {compose_file.name}, skipping")
        return False

    environment = service.get('environment')
    if isinstance(environment, list):
        # KEY=VALUE list form
        environment = dict(item.split('=', 1) for item in environment if '=' in item)
    elif not isinstance(environment, dict):
        environment = {}

    environment['POSTGRES_DB'] = db_name
    environment['POSTGRES_USER'] = db_user
    environment['POSTGRES_PASSWORD'] = db_password
    service['environment'] = environment
    service['healthcheck'] = postgres_healthcheck(db_user, db_name)

    with open(compose_file, 'w') as f:
        yaml.dump(compose_config, f, default_flow_style=False, sort_keys=False, indent=2)

    print_success("Updated docker-compose.yml with database configuration")
    return True
