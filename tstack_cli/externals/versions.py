"""Latest-version lookups against the JSR and npm registries.

Lookups never raise: a registry error, timeout or malformed response
yields ``None`` and the caller keeps the template's pinned version.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from typing import Any

import httpx

from tstack_cli.helpers.helpers_logging import print_info, print_step, print_warning

JSR_META_URL = "https://jsr.io/{package}/meta.json"
NPM_LATEST_URL = "https://registry.npmjs.org/{package}/latest"

REQUEST_TIMEOUT = 5.0
CACHE_TTL_SECONDS = 60 * 60

_VERSION_IN_SPECIFIER = re.compile(r"@([\^~])?([0-9.]+)")


@dataclass(frozen=True)
class Dependency:
    """A dependency in a deno.json import map.

    Attributes:
        key: Import map key (``hono``)
        registry: ``jsr`` or ``npm``
        package: Registry package name (``@hono/hono``)
    """

    key: str
    registry: str
    package: str

    @property
    def specifier_prefix(self) -> str:
        return f"{self.registry}:{self.package}@"


def extract_version(specifier: str) -> str:
    """Pinned version inside an import specifier.

    Example:
        >>> extract_version("jsr:@std/dotenv@^0.225.0")
        '0.225.0'
    """
    match = _VERSION_IN_SPECIFIER.search(specifier)
    return match.group(2) if match else "latest"


class VersionResolver:
    """Fetches latest published versions, caching results for an hour."""

    def __init__(self, client: httpx.Client | None = None) -> None:
        self._client = client
        self._cache: dict[str, tuple[str, float]] = {}

    def fetch_latest(self, registry: str, package: str) -> str | None:
        cache_key = f"{registry}:{package}"
        cached = self._cache.get(cache_key)
        if cached is not None and time.monotonic() - cached[1] < CACHE_TTL_SECONDS:
            return cached[0]

        if registry == "jsr":
            version = self._get_field(JSR_META_URL.format(package=package), "latest")
        elif registry == "npm":
            version = self._get_field(NPM_LATEST_URL.format(package=package), "version")
        else:
            return None

        if version:
            self._cache[cache_key] = (version, time.monotonic())
        return version

    def _get_field(self, url: str, field_name: str) -> str | None:
        try:
            if self._client is not None:
                resp = self._client.get(url, timeout=REQUEST_TIMEOUT)
            else:
                resp = httpx.get(url, timeout=REQUEST_TIMEOUT)
            if resp.status_code != httpx.codes.OK:
                return None
            data: Any = resp.json()
        except (httpx.HTTPError, ValueError):
            return None

        value = data.get(field_name) if isinstance(data, dict) else None
        return value if isinstance(value, str) and value else None

    def resolve(
        self,
        dependencies: list[Dependency],
        imports: dict[str, Any],
    ) -> dict[str, str]:
        """Latest version per dependency key.

        Dependencies whose lookup fails are left out of the result and
        reported with the pinned version they keep.
        """
        print_step("Fetching latest stable versions from registries...")
        resolved: dict[str, str] = {}
        for dep in dependencies:
            latest = self.fetch_latest(dep.registry, dep.package)
            if latest is None:
                current = imports.get(dep.key)
                pinned = extract_version(current) if isinstance(current, str) else "latest"
                print_warning(f"{dep.package}: lookup failed, keeping {pinned}")
                continue
            resolved[dep.key] = latest
            print_info(f"  {dep.package}: {latest}")
        return resolved


def update_import_map(
    imports: dict[str, Any],
    dependencies: list[Dependency],
    versions: dict[str, str],
) -> int:
    """Rewrite import specifiers to ``^<latest>``, keeping subpaths.

    ``jsr:@hono/hono@^4.0.0/cors`` becomes ``jsr:@hono/hono@^4.6.1/cors``.

    Returns:
        Number of import entries changed.
    """
    changed = 0
    for dep in dependencies:
        version = versions.get(dep.key)
        if version is None:
            continue
        prefix = dep.specifier_prefix
        for key, value in imports.items():
            if not isinstance(value, str) or not value.startswith(prefix):
                continue
            rest = value[len(prefix):]
            _old_version, slash, subpath = rest.partition("/")
            new_value = f"{prefix}^{version}{slash}{subpath}"
            if new_value != value:
                imports[key] = new_value
                changed += 1
    return changed
