"""Helpers for reading and rewriting generated ``.env`` files.

Edits keep comments, blank lines and key order intact: an existing key is
replaced in place, a new key is appended at the end.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# ============================================================================
# Parsed .env representation
# ============================================================================


@dataclass
class _EnvLine:
    raw: str
    key: str | None = None
    value: str | None = None


class EnvFile:
    """Structured view of a .env file's lines."""

    def __init__(self, content: str = "") -> None:
        self._lines: list[_EnvLine] = [_parse_line(raw) for raw in content.split("\n")]

    @classmethod
    def read(cls, path: Path) -> EnvFile:
        return cls(path.read_text())

    def get(self, key: str) -> str | None:
        for line in self._lines:
            if line.key == key:
                return line.value
        return None

    def keys(self) -> list[str]:
        return [line.key for line in self._lines if line.key is not None]

    def set(self, key: str, value: str) -> EnvFile:
        for line in self._lines:
            if line.key == key:
                line.value = value
                return self
        # Append before the trailing newline so the file still ends with one
        new_line = _EnvLine(raw="", key=key, value=value)
        if self._lines and self._lines[-1].raw == "" and self._lines[-1].key is None:
            self._lines.insert(len(self._lines) - 1, new_line)
        else:
            self._lines.append(new_line)
        return self

    def render(self) -> str:
        return "\n".join(
            f"{line.key}={line.value}" if line.key is not None else line.raw
            for line in self._lines
        )

    def write(self, path: Path) -> None:
        path.write_text(self.render())


def _parse_line(raw: str) -> _EnvLine:
    stripped = raw.strip()
    if not stripped or stripped.startswith("#") or "=" not in raw:
        return _EnvLine(raw=raw)
    key, value = raw.split("=", 1)
    return _EnvLine(raw=raw, key=key.strip(), value=value)


def transform_env_content(content: str, overrides: dict[str, str]) -> str:
    """Return ``content`` with every key in ``overrides`` set.

    Example:
        >>> transform_env_content("A=1\\n# note\\n", {"A": "2", "B": "3"})
        'A=2\\n# note\\nB=3\\n'
    """
    env = EnvFile(content)
    for key, value in overrides.items():
        env.set(key, value)
    return env.render()


# ============================================================================
# .env File Management
# ============================================================================


def read_env_keys(env_path: Path) -> set[str]:
    """Variable names defined in ``env_path`` (empty set if missing)."""
    if not env_path.exists():
        return set()
    return set(EnvFile.read(env_path).keys())


def append_env_vars(
    env_path: Path,
    values: dict[str, str],
    section_label: str,
) -> int:
    """Append variables under a comment header, skipping keys already present.

    Creates the file if it doesn't exist.

    Args:
        env_path: Target .env file
        values: Variables to add (key -> value)
        section_label: Comment header for the section (e.g. 'JWT Authentication')

    Returns:
        Number of new variables added
    """
    existing = read_env_keys(env_path)

    new_lines = [f"{key}={value}" for key, value in values.items() if key not in existing]
    if not new_lines:
        return 0

    content = env_path.read_text() if env_path.exists() else ""
    prefix = "" if not content or content.endswith("\n") else "\n"
    section_block = f"{prefix}\n# {section_label}\n" + "\n".join(new_lines) + "\n"

    with env_path.open("a") as f:
        f.write(section_block)

    return len(new_lines)


def write_env_from_example(
    example_path: Path,
    target_path: Path,
    overrides: dict[str, str] | None = None,
) -> bool:
    """Materialize ``target_path`` from an example file with key overrides.

    Returns:
        False if the example file is missing, True once written.
    """
    if not example_path.exists():
        return False
    content = transform_env_content(example_path.read_text(), overrides or {})
    target_path.write_text(content)
    return True
