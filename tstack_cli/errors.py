"""Exception taxonomy for tstack commands.

Every error a command can abort with derives from ``TStackError``. The CLI
handlers catch that base class, print the message and the optional hint,
and exit with status 1.
"""

from __future__ import annotations


class TStackError(Exception):
    """Base error with an optional remedy shown to the user."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class InvalidName(TStackError):
    """Project or workspace name fails validation."""


class ReservedName(TStackError):
    """Workspace name ends with a reserved component suffix."""

    def __init__(self, name: str, suffix: str, suggestion: str) -> None:
        super().__init__(
            f"Workspace name '{name}' cannot end with reserved suffix '{suffix}'",
            hint=f"Try: {suggestion}",
        )
        self.name = name
        self.suffix = suffix
        self.suggestion = suggestion


class UntrackedConflict(TStackError):
    """A folder exists on disk that the store knows nothing about."""

    def __init__(self, path: str, hint: str | None = None) -> None:
        super().__init__(
            f"Directory {path} already exists but is not tracked by tstack",
            hint=hint or "Remove or rename the folder, or choose a different project name",
        )
        self.path = path


class AlreadyExists(TStackError):
    """Tracked project or workspace exists and no override was given."""

    def __init__(self, name: str, hint: str | None = None) -> None:
        super().__init__(f"'{name}' already exists", hint=hint)
        self.name = name


class AmbiguousTarget(TStackError):
    """A destroy name matches several tracked projects."""

    def __init__(self, name: str, candidates: list[str]) -> None:
        super().__init__(
            f"'{name}' matches {len(candidates)} projects: {', '.join(candidates)}",
            hint="Pass the full folder name or --type to pick one",
        )
        self.name = name
        self.candidates = candidates


class NotFound(TStackError):
    """Target is absent from both the store and the filesystem."""

    def __init__(self, name: str, hint: str | None = None) -> None:
        super().__init__(f"'{name}' not found", hint=hint)
        self.name = name


class TemplateNotFound(TStackError):
    """Starter template directory is missing from the installation."""

    def __init__(self, template: str, expected_path: str) -> None:
        super().__init__(
            f"Template '{template}' not found. Expected path: {expected_path}",
            hint="Make sure tstack-cli is installed correctly "
            "(or point TSTACK_TEMPLATES_DIR at a templates directory)",
        )
        self.template = template
        self.expected_path = expected_path


class ExternalToolUnavailable(TStackError):
    """Neither the required CLI tool nor API credentials are available."""
