"""Git repository setup for scaffolded projects.

Every helper returns a bool and prints a warning on failure; git being
absent never aborts a workspace.
"""

from __future__ import annotations

import os
import stat
import subprocess
import tempfile
from pathlib import Path

from tstack_cli.helpers.helpers_logging import print_info, print_success, print_warning

BRANCHES: tuple[str, ...] = ("main", "staging", "dev")


class GitCommandError(Exception):
    """A git subcommand exited non-zero or could not start."""


def run_git(
    args: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run ``git <args>`` in ``cwd``.

    Raises:
        GitCommandError: If git is missing or exits non-zero.
    """
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            env=env,
            capture_output=True,
            text=True,
            check=False,
        )
    except (FileNotFoundError, OSError) as exc:
        raise GitCommandError(f"git {args[0]} failed: {exc}") from exc
    if result.returncode != 0:
        raise GitCommandError(f"git {args[0]} failed: {result.stderr.strip()}")
    return result


def initialize_repo(project_path: Path, project_name: str) -> bool:
    """Init, commit, and create the ``staging`` and ``dev`` branches.

    Skips projects that already contain a ``.git`` directory.

    Returns:
        True if the repository is initialised (now or before).
    """
    if (project_path / ".git").is_dir():
        print_info(f"  Git already initialized in {project_path.name}, skipping")
        return True

    try:
        run_git(["init"], project_path)
        run_git(["branch", "-M", "main"], project_path)
        run_git(["add", "."], project_path)
        run_git(["commit", "-m", f"Initial commit: {project_name} scaffolding"], project_path)
        run_git(["checkout", "-b", "staging"], project_path)
        run_git(["checkout", "-b", "dev"], project_path)
        run_git(["checkout", "main"], project_path)
    except GitCommandError as exc:
        print_warning(f"  Failed to initialize Git in {project_path.name}: {exc}")
        return False

    print_success(f"  Git initialized with branches: {', '.join(BRANCHES)}")
    return True


def _write_askpass_script(token: str) -> Path:
    fd, name = tempfile.mkstemp(suffix=".sh", prefix="tstack-askpass-")
    with os.fdopen(fd, "w") as f:
        f.write(f'#!/bin/sh\necho "{token}"\n')
    path = Path(name)
    path.chmod(stat.S_IRWXU)
    return path


def add_remote_and_push(project_path: Path, remote_url: str, token: str | None = None) -> bool:
    """Register ``origin`` and push every branch.

    With a token, authentication goes through a temporary ``GIT_ASKPASS``
    script so the token never lands in ``.git/config``.

    Returns:
        True if the remote was added and every branch pushed.
    """
    try:
        run_git(["remote", "add", "origin", remote_url], project_path)
    except GitCommandError as exc:
        print_warning(f"  Could not add remote: {exc}")
        return False

    askpass: Path | None = None
    env = dict(os.environ)
    if token:
        askpass = _write_askpass_script(token)
        env["GIT_ASKPASS"] = str(askpass)
        env["GIT_TERMINAL_PROMPT"] = "0"

    pushed_all = True
    try:
        for branch in BRANCHES:
            try:
                run_git(["push", "-u", "origin", branch], project_path, env=env)
                print_success(f"  Pushed {branch} to remote")
            except GitCommandError as exc:
                print_warning(f"  Push failed for {branch}: {exc}")
                pushed_all = False
    finally:
        if askpass is not None:
            askpass.unlink(missing_ok=True)

    return pushed_all
