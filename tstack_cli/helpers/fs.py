"""Filesystem probing, copying and removal used by the lifecycle engine."""

from __future__ import annotations

import shutil
from pathlib import Path


def path_exists(path: Path) -> bool:
    return path.exists()


def is_directory(path: Path) -> bool:
    return path.is_dir()


def copy_tree_no_overwrite(source: Path, destination: Path) -> list[Path]:
    """Recursively copy ``source`` into ``destination``.

    Files already present at the destination are left untouched.

    Returns:
        Destination paths that were skipped because they already existed.
    """
    skipped: list[Path] = []
    destination.mkdir(parents=True, exist_ok=True)

    for entry in sorted(source.iterdir()):
        target = destination / entry.name
        if entry.is_dir():
            skipped.extend(copy_tree_no_overwrite(entry, target))
        elif target.exists():
            skipped.append(target)
        else:
            shutil.copy2(entry, target)

    return skipped


def remove_tree(path: Path) -> bool:
    """Remove a directory tree or file.

    A path that is already gone counts as removed. Any other OS error
    (permission denied, busy file) propagates.

    Returns:
        True if something was deleted, False if nothing was there.
    """
    if not path.exists() and not path.is_symlink():
        return False
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except FileNotFoundError:
        return False
    return True
