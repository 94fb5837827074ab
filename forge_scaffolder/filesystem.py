"""Filesystem helpers for the project directory.

Covers directory creation, recursive removal (used for rollback and for the
nested archive folder) and relocation of extracted files to the project root.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from forge_scaffolder.errors import DirectoryCreateError, MoveError


def create_directory(path: Path) -> Path:
    """Create *path* and any missing parents.

    Raises:
        DirectoryCreateError: If *path* already exists or cannot be created.
    """
    path = Path(path)
    if path.exists():
        raise DirectoryCreateError(f"Failed to create project directory '{path}': already exists")
    try:
        path.mkdir(mode=0o755, parents=True)
    except OSError as exc:
        raise DirectoryCreateError(
            f"Failed to create project directory '{path}': {exc.strerror or exc}"
        ) from exc
    return path


def delete_recursive(path: Path) -> bool:
    """Remove the tree at *path*.

    A missing path counts as already clean.

    Returns:
        ``True`` if something was removed.
    """
    path = Path(path)
    if not path.exists() and not path.is_symlink():
        return False
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
    return True


def move_contents(source_dir: Path, dest_dir: Path) -> list[str]:
    """Move every direct child of *source_dir* into *dest_dir*.

    Stops at the first failure. Items moved before the failure stay where
    they are.

    Returns:
        Names of the moved items, in the order they were moved.

    Raises:
        MoveError: Naming the item that could not be moved.
    """
    source_dir = Path(source_dir)
    dest_dir = Path(dest_dir)
    if not source_dir.is_dir():
        raise MoveError(f"Extracted folder not found: {source_dir}")

    moved: list[str] = []
    for item in sorted(source_dir.iterdir(), key=lambda p: p.name):
        target = dest_dir / item.name
        if target.exists() or target.is_symlink():
            raise MoveError(
                f"Error moving item: {item.name} (destination already exists)",
                item=item.name,
            )
        try:
            shutil.move(str(item), str(target))
        except OSError as exc:
            raise MoveError(
                f"Error moving item: {item.name} ({exc.strerror or exc})",
                item=item.name,
            ) from exc
        moved.append(item.name)
    return moved
