"""Zip extraction for the downloaded starter template."""

from __future__ import annotations

import zipfile
from dataclasses import dataclass
from pathlib import Path

from forge_scaffolder.errors import ExtractError


@dataclass
class ExtractResult:
    """What ``extract_archive`` put on disk."""

    entries: int
    root: str | None


def detect_archive_root(names: list[str]) -> str | None:
    """Return the single top-level directory shared by all *names*.

    GitHub archives wrap everything in ``<repo>-<branch>/``. Returns ``None``
    when entries sit at the top level or under more than one root.
    """
    roots: set[str] = set()
    for name in names:
        head, sep, _ = name.replace("\\", "/").lstrip("/").partition("/")
        if not head:
            continue
        if not sep:
            # A top-level file, so there is no single wrapping directory.
            return None
        roots.add(head)
    if len(roots) == 1:
        return roots.pop()
    return None


def extract_archive(zip_path: Path, dest_dir: Path) -> ExtractResult:
    """Extract every entry of *zip_path* into *dest_dir*.

    Raises:
        ExtractError: If the archive is missing, corrupt, or not a zip.
    """
    zip_path = Path(zip_path)
    try:
        with zipfile.ZipFile(zip_path, "r") as archive:
            names = archive.namelist()
            archive.extractall(dest_dir)
    except zipfile.BadZipFile as exc:
        raise ExtractError(f"Could not open zip file: {zip_path} ({exc})") from exc
    except (OSError, zipfile.LargeZipFile) as exc:
        raise ExtractError(f"Failed to extract {zip_path}: {exc}") from exc

    return ExtractResult(entries=len(names), root=detect_archive_root(names))
