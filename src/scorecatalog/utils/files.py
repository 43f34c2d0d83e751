"""Utility helpers for walking the score directory."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator


def iter_score_files(root: Path, *, extension: str = ".gen") -> Iterator[tuple[Path, str]]:
    """Yield ``(path, relative_path)`` for every score file below ``root``.

    Entries are visited in directory-traversal order, descending into every
    subdirectory. ``relative_path`` is always ``/``-joined. Errors while
    listing a directory propagate to the caller.
    """
    yield from _walk(Path(root), "", extension)


def _walk(directory: Path, prefix: str, extension: str) -> Iterator[tuple[Path, str]]:
    with os.scandir(directory) as entries:
        children = list(entries)

    for entry in children:
        relative = f"{prefix}/{entry.name}" if prefix else entry.name
        if entry.is_dir(follow_symlinks=False):
            yield from _walk(Path(entry.path), relative, extension)
        elif entry.name.endswith(extension):
            yield Path(entry.path), relative


def split_relative_path(relative_path: str) -> tuple[str, str, str]:
    """Return ``(filename, category, full_category)`` for a relative path."""
    parts = relative_path.split("/")
    return parts[-1], parts[0], "/".join(parts[:-1])
