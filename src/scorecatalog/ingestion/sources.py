"""Sources that supply raw score documents to the catalog."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Protocol

from scorecatalog.utils.files import iter_score_files

LOGGER = logging.getLogger(__name__)


class ScoreSource(Protocol):
    """Yields ``(relative_path, text)`` for every score document."""

    def iter_documents(self) -> Iterator[tuple[str, str]]: ...


class DirectoryScoreSource:
    """Reads score files from a directory tree on the local filesystem."""

    def __init__(self, root: Path, *, extension: str = ".gen", encoding: str = "utf-8") -> None:
        self.root = Path(root)
        self.extension = extension
        self.encoding = encoding

    def __repr__(self) -> str:
        return f"DirectoryScoreSource({str(self.root)!r}, extension={self.extension!r})"

    def iter_documents(self) -> Iterator[tuple[str, str]]:
        for path, relative_path in iter_score_files(self.root, extension=self.extension):
            LOGGER.debug("Reading %s", path)
            # newline="" keeps line endings exactly as stored
            with path.open(encoding=self.encoding, newline="") as handle:
                text = handle.read()
            yield relative_path, text
