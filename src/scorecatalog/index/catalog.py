"""In-memory score catalog with a load-once lifecycle."""

from __future__ import annotations

import enum
import logging
import threading
from typing import Tuple

from scorecatalog.ingestion.sources import ScoreSource
from scorecatalog.models import Score

LOGGER = logging.getLogger(__name__)


class CatalogLoadError(RuntimeError):
    """Raised when the score source cannot be read completely."""


class CatalogState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class ScoreCatalog:
    """Owns the cached list of scores read from a :class:`ScoreSource`.

    The first call to :meth:`load` scans the source and publishes an
    immutable tuple of :class:`Score` records; every later call returns that
    same tuple without touching storage. Concurrent first callers wait on a
    lock, so the source is scanned at most once. A failed scan publishes
    nothing and the next call starts over.
    """

    def __init__(self, source: ScoreSource) -> None:
        self.source = source
        self._scores: Tuple[Score, ...] | None = None
        self._state = CatalogState.UNINITIALIZED
        self._lock = threading.Lock()

    @property
    def state(self) -> CatalogState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._scores is not None

    def __len__(self) -> int:
        return len(self.load())

    def load(self) -> Tuple[Score, ...]:
        scores = self._scores
        if scores is not None:
            return scores

        with self._lock:
            if self._scores is not None:
                return self._scores

            self._state = CatalogState.LOADING
            try:
                scores = self._scan()
            except BaseException:
                self._state = CatalogState.UNINITIALIZED
                raise

            self._scores = scores
            self._state = CatalogState.READY
            return scores

    def invalidate(self) -> None:
        """Discard the cached scores; the next :meth:`load` rescans the source."""
        with self._lock:
            self._scores = None
            self._state = CatalogState.UNINITIALIZED
        LOGGER.info("Score cache cleared")

    def reload(self) -> Tuple[Score, ...]:
        self.invalidate()
        return self.load()

    def _scan(self) -> Tuple[Score, ...]:
        LOGGER.info("Loading scores from %s...", self.source)
        scores: list[Score] = []
        seen: set[str] = set()
        try:
            for relative_path, content in self.source.iter_documents():
                if relative_path in seen:
                    raise CatalogLoadError(f"Duplicate score path: {relative_path}")
                seen.add(relative_path)
                scores.append(Score.from_document(relative_path, content))
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.error("Failed to load scores from %s: %s", self.source, exc)
            raise CatalogLoadError(f"Failed to load scores: {exc}") from exc

        LOGGER.info("Loaded %d scores", len(scores))
        return tuple(scores)
