"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from scorecatalog.index.catalog import ScoreCatalog
from scorecatalog.ingestion.sources import DirectoryScoreSource

SCORES_DIR_ENV = "SCORECATALOG_SCORES_DIR"
PORT_ENV = "PORT"
DEFAULT_EXTENSION = ".gen"
DEFAULT_PORT = 3000


def _get_default_scores_dir() -> Path:
    """Scores directory from the environment, falling back to ``./scores``."""
    configured = os.environ.get(SCORES_DIR_ENV)
    if configured:
        return Path(configured).expanduser()
    return Path("scores")


def _get_default_port() -> int:
    value = os.environ.get(PORT_ENV)
    if not value:
        return DEFAULT_PORT
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{PORT_ENV} must be an integer, got {value!r}") from exc


@dataclass(slots=True)
class AppConfig:
    scores_dir: Path | None = None
    extension: str = DEFAULT_EXTENSION
    host: str = "127.0.0.1"
    port: int | None = None
    preload: bool = True

    def __post_init__(self) -> None:
        if self.scores_dir is None:
            self.scores_dir = _get_default_scores_dir()

    def resolve_scores_dir(self, base_dir: Path | None = None) -> Path:
        if self.scores_dir is None:
            self.scores_dir = _get_default_scores_dir()
        if Path(self.scores_dir).is_absolute() or base_dir is None:
            return Path(self.scores_dir)
        return base_dir / self.scores_dir

    def resolve_port(self) -> int:
        """Explicit port, else $PORT, else the default; raises ValueError on a bad $PORT."""
        if self.port is None:
            return _get_default_port()
        return self.port

    def build_catalog(self, base_dir: Path | None = None) -> ScoreCatalog:
        source = DirectoryScoreSource(self.resolve_scores_dir(base_dir), extension=self.extension)
        return ScoreCatalog(source)
