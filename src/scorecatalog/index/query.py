"""Filter and search queries over the score catalog."""

from __future__ import annotations

from typing import List, Optional

from scorecatalog.index.catalog import ScoreCatalog
from scorecatalog.models import Score, ScoreFilter
from scorecatalog.utils.text import contains_casefold, equals_casefold, sorted_unique


def matches_filter(score: Score, criteria: ScoreFilter) -> bool:
    """Return True when ``score`` satisfies every criterion that is set."""
    if criteria.title and not contains_casefold(score.title, criteria.title):
        return False

    if criteria.composer and not contains_casefold(score.composer, criteria.composer):
        return False

    if criteria.category and not (
        equals_casefold(score.category, criteria.category)
        or equals_casefold(score.full_category, criteria.category)
    ):
        return False

    # Exact, case-sensitive
    if criteria.time_signature and score.time_signature != criteria.time_signature:
        return False
    if criteria.tempo and score.tempo != criteria.tempo:
        return False
    if criteria.key_signature and score.key_signature != criteria.key_signature:
        return False

    return True


class ScoreQueries:
    """High-level query API backed by a :class:`ScoreCatalog`."""

    def __init__(self, catalog: ScoreCatalog) -> None:
        self.catalog = catalog

    def all_scores(self) -> List[Score]:
        return list(self.catalog.load())

    def get_by_path(self, path: str) -> Optional[Score]:
        for score in self.catalog.load():
            if score.path == path:
                return score
        return None

    def filter_scores(self, criteria: ScoreFilter | None = None) -> List[Score]:
        scores = self.catalog.load()
        if criteria is None or criteria.is_empty():
            return list(scores)
        return [score for score in scores if matches_filter(score, criteria)]

    def categories(self) -> List[str]:
        """Top-level categories plus nested category paths, sorted."""
        values: list[str] = []
        for score in self.catalog.load():
            values.append(score.category)
            if score.full_category and score.full_category != score.category:
                values.append(score.full_category)
        return sorted_unique(values)

    def composers(self) -> List[str]:
        return sorted_unique(score.composer or "" for score in self.catalog.load())

    def search_by_title(self, query: str) -> List[Score]:
        return [score for score in self.catalog.load() if contains_casefold(score.title, query)]

    def search_by_composer(self, query: str) -> List[Score]:
        return [
            score for score in self.catalog.load() if contains_casefold(score.composer, query)
        ]
