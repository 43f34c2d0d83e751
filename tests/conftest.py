"""Shared fixtures: a small scores directory."""

from __future__ import annotations

from pathlib import Path

import pytest

from scorecatalog.index.catalog import ScoreCatalog
from scorecatalog.index.query import ScoreQueries
from scorecatalog.ingestion.sources import DirectoryScoreSource

ODE_TO_JOY = """E E F G
G F E D
C C D E
E D D
---
title: Ode to Joy
composer: Ludwig van Beethoven
time-signature: 4/4
tempo: 120
key-signature: C
---
"""

MINUET = """D G A B C
D G G
---
title: Minuet in G
composer: Johann Sebastian Bach
time-signature: 3/4
key-signature: G
---
"""

STAR_WARS = """G G G C G
---
F E D C G
---
title: Star Wars Main Theme
composer: John Williams
time-signature: 4/4
tempo: 108
written-notation: true
---
"""

UNTITLED = "A B C\nD E F\n"


def write_score_tree(root: Path) -> Path:
    (root / "classical" / "baroque").mkdir(parents=True)
    (root / "ensemble").mkdir()
    (root / "folk").mkdir()

    (root / "classical" / "ode-to-joy.gen").write_text(ODE_TO_JOY, encoding="utf-8")
    (root / "classical" / "baroque" / "minuet.gen").write_text(MINUET, encoding="utf-8")
    (root / "ensemble" / "star-wars.gen").write_text(STAR_WARS, encoding="utf-8")
    (root / "folk" / "untitled.gen").write_text(UNTITLED, encoding="utf-8")
    (root / "folk" / "notes.txt").write_text("not a score", encoding="utf-8")
    return root


@pytest.fixture
def scores_dir(tmp_path: Path) -> Path:
    """Directory with four scores across nested categories."""
    return write_score_tree(tmp_path / "scores")


@pytest.fixture
def catalog(scores_dir: Path) -> ScoreCatalog:
    return ScoreCatalog(DirectoryScoreSource(scores_dir))


@pytest.fixture
def queries(catalog: ScoreCatalog) -> ScoreQueries:
    return ScoreQueries(catalog)
