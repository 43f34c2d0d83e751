"""Tests for the FastAPI web application."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from scorecatalog.config import AppConfig
from scorecatalog.index.catalog import CatalogLoadError, ScoreCatalog
from scorecatalog.ingestion.sources import DirectoryScoreSource
from scorecatalog.models import Score
from scorecatalog.web.app import ScoreModel, app, create_app


@pytest.fixture
def client(catalog: ScoreCatalog) -> TestClient:
    return TestClient(create_app(catalog, AppConfig(preload=False)))


@pytest.fixture
def broken_client(tmp_path: Path) -> TestClient:
    catalog = ScoreCatalog(DirectoryScoreSource(tmp_path / "missing"))
    return TestClient(create_app(catalog, AppConfig(preload=False)))


class TestCreateApp:
    """Tests for application construction."""

    def test_module_app(self) -> None:
        """Exposes a default application for uvicorn."""
        assert isinstance(app, FastAPI)
        assert isinstance(app.state.catalog, ScoreCatalog)

    def test_catalog_is_not_loaded_eagerly(self, catalog: ScoreCatalog) -> None:
        """Does not scan until a request or startup needs it."""
        create_app(catalog, AppConfig(preload=False))
        assert not catalog.is_loaded

    def test_startup_preloads(self, catalog: ScoreCatalog) -> None:
        """Loads the catalog on startup when preload is enabled."""
        with TestClient(create_app(catalog, AppConfig(preload=True))):
            assert catalog.is_loaded

    def test_startup_survives_load_failure(self, tmp_path: Path) -> None:
        """Keeps serving when the preload scan fails."""
        catalog = ScoreCatalog(DirectoryScoreSource(tmp_path / "missing"))

        with TestClient(create_app(catalog, AppConfig(preload=True))) as test_client:
            response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["state"] == "uninitialized"


class TestScoreModel:
    """Tests for API serialization."""

    def test_from_score_uses_camel_case_aliases(self) -> None:
        """Dumps field names in camelCase."""
        score = Score.from_document("a/b/c.gen", "A\n---\ntime-signature: 2/4\n---")

        data = ScoreModel.from_score(score).model_dump(by_alias=True)

        assert data["fullCategory"] == "a/b"
        assert data["timeSignature"] == "2/4"
        assert data["keySignature"] is None
        assert data["metadata"] == {"timeSignature": "2/4"}

    def test_from_score_matches_score_to_dict(self) -> None:
        """Serializes a score exactly as Score.to_dict does."""
        score = Score.from_document(
            "folk/jig.gen", "A B\n---\ntitle: Jig\ntempo: 140\nstyle: dance\n---"
        )

        assert ScoreModel.from_score(score).model_dump(by_alias=True) == score.to_dict()


class TestRootAndHealth:
    """Tests for GET / and GET /health."""

    def test_root_redirects_to_docs(self, client: TestClient) -> None:
        """Redirects to the interactive docs."""
        response = client.get("/", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/docs"

    def test_health_before_and_after_load(self, client: TestClient) -> None:
        """Reports the catalog lifecycle state."""
        assert client.get("/health").json() == {
            "status": "ok",
            "state": "uninitialized",
            "count": None,
        }

        client.get("/scores")

        assert client.get("/health").json() == {"status": "ok", "state": "ready", "count": 4}

    def test_cors_preflight(self, client: TestClient) -> None:
        """Allows cross-origin GET requests."""
        response = client.options(
            "/scores",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "GET",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"


class TestScoresEndpoint:
    """Tests for GET /scores."""

    def test_list_all(self, client: TestClient) -> None:
        """Returns every score with camelCase fields."""
        response = client.get("/scores")

        assert response.status_code == 200
        scores = response.json()["scores"]
        assert len(scores) == 4
        by_path = {score["path"]: score for score in scores}
        ode = by_path["classical/ode-to-joy.gen"]
        assert ode["title"] == "Ode to Joy"
        assert ode["timeSignature"] == "4/4"
        assert ode["keySignature"] == "C"
        assert ode["tempo"] == "120"
        assert ode["fullCategory"] == "classical"
        assert ode["notation"].startswith("E E F G")
        assert by_path["folk/untitled.gen"]["title"] is None

    def test_filter_by_query_params(self, client: TestClient) -> None:
        """Applies filter criteria passed as camelCase query parameters."""
        response = client.get("/scores", params={"timeSignature": "4/4", "category": "ENSEMBLE"})

        assert response.status_code == 200
        assert [score["path"] for score in response.json()["scores"]] == [
            "ensemble/star-wars.gen"
        ]

    def test_filter_composer(self, client: TestClient) -> None:
        """Matches composers case-insensitively."""
        response = client.get("/scores", params={"composer": "bach"})

        assert [score["path"] for score in response.json()["scores"]] == [
            "classical/baroque/minuet.gen"
        ]

    def test_empty_params_are_ignored(self, client: TestClient) -> None:
        """Treats empty criteria as unset."""
        response = client.get("/scores", params={"title": ""})

        assert len(response.json()["scores"]) == 4

    def test_load_failure_returns_503(self, broken_client: TestClient) -> None:
        """Reports storage failures explicitly."""
        response = broken_client.get("/scores")

        assert response.status_code == 503
        assert "Failed to load scores" in response.json()["detail"]


class TestScoreEndpoint:
    """Tests for GET /score."""

    def test_found(self, client: TestClient) -> None:
        """Returns the score with the exact path."""
        response = client.get("/score", params={"path": "ensemble/star-wars.gen"})

        assert response.status_code == 200
        score = response.json()["score"]
        assert score["filename"] == "star-wars.gen"
        assert score["composer"] == "John Williams"
        assert score["metadata"]["writtenNotation"] == "true"

    def test_not_found_is_null(self, client: TestClient) -> None:
        """Returns null rather than an error."""
        response = client.get("/score", params={"path": "nope.gen"})

        assert response.status_code == 200
        assert response.json() == {"score": None}

    def test_path_required(self, client: TestClient) -> None:
        """Rejects requests without a path."""
        assert client.get("/score").status_code == 422


class TestListEndpoints:
    """Tests for GET /categories and GET /composers."""

    def test_categories(self, client: TestClient) -> None:
        """Lists sorted categories."""
        response = client.get("/categories")

        assert response.json() == {
            "categories": ["classical", "classical/baroque", "ensemble", "folk"]
        }

    def test_composers(self, client: TestClient) -> None:
        """Lists sorted composers."""
        response = client.get("/composers")

        assert response.json() == {
            "composers": ["Johann Sebastian Bach", "John Williams", "Ludwig van Beethoven"]
        }

    def test_categories_load_failure(self, broken_client: TestClient) -> None:
        """Returns 503 when the catalog cannot load."""
        assert broken_client.get("/categories").status_code == 503


class TestSearchEndpoints:
    """Tests for GET /search/title and GET /search/composer."""

    def test_search_title(self, client: TestClient) -> None:
        """Finds scores by title substring."""
        response = client.get("/search/title", params={"query": "joy"})

        assert [score["path"] for score in response.json()["scores"]] == [
            "classical/ode-to-joy.gen"
        ]

    def test_search_composer(self, client: TestClient) -> None:
        """Finds scores by composer substring."""
        response = client.get("/search/composer", params={"query": "WILLIAMS"})

        assert [score["path"] for score in response.json()["scores"]] == [
            "ensemble/star-wars.gen"
        ]

    def test_search_no_results(self, client: TestClient) -> None:
        """Returns an empty list when nothing matches."""
        response = client.get("/search/title", params={"query": "zzz"})

        assert response.json() == {"scores": []}

    def test_search_query_required(self, client: TestClient) -> None:
        """Rejects requests without a query."""
        assert client.get("/search/composer").status_code == 422


class TestReloadEndpoint:
    """Tests for POST /reload."""

    def test_reload_picks_up_new_files(self, client: TestClient, scores_dir: Path) -> None:
        """Rebuilds the catalog from scratch."""
        client.get("/scores")
        (scores_dir / "folk" / "new.gen").write_text("A\n---\ntitle: New\n---\n")

        assert len(client.get("/scores").json()["scores"]) == 4

        response = client.post("/reload")

        assert response.json() == {"status": "ok", "count": 5}
        assert len(client.get("/scores").json()["scores"]) == 5

    def test_reload_failure(self) -> None:
        """Returns 503 when the rescan fails."""
        catalog = MagicMock(spec=ScoreCatalog)
        catalog.reload.side_effect = CatalogLoadError("Failed to load scores: boom")
        test_client = TestClient(create_app(catalog, AppConfig(preload=False)))

        response = test_client.post("/reload")

        assert response.status_code == 503
        assert "boom" in response.json()["detail"]
