"""FastAPI application exposing the score catalog."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, TypeVar

from fastapi import APIRouter, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from scorecatalog import __version__
from scorecatalog.config import AppConfig
from scorecatalog.index.catalog import CatalogLoadError, ScoreCatalog
from scorecatalog.index.query import ScoreQueries
from scorecatalog.models import Score, ScoreFilter

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

router = APIRouter()


class ScoreModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    path: str
    filename: str
    category: str
    full_category: str
    content: str
    notation: str
    title: Optional[str] = None
    composer: Optional[str] = None
    time_signature: Optional[str] = None
    tempo: Optional[str] = None
    key_signature: Optional[str] = None
    metadata: Dict[str, str] = {}

    @classmethod
    def from_score(cls, score: Score) -> "ScoreModel":
        return cls.model_validate(score.to_dict())


def _to_models(scores: List[Score]) -> List[ScoreModel]:
    return [ScoreModel.from_score(score) for score in scores]


def _queries(request: Request) -> ScoreQueries:
    return request.app.state.queries


async def _run_query(func: Callable[..., T], *args: Any) -> T:
    """Run a catalog query off the event loop, mapping load failures to 503."""
    try:
        return await asyncio.to_thread(func, *args)
    except CatalogLoadError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


@router.get("/", include_in_schema=False)
async def root() -> RedirectResponse:
    return RedirectResponse(url="/docs", status_code=302)


@router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    catalog: ScoreCatalog = request.app.state.catalog
    return {
        "status": "ok",
        "state": catalog.state.value,
        "count": len(catalog.load()) if catalog.is_loaded else None,
    }


@router.get("/scores")
async def list_scores(
    request: Request,
    title: Optional[str] = None,
    composer: Optional[str] = None,
    category: Optional[str] = None,
    time_signature: Optional[str] = Query(None, alias="timeSignature"),
    tempo: Optional[str] = None,
    key_signature: Optional[str] = Query(None, alias="keySignature"),
) -> dict[str, List[ScoreModel]]:
    criteria = ScoreFilter(
        title=title,
        composer=composer,
        category=category,
        time_signature=time_signature,
        tempo=tempo,
        key_signature=key_signature,
    )
    scores = await _run_query(_queries(request).filter_scores, criteria)
    return {"scores": _to_models(scores)}


@router.get("/score")
async def get_score(request: Request, path: str) -> dict[str, Optional[ScoreModel]]:
    score = await _run_query(_queries(request).get_by_path, path)
    return {"score": ScoreModel.from_score(score) if score is not None else None}


@router.get("/categories")
async def list_categories(request: Request) -> dict[str, List[str]]:
    return {"categories": await _run_query(_queries(request).categories)}


@router.get("/composers")
async def list_composers(request: Request) -> dict[str, List[str]]:
    return {"composers": await _run_query(_queries(request).composers)}


@router.get("/search/title")
async def search_by_title(request: Request, query: str) -> dict[str, List[ScoreModel]]:
    scores = await _run_query(_queries(request).search_by_title, query)
    return {"scores": _to_models(scores)}


@router.get("/search/composer")
async def search_by_composer(request: Request, query: str) -> dict[str, List[ScoreModel]]:
    scores = await _run_query(_queries(request).search_by_composer, query)
    return {"scores": _to_models(scores)}


@router.post("/reload")
async def reload_scores(request: Request) -> dict[str, Any]:
    catalog: ScoreCatalog = request.app.state.catalog
    scores = await _run_query(catalog.reload)
    return {"status": "ok", "count": len(scores)}


def create_app(catalog: ScoreCatalog | None = None, config: AppConfig | None = None) -> FastAPI:
    """Build the API around ``catalog`` (or one configured from ``config``)."""
    config = config or AppConfig()
    if catalog is None:
        catalog = config.build_catalog()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
        if config.preload:
            try:
                await asyncio.to_thread(catalog.load)
            except CatalogLoadError as exc:
                # Queries retry the scan and report 503 until it succeeds
                LOGGER.error("Preloading scores failed: %s", exc)
        yield

    application = FastAPI(title="ScoreCatalog", version=__version__, lifespan=lifespan)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    application.state.catalog = catalog
    application.state.queries = ScoreQueries(catalog)
    application.include_router(router)
    return application


app = create_app()
