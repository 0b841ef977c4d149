from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request

from .credentials.store import open_credential_store
from .pairings.data_store import get_catalog
from .pairings.models import CategoryFilter
from .pairings.retrieval import filter_pairings
from .session.browse import SEARCH_PLACEHOLDER
from .session.coordinator import SessionCoordinator, build_context
from .session.models import (
    ApiKeyRequest,
    ApiKeyResponse,
    CategoryRequest,
    QueryRequest,
    ViewStateSnapshot,
)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger(__name__)


def _build_coordinator() -> SessionCoordinator:
    # CatalogLoadError propagates: the app cannot run without a catalog.
    context = build_context(get_catalog(), open_credential_store())
    return SessionCoordinator(context)


def get_coordinator(request: Request) -> SessionCoordinator:
    """The single app session, created on first use."""
    coordinator = getattr(request.app.state, "coordinator", None)
    if coordinator is None:
        coordinator = _build_coordinator()
        request.app.state.coordinator = coordinator
    return coordinator


@asynccontextmanager
async def lifespan(app: FastAPI):
    if getattr(app.state, "coordinator", None) is None:
        app.state.coordinator = _build_coordinator()
    coordinator = app.state.coordinator
    logger.info("Sommelier ready with %d pairings", len(coordinator.context.catalog))
    try:
        yield
    finally:
        coordinator.context.credentials.close()
        app.state.coordinator = None


app = FastAPI(title="Sommelier Pairing API", version="1.0.0", lifespan=lifespan)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
async def metadata(coordinator: SessionCoordinator = Depends(get_coordinator)) -> dict:
    return {
        "categories": [c.value for c in CategoryFilter],
        "total_pairings": len(coordinator.context.catalog),
        "search_placeholder": SEARCH_PLACEHOLDER,
    }


@app.get("/pairings")
async def pairings(
    q: str = "",
    category: CategoryFilter = CategoryFilter.all,
    coordinator: SessionCoordinator = Depends(get_coordinator),
) -> dict:
    results = filter_pairings(coordinator.context.catalog, q, category)
    return {
        "query": q,
        "category": category.value,
        "results": [item.model_dump(mode="json") for item in results],
    }


# ── Session endpoints ────────────────────────────────────────────────────


@app.get("/session", response_model=ViewStateSnapshot)
async def session_state(
    coordinator: SessionCoordinator = Depends(get_coordinator),
) -> ViewStateSnapshot:
    return coordinator.snapshot()


@app.post("/session/query", response_model=ViewStateSnapshot)
async def session_query(
    body: QueryRequest,
    coordinator: SessionCoordinator = Depends(get_coordinator),
) -> ViewStateSnapshot:
    return coordinator.query_changed(body.query)


@app.post("/session/category", response_model=ViewStateSnapshot)
async def session_category(
    body: CategoryRequest,
    coordinator: SessionCoordinator = Depends(get_coordinator),
) -> ViewStateSnapshot:
    return coordinator.category_selected(body.category)


@app.post("/session/back", response_model=ViewStateSnapshot)
async def session_back(
    coordinator: SessionCoordinator = Depends(get_coordinator),
) -> ViewStateSnapshot:
    return coordinator.back()


@app.post("/session/consult", response_model=ViewStateSnapshot)
async def session_consult(
    coordinator: SessionCoordinator = Depends(get_coordinator),
) -> ViewStateSnapshot:
    return await coordinator.consult_ai()


# ── Settings endpoints ───────────────────────────────────────────────────


@app.get("/settings/api-key", response_model=ApiKeyResponse)
async def api_key_status(
    coordinator: SessionCoordinator = Depends(get_coordinator),
) -> ApiKeyResponse:
    has_key = coordinator.context.credentials.has_credential()
    return ApiKeyResponse(status="set" if has_key else "missing", has_credential=has_key)


@app.post("/settings/api-key", response_model=ApiKeyResponse)
async def save_api_key(
    body: ApiKeyRequest,
    coordinator: SessionCoordinator = Depends(get_coordinator),
) -> ApiKeyResponse:
    if not coordinator.credential_saved(body.api_key):
        raise HTTPException(status_code=422, detail=coordinator.snapshot().status_message)
    return ApiKeyResponse(status="saved", has_credential=True)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("sommelier.app:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
