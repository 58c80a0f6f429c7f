"""FastAPI routes for Minions.

The router exposes the dependency core to the web client. The store and
settings live on ``app.state`` so tests can build an app around an
in-memory store.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from minions import __version__
from minions.application import DependencyManager
from minions.config import MinionsSettings, get_settings
from minions.domain.minion import (
    Dependency,
    DependencyOption,
    DependencyStatus,
    InvalidReason,
    Minion,
    ParentOption,
    ParseError,
    PartialWriteError,
    ReconcileReport,
    StoreError,
    ValidationError,
    available_dependencies,
    available_parents,
    build_relationship_graph,
    dependency_status,
    filter_options,
    search_minions,
)
from minions.infrastructure.storage import JsonTaskStore, TaskStore
from minions.interfaces.api.schemas import (
    AddDependencyRequest,
    ChangeVersionRequest,
    ReplaceDependenciesRequest,
    SetParentRequest,
)

# =============================================================================
# Dependencies
# =============================================================================


def get_store(request: Request) -> TaskStore:
    return request.app.state.store


def get_manager(request: Request) -> DependencyManager:
    settings: MinionsSettings = request.app.state.settings
    return DependencyManager(request.app.state.store, max_dependencies=settings.max_dependencies)


async def _load(store: TaskStore, minion_id: str) -> tuple[Minion, list[Minion]]:
    minions = await store.list()
    for minion in minions:
        if minion.id == minion_id:
            return minion, minions
    raise HTTPException(status_code=404, detail="Minion not found")


# =============================================================================
# Router
# =============================================================================


router = APIRouter(prefix="/api")


@router.get("/minions", response_model=list[Minion])
async def list_minions(store: TaskStore = Depends(get_store)):
    """List all minions."""
    return await store.list()


@router.get("/minions/{minion_id}", response_model=Minion)
async def get_minion(minion_id: str, store: TaskStore = Depends(get_store)):
    minion, _ = await _load(store, minion_id)
    return minion


# =============================================================================
# Dependencies
# =============================================================================


@router.get("/minions/{minion_id}/dependencies", response_model=list[DependencyStatus])
async def get_dependencies(minion_id: str, store: TaskStore = Depends(get_store)):
    """Dependencies joined with live versions and drift."""
    owner, minions = await _load(store, minion_id)
    return dependency_status(owner, minions)


@router.post("/minions/{minion_id}/dependencies", response_model=Dependency)
async def add_dependency(
    minion_id: str,
    req: AddDependencyRequest,
    manager: DependencyManager = Depends(get_manager),
):
    return await manager.add_dependency(minion_id, req.candidate_id, req.max_dependencies)


@router.put("/minions/{minion_id}/dependencies", response_model=list[Dependency])
async def replace_dependencies(
    minion_id: str,
    req: ReplaceDependenciesRequest,
    manager: DependencyManager = Depends(get_manager),
):
    """Replace the whole dependency list (bulk edit from the picker)."""
    return await manager.replace_dependencies(minion_id, req.dependencies)


@router.patch("/minions/{minion_id}/dependencies/{candidate_id}", response_model=Dependency)
async def change_version(
    minion_id: str,
    candidate_id: str,
    req: ChangeVersionRequest,
    manager: DependencyManager = Depends(get_manager),
):
    return await manager.change_version(minion_id, candidate_id, req.version)


@router.delete("/minions/{minion_id}/dependencies/{candidate_id}")
async def remove_dependency(
    minion_id: str,
    candidate_id: str,
    manager: DependencyManager = Depends(get_manager),
):
    await manager.remove_dependency(minion_id, candidate_id)
    return {"status": "removed"}


@router.get("/minions/{minion_id}/dependency-options", response_model=list[DependencyOption])
async def dependency_options(
    minion_id: str,
    search: str = "",
    store: TaskStore = Depends(get_store),
):
    """Minions the picker may offer as new dependencies."""
    owner, minions = await _load(store, minion_id)
    return filter_options(available_dependencies(minion_id, owner.dependencies, minions), search)


# =============================================================================
# Hierarchy
# =============================================================================


@router.get("/minions/{minion_id}/parent-options", response_model=list[ParentOption])
async def parent_options(
    minion_id: str,
    search: str = "",
    store: TaskStore = Depends(get_store),
):
    _, minions = await _load(store, minion_id)
    return filter_options(available_parents(minion_id, minions), search)


@router.put("/minions/{minion_id}/parent")
async def set_parent(
    minion_id: str,
    req: SetParentRequest,
    manager: DependencyManager = Depends(get_manager),
):
    await manager.set_parent(minion_id, req.parent_id)
    return {"status": "updated", "parent_id": req.parent_id}


# =============================================================================
# Graph
# =============================================================================


@router.get("/minions/{minion_id}/graph")
async def get_graph(minion_id: str, store: TaskStore = Depends(get_store)) -> dict[str, Any]:
    """Canvas nodes and edges rooted at a minion."""
    _, minions = await _load(store, minion_id)
    return build_relationship_graph(minion_id, minions).to_flow()


@router.get("/search", response_model=list[Minion])
async def search(q: str = "", store: TaskStore = Depends(get_store)):
    return search_minions(q, await store.list())


@router.post("/reconcile", response_model=ReconcileReport)
async def reconcile(manager: DependencyManager = Depends(get_manager)):
    """Rebuild dependent_on and children from the authoritative fields."""
    return await manager.reconcile()


# =============================================================================
# Error mapping
# =============================================================================


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    status = 404 if exc.reason == InvalidReason.NOT_FOUND else 400
    return JSONResponse(status_code=status, content={"detail": exc.message, "reason": exc.reason.value})


async def _parse_error(request: Request, exc: ParseError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def _partial_write_error(request: Request, exc: PartialWriteError) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={
            "detail": str(exc),
            "committed_id": exc.committed_id,
            "failed_id": exc.failed_id,
        },
    )


async def _store_error(request: Request, exc: StoreError) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "operation": exc.operation, "minion_id": exc.minion_id},
    )


def create_app(
    store: Optional[TaskStore] = None,
    settings: Optional[MinionsSettings] = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        store: Task store to serve. Defaults to the JSON store for the
            configured database key.
        settings: Settings to use. Defaults to ``get_settings()``.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Minions",
        description="Hierarchical task management with versioned dependencies",
        version=__version__,
    )
    app.state.settings = settings
    app.state.store = store or JsonTaskStore.from_settings(settings)

    # CORS for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(ParseError, _parse_error)
    app.add_exception_handler(PartialWriteError, _partial_write_error)
    app.add_exception_handler(StoreError, _store_error)

    app.include_router(router)

    @app.get("/")
    def root():
        return {"name": "Minions", "version": __version__}

    return app
