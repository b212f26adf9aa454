"""
FastAPI route handlers for the route mapper service.

Routes:
  POST /routes/list    host names currently mapped to an app
  POST /routes/map     map org/space routes onto an app (creating them if needed)
  POST /routes/unmap   unmap routes from an app (optionally deleting them)
  GET  /routes/health  liveness probe

Whole-request failures become HTTP errors; per-route failures are part of
the 200 response body.
"""
from collections.abc import Callable

from fastapi import APIRouter, HTTPException

from cloudcontroller.client import AppNotFoundError, CloudControllerError
from models import (
    ListRequest, ListResponse,
    MapRequest, UnmapRequest,
    ReconcileResponse,
)
from reconcile import engine
from reconcile.validator import ValidationError

router = APIRouter(prefix="/routes")


def _run(operation: Callable, req):
    """Call an engine operation and translate pass-level failures to HTTP errors."""
    try:
        return operation(req)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AppNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CloudControllerError as e:
        raise HTTPException(status_code=502, detail=e.description)


# ------------------------------------------------------------------
# Operations
# ------------------------------------------------------------------

@router.post("/list", response_model=ListResponse)
def handle_list(req: ListRequest) -> ListResponse:
    """List the host names of every route mapped to 'appname'."""
    return _run(engine.list_routes, req)


@router.post("/map", response_model=ReconcileResponse)
def handle_map(req: MapRequest) -> ReconcileResponse:
    """
    Map routes onto the app.

    Routes that already exist are reused; routes already mapped to the
    app count as successes without any Cloud Controller call.
    """
    return _run(engine.map_routes, req)


@router.post("/unmap", response_model=ReconcileResponse)
def handle_unmap(req: UnmapRequest) -> ReconcileResponse:
    """
    Unmap routes from the app.

    The route record is kept unless deleteAfterUnmap is true. Routes not
    currently mapped to the app are reported with ok=false.
    """
    return _run(engine.unmap_routes, req)


# ------------------------------------------------------------------
# Health / liveness probe
# ------------------------------------------------------------------

@router.get("/health")
def health() -> dict:
    """Simple liveness probe."""
    return {"status": "ok"}
