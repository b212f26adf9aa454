"""
Request and response models for the route mapper service.

These Pydantic models define the HTTP contract for the three admin
operations (list, map, unmap). Required fields are deliberately optional
at this layer: the input validator (reconcile/validator.py) owns the
"not defined" errors so every caller sees the same messages, whether the
request came over HTTP or from another Python caller.
"""
from typing import Any, Optional

from pydantic import BaseModel, StrictBool


class RouteSpec(BaseModel):
    """One org/space pair. The candidate host is '<org>-<space>'."""
    org: Optional[str] = None
    space: Optional[str] = None


class ListRequest(BaseModel):
    endpoint: Optional[str] = None            # CF API endpoint, e.g. https://api.ng.bluemix.net
    token: Optional[dict[str, Any]] = None    # {"token_type", "access_token", "refresh_token"}
    appname: Optional[str] = None             # CF app whose routes are managed


class MapRequest(ListRequest):
    """
    Map routes onto the app, creating them when needed.

    Either 'org' and 'space' together, or 'routes', or both.
    """
    org: Optional[str] = None
    space: Optional[str] = None
    routes: Optional[list[RouteSpec]] = None


class UnmapRequest(ListRequest):
    """
    Unmap routes (host names) from the app.

    The route record is only deleted when 'deleteAfterUnmap' is exactly true;
    otherwise just the app↔route association is removed.
    """
    routes: Optional[list[str]] = None
    deleteAfterUnmap: StrictBool = False   # JSON true only; "yes", 1, "on" are rejected


class ListResponse(BaseModel):
    routes: list[str]


class RouteStatus(BaseModel):
    """Outcome for one requested route."""
    route: str
    ok: bool


class ReconcileResponse(BaseModel):
    """
    One entry per requested route, each exactly once.

    Routes that were actually mutated come first (in processing order),
    followed by routes that never needed a call.
    """
    status: list[RouteStatus]

    def failed(self) -> list[str]:
        return [s.route for s in self.status if not s.ok]
