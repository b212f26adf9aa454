"""
Input validation for the list / map / unmap operations.

Each validate_* function turns a request model into a normalized command
or raises ValidationError. Checks run in a fixed order and the first
failure wins. No remote call may happen before validation succeeds, so
the engine always validates first.
"""
import re
from dataclasses import dataclass
from typing import Any

from models import ListRequest, MapRequest, UnmapRequest

# A route segment (org or space) is plain alphanumerics.
_ROUTE_SEGMENT = re.compile(r"[0-9A-Za-z]+")

# DNS label limit for the derived '<org>-<space>' host.
MAX_HOST_LENGTH = 63


class ValidationError(ValueError):
    """The request is malformed. The message is returned to the caller verbatim."""
    pass


@dataclass(frozen=True)
class ListCommand:
    endpoint: str
    token: dict[str, Any]
    appname: str


@dataclass(frozen=True)
class MapCommand(ListCommand):
    hosts: tuple[str, ...] = ()


@dataclass(frozen=True)
class UnmapCommand(ListCommand):
    hosts: tuple[str, ...] = ()
    delete_after_unmap: bool = False


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------

def validate_list(req: ListRequest) -> ListCommand:
    return ListCommand(**_validate_basic(req))


def validate_map(req: MapRequest) -> MapCommand:
    """
    Validate a map request.

    Explicit 'routes' entries come first, then the 'org'/'space' pair.
    Entries with a bad segment or an over-long host are dropped without
    an error; only an empty result is an error.
    """
    basic = _validate_basic(req)

    org, space = _present(req.org), _present(req.space)
    if bool(org) != bool(space):
        raise ValidationError("org and space must both be defined if either is defined")
    if not (org and space) and req.routes is None:
        raise ValidationError("must specify org/space or routes")

    pairs = [(r.org, r.space) for r in req.routes or []]
    if org and space:
        pairs.append((req.org, req.space))

    hosts = _unique(
        f"{o}-{s}" for o, s in pairs
        if _valid_segment(o) and _valid_segment(s)
    )
    hosts = tuple(h for h in hosts if len(h) <= MAX_HOST_LENGTH)
    if not hosts:
        raise ValidationError("no valid route names to map")

    return MapCommand(**basic, hosts=hosts)


def validate_unmap(req: UnmapRequest) -> UnmapCommand:
    """Validate an unmap request. Host names are trimmed; blanks and duplicates collapse."""
    basic = _validate_basic(req)

    hosts = _unique(r.strip() for r in req.routes or [])
    hosts = tuple(h for h in hosts if h)
    if not hosts:
        raise ValidationError("no route names to unmap")

    return UnmapCommand(**basic, hosts=hosts, delete_after_unmap=req.deleteAfterUnmap is True)


# ------------------------------------------------------------------
# Internal helpers
# ------------------------------------------------------------------

def _validate_basic(req: ListRequest) -> dict[str, Any]:
    """Checks shared by every operation: endpoint, token, appname (in that order)."""
    if not _present(req.endpoint):
        raise ValidationError("endpoint not defined")
    if not req.token or not req.token.get("access_token"):
        raise ValidationError("token not defined")
    if not _present(req.appname):
        raise ValidationError("appname not defined")
    return {"endpoint": req.endpoint.strip(), "token": req.token, "appname": req.appname.strip()}


def _present(value: str | None) -> str | None:
    """Return the stripped string, or None for missing / whitespace-only values."""
    if value is None or not value.strip():
        return None
    return value.strip()


def _valid_segment(value: str | None) -> bool:
    return value is not None and _ROUTE_SEGMENT.fullmatch(value) is not None


def _unique(items) -> tuple[str, ...]:
    """De-duplicate while keeping first-seen order."""
    return tuple(dict.fromkeys(items))
