"""
Build the final per-route report for a map or unmap pass.

The executor only reports on routes it actually touched. Every requested
host it never saw (a "leftover") is appended here, with opposite meaning
for the two directions:

  map    leftover means the route was already mapped, ok=True
  unmap  leftover means no live route matched, ok=False
"""
from collections.abc import Iterable, Sequence

from models import ReconcileResponse, RouteStatus
from reconcile.executor import MutationObserver


def report_map(
    results: Sequence[RouteStatus],
    requested: Iterable[str],
    observer: MutationObserver | None = None,
) -> ReconcileResponse:
    return _report(results, requested, leftover_ok=True, observer=observer)


def report_unmap(
    results: Sequence[RouteStatus],
    requested: Iterable[str],
    observer: MutationObserver | None = None,
) -> ReconcileResponse:
    return _report(results, requested, leftover_ok=False, observer=observer)


def _report(
    results: Sequence[RouteStatus],
    requested: Iterable[str],
    leftover_ok: bool,
    observer: MutationObserver | None,
) -> ReconcileResponse:
    observer = observer or MutationObserver()
    status = list(results)
    seen = {s.route for s in status}
    for host in dict.fromkeys(requested):
        if host in seen:
            continue
        leftover = RouteStatus(route=host, ok=leftover_ok)
        observer.leftover(leftover)
        status.append(leftover)
    return ReconcileResponse(status=status)
