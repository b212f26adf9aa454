"""
Diff requested routes against the app's live routes.

One pass over the live route list produces everything the executor needs:
  - the domain and space GUIDs, taken from the app's own route (the route
    whose host equals the app name); new routes are created alongside it
  - the hosts that still have to be added (requested, not yet live)
  - the live route records scheduled for unmapping/deletion

The live list is a snapshot read once per pass; nothing is re-fetched.
"""
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from cloudcontroller.client import Route
from reconcile.executor import MutationObserver


@dataclass
class RoutePlan:
    domain_guid: str | None = None
    space_guid: str | None = None
    routes_to_add: list[str] = field(default_factory=list)
    routes_to_delete: list[Route] = field(default_factory=list)

    @property
    def can_create(self) -> bool:
        """False when the app has no route named after itself to copy domain/space from."""
        return self.domain_guid is not None and self.space_guid is not None


def plan_routes(
    live_routes: Sequence[Route],
    appname: str,
    requested_additions: Iterable[str] = (),
    requested_deletions: Iterable[str] = (),
    observer: MutationObserver | None = None,
) -> RoutePlan:
    """
    Compute the RoutePlan for one pass.

    Membership is by exact host match against the app's own route list.
    A host that exists only under another app is not seen here and will
    go through the create path, where the host-taken conflict is absorbed.
    """
    # dict as an ordered set: keeps request order for the executor.
    pending = dict.fromkeys(requested_additions)
    deletions = set(requested_deletions)
    plan = RoutePlan()
    observer = observer or MutationObserver()

    for route in live_routes:
        if route.host == appname:
            plan.domain_guid = route.domain_guid
            plan.space_guid = route.space_guid

        if route.host in pending:
            observer.skipped(route.host)
            del pending[route.host]

        if route.host in deletions:
            observer.scheduled(route.host)
            plan.routes_to_delete.append(route)
            # One record per host, so each host is reported once.
            deletions.discard(route.host)

    plan.routes_to_add = list(pending)
    return plan
