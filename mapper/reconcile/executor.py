"""
Sequential route mutation with per-route failure isolation.

Routes are processed strictly one after another: each route's complete
sequence (create, conflict recovery, associate / unassociate, delete)
finishes before the next one starts. The Cloud Controller is a shared,
rate-limited API and there is no retry layer, so one-at-a-time is the
throttle.

A failure is recorded as ok=False for that route and processing moves
on. Nothing raised by the client escapes run_add / run_delete.

Progress reporting goes through a MutationObserver; the default one
writes to the module logger.
"""
import logging
from collections.abc import Sequence

from cloudcontroller.client import Route, RouteHostTakenError
from models import RouteStatus

logger = logging.getLogger(__name__)


class NoRouteScopeError(Exception):
    """A route cannot be created: the app has no route named after itself to take domain and space from."""

    def __init__(self, host: str):
        self.host = host
        super().__init__(f"cannot create {host}: no domain and space for new routes")


# ------------------------------------------------------------------
# Observers
# ------------------------------------------------------------------

class MutationObserver:
    """Hooks called during a pass (differ, executor, reporter). All no-ops by default."""

    def skipped(self, host: str) -> None:
        """A requested addition is already mapped to the app."""

    def scheduled(self, host: str) -> None:
        """A live route was selected for unmapping."""

    def started(self, action: str, host: str) -> None:
        pass

    def recovered(self, host: str) -> None:
        pass

    def failed(self, host: str, error: Exception) -> None:
        pass

    def finished(self, status: RouteStatus) -> None:
        pass

    def leftover(self, status: RouteStatus) -> None:
        """A requested route that never reached the executor."""


class LoggingObserver(MutationObserver):

    def __init__(self, log: logging.Logger = logger):
        self.log = log

    def skipped(self, host: str) -> None:
        self.log.info("not adding route because it already exists: %s", host)

    def scheduled(self, host: str) -> None:
        self.log.info("scheduling route for unmap: %s", host)

    def started(self, action: str, host: str) -> None:
        self.log.info("%s: %s", action, host)

    def recovered(self, host: str) -> None:
        self.log.info("route already exists, associating only: %s", host)

    def failed(self, host: str, error: Exception) -> None:
        self.log.warning("error processing %s: %s", host, error)

    def finished(self, status: RouteStatus) -> None:
        self.log.info("%s %s", "✔" if status.ok else "✖", status.route)

    def leftover(self, status: RouteStatus) -> None:
        self.log.info("✦ %s (%s)", status.route, "already mapped" if status.ok else "not mapped")


# ------------------------------------------------------------------
# Executor
# ------------------------------------------------------------------

class MutationExecutor:
    """
    Applies a RoutePlan for one app through a Cloud Controller client.

    'client' needs create_route, find_route_by_host, associate_route,
    disassociate_route and delete_route (see cloudcontroller/client.py).
    """

    def __init__(self, client, app_guid: str, observer: MutationObserver | None = None):
        self.client = client
        self.app_guid = app_guid
        self.observer = observer or MutationObserver()

    def run_add(
        self,
        hosts: Sequence[str],
        domain_guid: str | None,
        space_guid: str | None,
    ) -> list[RouteStatus]:
        """Create (or reuse) and map each host. Returns results in processing order."""
        results = []
        for host in hosts:
            self.observer.started("adding", host)
            try:
                route = self._create_or_reuse(host, domain_guid, space_guid)
                self.client.associate_route(self.app_guid, route.guid)
                ok = True
            except Exception as e:
                self.observer.failed(host, e)
                ok = False
            results.append(self._record(host, ok))
        return results

    def run_delete(self, routes: Sequence[Route], delete_after_unmap: bool = False) -> list[RouteStatus]:
        """
        Unmap each live route from the app.

        With delete_after_unmap the route record itself is deleted.
        Otherwise only the app↔route association is removed, since the
        route may still be mapped to other apps.
        """
        results = []
        for route in routes:
            self.observer.started("deleting" if delete_after_unmap else "unmapping", route.host)
            try:
                if delete_after_unmap:
                    self.client.delete_route(route.guid)
                else:
                    self.client.disassociate_route(self.app_guid, route.guid)
                ok = True
            except Exception as e:
                self.observer.failed(route.host, e)
                ok = False
            results.append(self._record(route.host, ok))
        return results

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _create_or_reuse(self, host: str, domain_guid: str | None, space_guid: str | None) -> Route:
        """
        Create the route, or look up the existing record if the host is taken.

        Raises NoRouteScopeError without a domain and space, otherwise
        whatever the client raises.
        """
        if domain_guid is None or space_guid is None:
            raise NoRouteScopeError(host)
        try:
            return self.client.create_route(domain_guid, space_guid, host)
        except RouteHostTakenError:
            self.observer.recovered(host)
            return self.client.find_route_by_host(host)

    def _record(self, host: str, ok: bool) -> RouteStatus:
        status = RouteStatus(route=host, ok=ok)
        self.observer.finished(status)
        return status
