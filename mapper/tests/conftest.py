"""
Shared fixtures: an in-memory Cloud Controller stub that records calls.

The stub keeps route records and app↔route mappings separately, so
"unmap" and "delete" have observably different effects, and a host can
exist as a route record without being mapped to the app.
"""
import pytest

import config
from cloudcontroller.client import (
    ROUTE_HOST_TAKEN,
    AppNotFoundError,
    Application,
    CloudControllerError,
    Route,
    RouteHostTakenError,
    RouteNotFoundError,
)

ENDPOINT = "https://api.example.test"
TOKEN = {"token_type": "bearer", "access_token": "secret", "refresh_token": "r"}
CREDS = {"endpoint": ENDPOINT, "token": TOKEN, "appname": "myapp"}

APP_GUID = "app-1"
DOMAIN = "domain-D"
SPACE = "space-S"


class StubCloudController:

    def __init__(self, routes=None, appname="myapp", app_guid=APP_GUID):
        self.apps = {appname: Application(guid=app_guid, name=appname)}
        self.routes = {r.guid: r for r in routes or []}
        self.mapped = {app_guid: [r.guid for r in routes or []]}
        self.calls = []
        self.fail = set()     # {(method, host)} that raise a 500
        self._seq = 0

    # --- helpers for assertions ---

    def count(self, method: str) -> int:
        return sum(1 for c in self.calls if c[0] == method)

    def hosts(self, method: str) -> list[str]:
        return [c[1] for c in self.calls if c[0] == method]

    def mapped_hosts(self, app_guid=APP_GUID) -> list[str]:
        return [self.routes[g].host for g in self.mapped.get(app_guid, [])]

    def add_unmapped_route(self, host: str) -> Route:
        """A route record that exists but is not mapped to the app."""
        route = Route(guid=f"other-{host}", host=host, domain_guid=DOMAIN, space_guid="space-other")
        self.routes[route.guid] = route
        return route

    def _check(self, method: str, host: str):
        self.calls.append((method, host))
        if (method, host) in self.fail:
            raise CloudControllerError(500, f"{method} {host} failed")

    # --- client surface ---

    def find_app_by_name(self, name):
        self.calls.append(("find_app_by_name", name))
        if name not in self.apps:
            raise AppNotFoundError(name)
        return self.apps[name]

    def list_app_routes(self, app_guid):
        self.calls.append(("list_app_routes", app_guid))
        return [self.routes[g] for g in self.mapped.get(app_guid, [])]

    def create_route(self, domain_guid, space_guid, host):
        self._check("create_route", host)
        if any(r.host == host for r in self.routes.values()):
            raise RouteHostTakenError(400, f"The host is taken: {host}", ROUTE_HOST_TAKEN)
        self._seq += 1
        route = Route(guid=f"new-{self._seq}", host=host, domain_guid=domain_guid, space_guid=space_guid)
        self.routes[route.guid] = route
        return route

    def find_route_by_host(self, host):
        self._check("find_route_by_host", host)
        for route in self.routes.values():
            if route.host == host:
                return route
        raise RouteNotFoundError(host)

    def associate_route(self, app_guid, route_guid):
        self._check("associate_route", self.routes[route_guid].host)
        self.mapped.setdefault(app_guid, []).append(route_guid)

    def disassociate_route(self, app_guid, route_guid):
        self._check("disassociate_route", self.routes[route_guid].host)
        self.mapped[app_guid].remove(route_guid)

    def delete_route(self, route_guid):
        self._check("delete_route", self.routes[route_guid].host)
        route = self.routes.pop(route_guid)
        for guids in self.mapped.values():
            if route.guid in guids:
                guids.remove(route.guid)


# ------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------

@pytest.fixture(autouse=True)
def no_configured_defaults(monkeypatch):
    """Keep MAPPER_CF_* from the developer's environment out of the tests."""
    monkeypatch.setattr(config, "CF_ENDPOINT", None)
    monkeypatch.setattr(config, "CF_TOKEN", None)


@pytest.fixture
def live_routes():
    """The app's own route plus one extra: myapp (D/S) and myapp-prod."""
    return [
        Route(guid="r-myapp", host="myapp", domain_guid=DOMAIN, space_guid=SPACE),
        Route(guid="r-prod", host="myapp-prod", domain_guid=DOMAIN, space_guid=SPACE),
    ]


@pytest.fixture
def stub(live_routes):
    return StubCloudController(live_routes)


@pytest.fixture
def factory(stub):
    """A client factory that always hands out the stub."""
    return lambda endpoint, token: stub
