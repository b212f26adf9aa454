"""
Thin client for the Cloud Foundry Cloud Controller v2 API.

Only the handful of calls the route mapper needs are implemented:

  find_app_by_name    GET    /v2/apps?q=name:<name>
  list_app_routes     GET    /v2/apps/<app>/routes
  create_route        POST   /v2/routes
  find_route_by_host  GET    /v2/routes?q=host:<host>
  associate_route     PUT    /v2/apps/<app>/routes/<route>
  disassociate_route  DELETE /v2/apps/<app>/routes/<route>
  delete_route        DELETE /v2/routes/<route>

Every failure (HTTP error or transport error) surfaces as a
CloudControllerError. Nothing here retries; callers decide what a
failure means.
"""
import logging
from dataclasses import dataclass
from typing import Any

import requests

logger = logging.getLogger(__name__)

# CF error_code returned by POST /v2/routes when the host is already
# registered for the domain (possibly in another space or app).
ROUTE_HOST_TAKEN = "CF-RouteHostTaken"


# ------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------

class CloudControllerError(Exception):
    """
    A Cloud Controller call failed.

    status_code is 0 when there is no HTTP error status: transport errors,
    and MalformedResourceError for a 2xx body missing its resource.
    """

    def __init__(self, status_code: int, description: str, error_code: str | None = None):
        self.status_code = status_code
        self.description = description
        self.error_code = error_code
        super().__init__(f"Cloud Controller error {status_code}: {description}")


class RouteHostTakenError(CloudControllerError):
    """The requested host already exists as a route record."""


class MalformedResourceError(CloudControllerError):
    """A 2xx response did not carry the expected {metadata, entity} resource."""

    def __init__(self, description: str):
        super().__init__(0, description)


class AppNotFoundError(LookupError):
    """The app name did not resolve to exactly one application."""

    def __init__(self, appname: str):
        self.appname = appname
        super().__init__(f"App {appname} not found.")


class RouteNotFoundError(LookupError):
    """No route record exists for the host."""

    def __init__(self, host: str):
        self.host = host
        super().__init__(f"Route {host} not found.")


# ------------------------------------------------------------------
# Resources
# ------------------------------------------------------------------

@dataclass(frozen=True)
class Application:
    guid: str
    name: str


@dataclass(frozen=True)
class Route:
    guid: str
    host: str
    domain_guid: str | None = None
    space_guid: str | None = None

    @classmethod
    def from_resource(cls, resource: dict) -> "Route":
        """Build a Route from a v2 {metadata, entity} resource."""
        entity = resource.get("entity") or {}
        return cls(
            guid=_resource_guid(resource),
            host=entity.get("host", ""),
            domain_guid=entity.get("domain_guid"),
            space_guid=entity.get("space_guid"),
        )


# ------------------------------------------------------------------
# Client
# ------------------------------------------------------------------

class CloudControllerClient:
    """
    Synchronous Cloud Controller client bound to one endpoint and token.

    'token' is the structured credential returned by the UAA login:
    {"token_type": "bearer", "access_token": "...", "refresh_token": "..."}.
    """

    def __init__(
        self,
        endpoint: str,
        token: dict[str, Any],
        timeout_sec: float = 30.0,
        session: requests.Session | None = None,
    ):
        self.endpoint = endpoint.strip().rstrip("/")
        self.timeout_sec = timeout_sec
        self._session = session or requests.Session()
        token_type = token.get("token_type") or "bearer"
        self._session.headers.update({
            "Authorization": f"{token_type} {token.get('access_token', '')}",
            "Accept": "application/json",
        })

    # --- applications ---

    def find_app_by_name(self, name: str) -> Application:
        """Resolve an app by name. Raises AppNotFoundError unless exactly one matches."""
        body = self._request("GET", "/v2/apps", params={"q": f"name:{name}"})
        resources = body.get("resources", [])
        if len(resources) != 1:
            raise AppNotFoundError(name)
        resource = resources[0]
        entity = resource.get("entity") or {}
        return Application(guid=_resource_guid(resource), name=entity.get("name", name))

    def list_app_routes(self, app_guid: str) -> list[Route]:
        """All routes mapped to the app, following next_url across pages."""
        routes: list[Route] = []
        path: str | None = f"/v2/apps/{app_guid}/routes"
        while path:
            body = self._request("GET", path)
            routes.extend(Route.from_resource(r) for r in body.get("resources", []))
            path = body.get("next_url")
        return routes

    def associate_route(self, app_guid: str, route_guid: str) -> None:
        self._request("PUT", f"/v2/apps/{app_guid}/routes/{route_guid}")

    def disassociate_route(self, app_guid: str, route_guid: str) -> None:
        """Remove the app↔route mapping only; the route record stays."""
        self._request("DELETE", f"/v2/apps/{app_guid}/routes/{route_guid}")

    # --- routes ---

    def create_route(self, domain_guid: str, space_guid: str, host: str) -> Route:
        """
        Create a route for 'host'.

        Raises:
            RouteHostTakenError: the host already exists for the domain
            CloudControllerError: any other failure
        """
        body = self._request(
            "POST", "/v2/routes",
            json={"domain_guid": domain_guid, "space_guid": space_guid, "host": host},
        )
        return Route.from_resource(body)

    def find_route_by_host(self, host: str) -> Route:
        body = self._request("GET", "/v2/routes", params={"q": f"host:{host}"})
        resources = body.get("resources", [])
        if not resources:
            raise RouteNotFoundError(host)
        return Route.from_resource(resources[0])

    def delete_route(self, route_guid: str) -> None:
        self._request("DELETE", f"/v2/routes/{route_guid}")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs) -> dict:
        """Send one request and return the decoded JSON body ({} when empty)."""
        url = self.endpoint + path
        logger.debug("%s %s", method, url)
        try:
            resp = self._session.request(method, url, timeout=self.timeout_sec, **kwargs)
        except requests.RequestException as e:
            raise CloudControllerError(0, f"{method} {path} failed: {e}") from e

        if resp.status_code >= 400:
            raise _error_from_response(resp)

        # 204 and some 201s come back with an empty body.
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            raise CloudControllerError(
                resp.status_code, f"{method} {path} returned a non-JSON body"
            ) from e


def _error_from_response(resp: requests.Response) -> CloudControllerError:
    """Map a CF v2 error body {code, description, error_code} to an exception."""
    description = resp.text[:200] or f"HTTP {resp.status_code}"
    error_code = None
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        description = payload.get("description", description)
        error_code = payload.get("error_code")

    if error_code == ROUTE_HOST_TAKEN:
        return RouteHostTakenError(resp.status_code, description, error_code)
    return CloudControllerError(resp.status_code, description, error_code)


def _resource_guid(resource: dict) -> str:
    """metadata.guid of a v2 resource. Raises MalformedResourceError when absent."""
    guid = (resource.get("metadata") or {}).get("guid")
    if not guid:
        raise MalformedResourceError("response carried no resource guid")
    return guid
