"""
The three admin operations: list, map, unmap.

A map or unmap call is one reconciliation pass:

    validate → read live routes (once) → diff → mutate → report

Validation errors and app lookup failures abort the whole pass before
anything is changed. After that point every per-route failure ends up in
the returned status list instead of being raised.

Re-running a pass is safe: hosts already mapped are skipped by the diff,
and a create that hits an existing route record falls back to mapping it.
"""
import logging
from collections.abc import Callable

import config
from cloudcontroller.client import CloudControllerClient
from models import (
    ListRequest, ListResponse,
    MapRequest, UnmapRequest,
    ReconcileResponse,
)
from reconcile.differ import plan_routes
from reconcile.executor import LoggingObserver, MutationExecutor, MutationObserver
from reconcile.reporter import report_map, report_unmap
from reconcile.validator import validate_list, validate_map, validate_unmap

logger = logging.getLogger(__name__)

# (endpoint, token) -> client. Tests swap in a stub.
ClientFactory = Callable[[str, dict], object]


def default_client_factory(endpoint: str, token: dict) -> CloudControllerClient:
    return CloudControllerClient(endpoint, token, timeout_sec=config.HTTP_TIMEOUT_SEC)


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------

def list_routes(req: ListRequest, client_factory: ClientFactory | None = None) -> ListResponse:
    """Host names of every route currently mapped to the app."""
    cmd = validate_list(with_defaults(req))
    client = (client_factory or default_client_factory)(cmd.endpoint, cmd.token)
    app = client.find_app_by_name(cmd.appname)
    return ListResponse(routes=[r.host for r in client.list_app_routes(app.guid)])


def map_routes(
    req: MapRequest,
    client_factory: ClientFactory | None = None,
    observer: MutationObserver | None = None,
) -> ReconcileResponse:
    """
    Map the requested '<org>-<space>' hosts onto the app.

    New routes are created in the domain and space of the app's own route.
    Hosts that are already mapped are reported as ok without any call.
    """
    cmd = validate_map(with_defaults(req))
    client = (client_factory or default_client_factory)(cmd.endpoint, cmd.token)
    app = client.find_app_by_name(cmd.appname)
    live = client.list_app_routes(app.guid)

    observer = observer or LoggingObserver()
    plan = plan_routes(live, cmd.appname, requested_additions=cmd.hosts, observer=observer)
    if plan.routes_to_add and not plan.can_create:
        logger.warning("app %s has no route named %s; new routes cannot be created",
                       cmd.appname, cmd.appname)

    executor = MutationExecutor(client, app.guid, observer)
    results = executor.run_add(plan.routes_to_add, plan.domain_guid, plan.space_guid)
    return report_map(results, cmd.hosts, observer)


def unmap_routes(
    req: UnmapRequest,
    client_factory: ClientFactory | None = None,
    observer: MutationObserver | None = None,
) -> ReconcileResponse:
    """
    Unmap the requested hosts from the app; delete them too with deleteAfterUnmap.

    Hosts that are not mapped to the app are reported as failures.
    """
    cmd = validate_unmap(with_defaults(req))
    client = (client_factory or default_client_factory)(cmd.endpoint, cmd.token)
    app = client.find_app_by_name(cmd.appname)
    live = client.list_app_routes(app.guid)

    observer = observer or LoggingObserver()
    plan = plan_routes(live, cmd.appname, requested_deletions=cmd.hosts, observer=observer)

    executor = MutationExecutor(client, app.guid, observer)
    results = executor.run_delete(plan.routes_to_delete, cmd.delete_after_unmap)
    return report_unmap(results, cmd.hosts, observer)


def with_defaults(req: ListRequest) -> ListRequest:
    """Fill a missing endpoint/token from the service configuration."""
    update = {}
    if not req.endpoint and config.CF_ENDPOINT:
        update["endpoint"] = config.CF_ENDPOINT
    if not req.token and config.CF_TOKEN:
        update["token"] = config.CF_TOKEN
    return req.model_copy(update=update) if update else req
