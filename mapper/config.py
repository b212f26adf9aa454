"""
Service defaults, read once from the environment at import time.

A deployment binds its Cloud Foundry endpoint and token here so that
callers only have to pass 'appname' and the routes. Anything a request
provides explicitly wins over these defaults.
"""
import json
import logging
import os

logger = logging.getLogger(__name__)


def _load_token(raw: str | None) -> dict | None:
    """Parse MAPPER_CF_TOKEN. Invalid or non-object JSON is ignored."""
    if not raw:
        return None
    try:
        token = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("MAPPER_CF_TOKEN is not valid JSON; ignoring it")
        return None
    if not isinstance(token, dict):
        logger.warning("MAPPER_CF_TOKEN must be a JSON object; ignoring it")
        return None
    return token


CF_ENDPOINT: str | None = os.environ.get("MAPPER_CF_ENDPOINT") or None
CF_TOKEN: dict | None = _load_token(os.environ.get("MAPPER_CF_TOKEN"))
HTTP_TIMEOUT_SEC = float(os.environ.get("MAPPER_HTTP_TIMEOUT_SEC", "30"))
LOG_LEVEL = os.environ.get("MAPPER_LOG_LEVEL", "INFO").upper()
