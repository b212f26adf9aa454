"""
Entry point for the route mapper service.

Start with:
    uvicorn main:app --port 8002

Each request is one administrative reconciliation pass against a single
Cloud Foundry app. Deploy it with MAPPER_CF_ENDPOINT / MAPPER_CF_TOKEN
set so callers do not have to send credentials (see config.py).
"""
import logging

from fastapi import FastAPI

import config
from api.routes import router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Route Mapper",
    description="Maps and unmaps Cloud Foundry routes for an app.",
    version="0.1.0",
)

app.include_router(router)
