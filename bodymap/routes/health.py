"""
Health check endpoint.

Used by:
  - Docker HEALTHCHECK instruction
  - Load balancers / orchestrators
  - Front-end to check API connectivity

Returns status + DB connectivity so callers can distinguish between
"API down" and "API up but DB unreachable". The pure body-map endpoints
keep working without a database.
"""

import logging

from fastapi import APIRouter
from pydantic import BaseModel

from bodymap.core import database as db_module
from bodymap.core.config import settings
from bodymap.services.region_catalog import REGIONS

logger = logging.getLogger(__name__)
router = APIRouter()


class HealthResponse(BaseModel):
    status: str  # Always "ok" if the API process is alive
    version: str
    database: str  # "connected" | "disconnected"
    environment: str
    regions: int  # size of the loaded region catalog


@router.get("", response_model=HealthResponse, summary="API health check")
async def health_check() -> HealthResponse:
    """Liveness of the API and its database connection."""
    db_status = "disconnected"
    try:
        # Access via module reference so tests can patch db_module.db_client
        if db_module.db_client.client is not None:
            await db_module.db_client.client.admin.command("ping")
            db_status = "connected"
    except Exception as exc:
        logger.warning("DB ping failed: %s", exc)

    return HealthResponse(
        status="ok",
        version="0.1.0",
        database=db_status,
        environment=settings.environment,
        regions=len(REGIONS),
    )
