"""
Health routes — GET /health.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from movies_graph.gateway.dependencies import get_handler
from movies_graph.gateway.errors import error_response
from movies_graph.shared.database import Neo4jHandler
from movies_graph.shared.logging import setup_logging

logger = setup_logging("gateway.routes.health", level="INFO")

router = APIRouter()


@router.get("/health", response_class=PlainTextResponse)
async def health(handler: Neo4jHandler = Depends(get_handler)):
    """Ping Neo4j with ``RETURN 1``.

    Useful for load balancers and uptime monitors.
    """
    if await handler.verify():
        return PlainTextResponse("ok")
    logger.warning("Health check failed: Neo4j did not answer the ping")
    return error_response(503)
