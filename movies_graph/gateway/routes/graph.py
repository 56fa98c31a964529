"""
Graph routes — GET /graph.

Filtered sub-sample of the movies graph as compact node/link arrays,
ready for a force-directed renderer.
"""

import asyncio
from typing import Any

from fastapi import APIRouter, Depends, Query
from langfuse import observe
from pydantic import BaseModel, Field

from movies_graph.browse import BrowseParams, BrowseService
from movies_graph.gateway.config import GatewaySettings
from movies_graph.gateway.dependencies import get_browse_service, get_settings
from movies_graph.shared.exceptions import RequestTimeoutError
from movies_graph.shared.logging import setup_logging

logger = setup_logging("gateway.routes.graph", level="INFO")

router = APIRouter()


# ─── Response Models ────────────────────────────────────────


class NodeOut(BaseModel):
    title: str = Field(..., description="Display title (movie title, person name or #id)")
    label: str = Field(..., description="movie, person or node")
    props: dict[str, Any] = Field(default_factory=dict, description="All node properties")


class LinkOut(BaseModel):
    source: int = Field(..., description="Index of the source node in `nodes`")
    target: int = Field(..., description="Index of the target node in `nodes`")
    rel: str = Field(..., description="Relation type")


class BrowseResponse(BaseModel):
    """Response model for GET /graph."""

    nodes: list[NodeOut]
    links: list[LinkOut]


# ─── GET /graph ─────────────────────────────────────────────


@router.get("/graph", response_model=BrowseResponse)
@observe(name="browse_graph", as_type="span")
async def browse_graph(
    limit: str | None = Query(None, description="Max number of edges (1..1000, default 200)"),
    rel: str | None = Query(None, description="CSV of relation types; empty = all"),
    root: str | None = Query(None, description="Root node (Movie.title or Person.name)"),
    depth: str | None = Query(None, description="Hops from root (0..6); needs root"),
    node_incl: str | None = Query(None, description="CSV of node labels to include"),
    node_excl: str | None = Query(None, description="CSV of node labels to exclude"),
    released_gte: str | None = Query(None, description="Minimum release year (inclusive)"),
    released_lte: str | None = Query(None, description="Maximum release year (inclusive)"),
    service: BrowseService = Depends(get_browse_service),
    settings: GatewaySettings = Depends(get_settings),
) -> dict[str, Any]:
    """Graph with server-side filters: relation types, depth, labels and release year.

    Without ``root`` (or with ``depth=0``) every directed edge is scanned.
    With a root and ``depth >= 1`` the walk follows relations in both
    directions up to ``depth`` hops from the root.
    """
    params = BrowseParams(
        limit=limit,
        rel=rel,
        root=root,
        depth=depth,
        node_incl=node_incl,
        node_excl=node_excl,
        released_gte=released_gte,
        released_lte=released_lte,
    )
    try:
        result = await asyncio.wait_for(
            service.browse(params), timeout=settings.request_timeout_secs
        )
    except asyncio.TimeoutError:
        raise RequestTimeoutError(
            f"browse exceeded {settings.request_timeout_secs}s"
        ) from None
    return result.to_dict()
