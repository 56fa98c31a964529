"""
FastAPI dependencies — per-request access to shared resources.

The Neo4j handler and the settings live on ``app.state`` (set up by the
lifespan); services built here are cheap and created per request.
"""

from fastapi import Request

from movies_graph.browse import BrowseService, GraphStore
from movies_graph.gateway.config import GatewaySettings
from movies_graph.movies import MovieRepository
from movies_graph.shared.database import Neo4jHandler


def get_settings(request: Request) -> GatewaySettings:
    return request.app.state.settings


def get_handler(request: Request) -> Neo4jHandler:
    return request.app.state.neo4j_handler


def get_browse_service(request: Request) -> BrowseService:
    return BrowseService(GraphStore(get_handler(request)))


def get_movie_repository(request: Request) -> MovieRepository:
    return MovieRepository(get_handler(request))
