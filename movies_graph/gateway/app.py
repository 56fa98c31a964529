"""
FastAPI Gateway — HTTP API layer.

External interface of the movies graph service: graph browsing, movie
detail, voting and search over a shared Neo4j driver.

Run as:  python -m movies_graph.gateway.app
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import RedirectResponse

from movies_graph import __version__
from movies_graph.gateway.config import GatewaySettings
from movies_graph.gateway.errors import register_error_handlers
from movies_graph.gateway.middleware import (
    ConcurrencyLimitMiddleware,
    RequestIdMiddleware,
    SecurityHeadersMiddleware,
    UnhandledErrorMiddleware,
)
from movies_graph.gateway.routes import graph, health, movies
from movies_graph.shared.database import Neo4jHandler
from movies_graph.shared.exceptions import StoreError
from movies_graph.shared.logging import setup_logging
from movies_graph.shared.observability import (
    LangfuseMiddleware,
    init_langfuse,
    is_langfuse_enabled,
    shutdown_langfuse,
)

# Global settings
settings = GatewaySettings()

logger = setup_logging("gateway.app", level=settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for the FastAPI app.

    Connects the Neo4j handler and warms it up on startup,
    closes it on shutdown.
    """
    logger.info("Starting movies graph gateway")

    init_langfuse()
    if is_langfuse_enabled():
        logger.info("Langfuse observability enabled")
    else:
        logger.info("Langfuse observability disabled")

    handler = Neo4jHandler(app.state.settings)
    app.state.neo4j_handler = handler
    try:
        await handler.connect()
    except StoreError as e:
        # Requests retry the connection lazily.
        logger.error(f"Neo4j unavailable at startup: {e}")
    else:
        if not await handler.verify():
            logger.error("Warmup query failed")

    logger.info("Gateway initialized successfully")

    yield

    logger.info("Shutting down movies graph gateway")
    await handler.close()
    shutdown_langfuse()


def create_app(app_settings: GatewaySettings | None = None) -> FastAPI:
    """Build the FastAPI application with its middleware stack and routes."""
    app_settings = app_settings or settings

    app = FastAPI(
        title="Movies API",
        description="Movies graph over Neo4j: browse, detail, vote and search",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    register_error_handlers(app)

    # Innermost first: Starlette wraps each new middleware around the previous ones.
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(LangfuseMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=app_settings.gzip_min_size)
    app.add_middleware(
        ConcurrencyLimitMiddleware, max_concurrency=app_settings.max_concurrency
    )

    app.include_router(graph.router, tags=["movies"])
    app.include_router(movies.router, tags=["movies"])
    app.include_router(health.router, tags=["health"])

    @app.get("/", include_in_schema=False)
    async def root() -> RedirectResponse:
        """Send browsers to the interactive API docs."""
        return RedirectResponse("/docs")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "movies_graph.gateway.app:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
