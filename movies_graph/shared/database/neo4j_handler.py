"""
Neo4j Connection Handler

Centralised Neo4j driver management.
Reads credentials from settings (environment / .env) and exposes an async
driver that is shared by every request: the driver owns the connection pool
and its synchronisation, callers only borrow sessions.
"""

import logging
from typing import Any, AsyncIterator

from dotenv import load_dotenv
from neo4j import AsyncDriver, AsyncGraphDatabase, Record
from neo4j.exceptions import DriverError, Neo4jError

from movies_graph.shared.config import BaseServiceSettings
from movies_graph.shared.exceptions import DatabaseConnectionError

load_dotenv()

logger = logging.getLogger("movies-graph.neo4j_handler")


class Neo4jHandler:
    """
    Manages a single async Neo4j driver backed by settings / .env configuration.

    Usage
    -----
    handler = Neo4jHandler()          # reads from env / .env
    await handler.connect()
    rows = await handler.run("MATCH (n) RETURN n LIMIT 5")
    await handler.close()

    The handler can also be used as an async context-manager:

        async with Neo4jHandler() as handler:
            async for record in handler.stream(...):
                ...
    """

    def __init__(
        self,
        settings: BaseServiceSettings | None = None,
        *,
        uri: str | None = None,
        username: str | None = None,
        password: str | None = None,
        database: str | None = None,
    ):
        settings = settings or BaseServiceSettings()
        self._uri = uri or settings.neo4j_uri
        self._username = username or settings.neo4j_username
        self._password = password or settings.neo4j_password
        self._database = database or settings.neo4j_database
        self._driver: AsyncDriver | None = None

        if not self._uri:
            raise ValueError("NEO4J_URI is not set (env or argument)")
        if not self._username:
            raise ValueError("NEO4J_USERNAME is not set (env or argument)")
        if not self._password:
            raise ValueError("NEO4J_PASSWORD is not set (env or argument)")

    # ─── Lifecycle ──────────────────────────────────────────

    async def connect(self) -> "Neo4jHandler":
        """Create the async driver and verify connectivity.

        Returns:
            Self for method chaining.

        Raises:
            DatabaseConnectionError: If the connection cannot be established or verified.
        """
        if self._driver is not None:
            return self

        self._driver = AsyncGraphDatabase.driver(
            self._uri, auth=(self._username, self._password)
        )
        try:
            await self._driver.verify_connectivity()
            logger.info("Connected to Neo4j at %s (db=%s)", self._uri, self._database)
        except (Neo4jError, DriverError, OSError) as exc:
            logger.error("Failed to connect to Neo4j at %s", self._uri)
            await self._driver.close()
            self._driver = None
            raise DatabaseConnectionError(f"cannot reach Neo4j at {self._uri}") from exc
        return self

    async def close(self) -> None:
        """Close the underlying driver."""
        if self._driver:
            await self._driver.close()
            self._driver = None
            logger.info("Neo4j connection closed")

    async def __aenter__(self) -> "Neo4jHandler":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ─── Query Helpers ──────────────────────────────────────

    async def _ensure_driver(self) -> AsyncDriver:
        """Return the driver, connecting first if startup could not."""
        if self._driver is None:
            await self.connect()
        return self._driver

    async def stream(
        self, query: str, params: dict[str, Any] | None = None
    ) -> AsyncIterator[Record]:
        """Execute a Cypher query and yield records as the server sends them.

        Records are not buffered. Closing the generator early (``aclose()``,
        task cancellation) leaves the session block and releases the cursor.

        Args:
            query: Cypher query string.
            params: Optional query parameters.

        Yields:
            Raw ``neo4j.Record`` objects in arrival order.

        Raises:
            DatabaseConnectionError: If Neo4j cannot be reached.
            neo4j.exceptions.Neo4jError / DriverError: If execution fails.
        """
        driver = await self._ensure_driver()
        async with driver.session(database=self._database) as session:
            result = await session.run(query, params or {})
            async for record in result:
                yield record

    async def run(self, query: str, params: dict[str, Any] | None = None) -> list[dict]:
        """Execute a Cypher query and return all results as dicts.

        Args:
            query: Cypher query string.
            params: Optional query parameters.

        Returns:
            List of result records as dictionaries.

        Raises:
            DatabaseConnectionError: If Neo4j cannot be reached.
            neo4j.exceptions.Neo4jError / DriverError: If execution fails.
        """
        driver = await self._ensure_driver()
        async with driver.session(database=self._database) as session:
            result = await session.run(query, params or {})
            return [record.data() async for record in result]

    async def run_single(self, query: str, params: dict[str, Any] | None = None) -> dict | None:
        """Execute a Cypher query and return the first result, or None."""
        results = await self.run(query, params)
        return results[0] if results else None

    async def write(self, query: str, params: dict[str, Any] | None = None) -> list[dict]:
        """Execute a write query inside a managed write transaction.

        Args:
            query: Cypher write query (MERGE, SET, ...).
            params: Optional query parameters.

        Returns:
            Records returned by the query, as dictionaries.
        """

        async def _work(tx):
            result = await tx.run(query, params or {})
            return [record.data() async for record in result]

        driver = await self._ensure_driver()
        async with driver.session(database=self._database) as session:
            return await session.execute_write(_work)

    async def verify(self) -> bool:
        """Quick health-check: returns True if the database answers a ping."""
        try:
            row = await self.run_single("RETURN 1 AS ok")
        except (Neo4jError, DriverError, OSError, DatabaseConnectionError) as exc:
            logger.warning("Neo4j health ping failed: %s", exc)
            return False
        return bool(row) and row.get("ok") == 1
