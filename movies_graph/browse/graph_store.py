"""
Graph Store — Neo4j boundary for the browse pipeline.

Executes a rendered BrowseQuery and turns each record into an EdgeRecord.
The result is a lazy, single-use async stream: records are converted as
they arrive and nothing is buffered.
"""

import logging
from contextlib import aclosing
from typing import AsyncIterator

from neo4j.exceptions import DriverError, Neo4jError

from movies_graph.browse.models import EdgeRecord, NodeSnapshot
from movies_graph.browse.query_builder import BrowseQuery
from movies_graph.shared.database import Neo4jHandler
from movies_graph.shared.exceptions import StoreError

logger = logging.getLogger("movies-graph.browse.graph_store")


def edge_from_record(record) -> EdgeRecord:
    """Convert one ``s, t, rel, sProps, tProps`` row into an EdgeRecord."""
    return EdgeRecord(
        source=NodeSnapshot.from_neo4j(record["s"], record.get("sProps")),
        target=NodeSnapshot.from_neo4j(record["t"], record.get("tProps")),
        rel=record["rel"],
    )


class GraphStore:
    """Read-only edge source over the movies graph."""

    def __init__(self, handler: Neo4jHandler):
        self._handler = handler

    async def execute(self, query: BrowseQuery) -> AsyncIterator[EdgeRecord]:
        """Run the query and yield its edges in arrival order.

        Close the generator (``contextlib.aclosing``) to release the cursor
        before the stream is exhausted.

        Raises:
            StoreError: If the query or the transport fails.
        """
        logger.debug("Executing browse query:\n%s", query.text)
        try:
            async with aclosing(self._handler.stream(query.text, query.params)) as records:
                async for record in records:
                    yield edge_from_record(record)
        except (Neo4jError, DriverError, OSError) as exc:
            raise StoreError(f"browse query failed: {exc}") from exc
