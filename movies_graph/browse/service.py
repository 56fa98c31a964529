"""
Browse Service

Ties the browse pipeline together for one request:

    BrowseParams -> normalize -> build_query -> GraphStore.execute -> GraphAssembler

The service keeps no state between calls; the only shared resource is the
Neo4j driver pool behind the GraphStore.
"""

import logging
from contextlib import aclosing

from movies_graph.browse.assembler import GraphAssembler
from movies_graph.browse.filters import BrowseParams, normalize
from movies_graph.browse.graph_store import GraphStore
from movies_graph.browse.models import BrowseResult, FilterSet
from movies_graph.browse.query_builder import build_query

logger = logging.getLogger("movies-graph.browse.service")


class BrowseService:
    """Runs filtered graph browses against a GraphStore."""

    def __init__(self, store: GraphStore):
        self._store = store

    async def browse(self, params: BrowseParams) -> BrowseResult:
        """Normalize raw parameters and return the matching sub-graph.

        Raises:
            ValidationError: If a numeric parameter is not an integer.
            StoreError: If the query fails; no partial result is returned.
        """
        return await self.browse_filters(normalize(params))

    async def browse_filters(self, filters: FilterSet) -> BrowseResult:
        query = build_query(filters)
        assembler = GraphAssembler()

        # aclosing releases the cursor when the task is cancelled mid-stream.
        async with aclosing(self._store.execute(query)) as edges:
            result = await assembler.consume(edges)

        logger.info(
            "Browse mode=%s limit=%d -> %d nodes, %d links",
            query.mode.kind,
            filters.limit,
            len(result.nodes),
            len(result.links),
        )
        return result
