"""
Graph Assembler

Reduces the edge stream of one browse request into compact node/link arrays.

Nodes are deduplicated by identity key and numbered in first-seen order;
links are appended for every edge, repeated relations included. Index
assignment depends on arrival order, so the stream is consumed strictly
sequentially.
"""

import logging
from typing import AsyncIterable

from movies_graph.browse.identity import identify
from movies_graph.browse.models import (
    BrowseResult,
    EdgeRecord,
    GraphLink,
    GraphNode,
    NodeSnapshot,
)

logger = logging.getLogger("movies-graph.browse.assembler")


class GraphAssembler:
    """
    Builds a BrowseResult from edges, one request at a time.

    An assembler instance owns its key -> index map; create a new one for
    every request.
    """

    def __init__(self) -> None:
        self._index: dict[str, int] = {}
        self._result = BrowseResult()

    def _resolve(self, node: NodeSnapshot) -> int:
        identity = identify(node)
        idx = self._index.get(identity.key)
        if idx is None:
            idx = len(self._result.nodes)
            self._index[identity.key] = idx
            self._result.nodes.append(
                GraphNode(
                    key=identity.key,
                    title=identity.title,
                    label=identity.label,
                    props=dict(node.props),
                )
            )
        return idx

    def add(self, edge: EdgeRecord) -> None:
        """Register both endpoints and append the link unconditionally."""
        source = self._resolve(edge.source)
        target = self._resolve(edge.target)
        self._result.links.append(GraphLink(source=source, target=target, rel=edge.rel))

    async def consume(self, edges: AsyncIterable[EdgeRecord]) -> BrowseResult:
        """Pull every edge from an async stream, in order, and return the result."""
        async for edge in edges:
            self.add(edge)
        logger.debug(
            "Assembled graph: %d nodes, %d links",
            len(self._result.nodes),
            len(self._result.links),
        )
        return self._result
