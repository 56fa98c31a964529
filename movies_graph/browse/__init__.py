"""Graph browsing — filtered traversals reduced to node/link graphs."""

from movies_graph.browse.assembler import GraphAssembler
from movies_graph.browse.filters import BrowseParams, normalize
from movies_graph.browse.graph_store import GraphStore
from movies_graph.browse.query_builder import BrowseQuery, build_query, select_mode
from movies_graph.browse.service import BrowseService

__all__ = [
    "BrowseParams",
    "BrowseQuery",
    "BrowseService",
    "GraphAssembler",
    "GraphStore",
    "build_query",
    "normalize",
    "select_mode",
]
