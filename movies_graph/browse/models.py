"""
Browse Models

Data classes flowing through the browse pipeline: the canonical filter set,
the traversal mode discriminant, raw node snapshots read from the store and
the compact node/link graph handed back to the HTTP layer.

Everything here lives for the duration of a single request.
"""

from dataclasses import dataclass, field
from typing import Any, Union

MAX_DEPTH = 6
DEFAULT_DEPTH = 0
MIN_LIMIT = 1
MAX_LIMIT = 1000
DEFAULT_LIMIT = 200


@dataclass(frozen=True)
class FilterSet:
    """Canonical browse filters. Empty collections mean "no restriction"."""

    rels: tuple[str, ...] = ()
    node_incl: tuple[str, ...] = ()
    node_excl: tuple[str, ...] = ()
    root: str | None = None
    depth: int = DEFAULT_DEPTH
    released_gte: int | None = None
    released_lte: int | None = None
    limit: int = DEFAULT_LIMIT


# ─── Traversal mode ──────────────────────────────────────


@dataclass(frozen=True)
class Unbounded:
    """Single-hop directed scan over every edge in the graph."""

    kind = "unbounded"


@dataclass(frozen=True)
class RootedWalk:
    """Undirected walk of 1..depth hops from a resolved root node."""

    root: str
    depth: int

    kind = "rooted_walk"


TraversalMode = Union[Unbounded, RootedWalk]


# ─── Store side ──────────────────────────────────────────


@dataclass(frozen=True)
class NodeSnapshot:
    """A traversal endpoint exactly as the store returned it."""

    id: str
    labels: frozenset[str]
    props: dict[str, Any] = field(default_factory=dict, hash=False)

    @classmethod
    def from_neo4j(cls, node: Any, props: dict[str, Any] | None = None) -> "NodeSnapshot":
        """Build a snapshot from a ``neo4j.graph.Node``.

        ``props`` overrides the node's own attribute map (the templates
        return ``properties(n)`` alongside the node).
        """
        return cls(
            id=str(node.element_id),
            labels=frozenset(node.labels),
            props=dict(props) if props is not None else dict(node.items()),
        )


@dataclass(frozen=True)
class EdgeRecord:
    """One ``(source, target, relation)`` triple of the result stream."""

    source: NodeSnapshot
    target: NodeSnapshot
    rel: str


# ─── Result side ─────────────────────────────────────────


@dataclass
class GraphNode:
    """A deduplicated node, addressed by its position in ``BrowseResult.nodes``."""

    key: str
    title: str
    label: str
    props: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "label": self.label, "props": self.props}


@dataclass
class GraphLink:
    source: int
    target: int
    rel: str

    def to_dict(self) -> dict[str, Any]:
        return {"source": self.source, "target": self.target, "rel": self.rel}


@dataclass
class BrowseResult:
    """Nodes in first-seen order and links in arrival order."""

    nodes: list[GraphNode] = field(default_factory=list)
    links: list[GraphLink] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }
