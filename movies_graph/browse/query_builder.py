"""
Query Builder

Chooses the traversal mode for a FilterSet and renders one of two fixed
Cypher templates. Every filter value travels as a bound parameter; the
query text itself never depends on user input.

Filter policy shared by both templates:
  - an empty ``$rels`` / ``$node_incl`` / ``$node_excl`` list disables
    the corresponding predicate
  - year bounds only constrain endpoints that carry a ``released``
    attribute; an endpoint without one always passes
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from movies_graph.browse.models import (
    MAX_DEPTH,
    FilterSet,
    RootedWalk,
    TraversalMode,
    Unbounded,
)

logger = logging.getLogger("movies-graph.browse.query_builder")

YEAR_ATTRIBUTE = "released"

# Applied to every candidate (s, t, rel) row in both templates.
_EDGE_PREDICATES = f"""
WHERE (size($rels) = 0 OR rel IN $rels)
  AND (size($node_incl) = 0 OR any(lbl IN labels(s) WHERE lbl IN $node_incl))
  AND (size($node_incl) = 0 OR any(lbl IN labels(t) WHERE lbl IN $node_incl))
  AND (size($node_excl) = 0 OR all(lbl IN labels(s) WHERE NOT lbl IN $node_excl))
  AND (size($node_excl) = 0 OR all(lbl IN labels(t) WHERE NOT lbl IN $node_excl))
  AND ($released_gte IS NULL OR s.{YEAR_ATTRIBUTE} IS NULL OR s.{YEAR_ATTRIBUTE} >= $released_gte)
  AND ($released_gte IS NULL OR t.{YEAR_ATTRIBUTE} IS NULL OR t.{YEAR_ATTRIBUTE} >= $released_gte)
  AND ($released_lte IS NULL OR s.{YEAR_ATTRIBUTE} IS NULL OR s.{YEAR_ATTRIBUTE} <= $released_lte)
  AND ($released_lte IS NULL OR t.{YEAR_ATTRIBUTE} IS NULL OR t.{YEAR_ATTRIBUTE} <= $released_lte)
RETURN s, t, rel, properties(s) AS sProps, properties(t) AS tProps
LIMIT $limit
"""

UNBOUNDED_QUERY = (
    """
MATCH (s)-[r]->(t)
WITH s, t, type(r) AS rel
"""
    + _EDGE_PREDICATES
)

# Variable-length bounds cannot be parameters in Cypher, so the pattern is
# capped at MAX_DEPTH and the requested depth is applied to length(p).
ROOTED_WALK_QUERY = (
    f"""
MATCH (root)
WHERE (root:Movie AND root.title = $root)
   OR (root:Person AND root.name = $root)
   OR elementId(root) = $root
WITH root LIMIT 1
MATCH p = (root)-[*1..{MAX_DEPTH}]-(n)
WHERE length(p) <= $depth
UNWIND relationships(p) AS relx
WITH startNode(relx) AS s, endNode(relx) AS t, type(relx) AS rel
"""
    + _EDGE_PREDICATES
)


@dataclass(frozen=True)
class BrowseQuery:
    """A rendered traversal request: fixed text plus bound parameters."""

    mode: TraversalMode
    text: str
    params: dict[str, Any] = field(default_factory=dict, hash=False)


def select_mode(filters: FilterSet) -> TraversalMode:
    """RootedWalk iff a root is present and depth >= 1, Unbounded otherwise."""
    if filters.root and filters.depth >= 1:
        return RootedWalk(root=filters.root, depth=filters.depth)
    return Unbounded()


def build_query(filters: FilterSet) -> BrowseQuery:
    """Render the browse query for a canonical filter set."""
    mode = select_mode(filters)
    params: dict[str, Any] = {
        "rels": list(filters.rels),
        "node_incl": list(filters.node_incl),
        "node_excl": list(filters.node_excl),
        "released_gte": filters.released_gte,
        "released_lte": filters.released_lte,
        "limit": filters.limit,
    }

    if isinstance(mode, RootedWalk):
        text = ROOTED_WALK_QUERY
        params["root"] = mode.root
        params["depth"] = mode.depth
    else:
        text = UNBOUNDED_QUERY

    logger.debug("Browse query mode=%s params=%s", mode.kind, params)
    return BrowseQuery(mode=mode, text=text, params=params)
