"""
Filter Normalizer

Turns the raw ``/graph`` query parameters into a canonical FilterSet.

Normalization is permissive: empty or missing values widen the filter
(wildcard), out-of-range numbers are clamped. The only failure is a value
that cannot be read as a signed 64-bit integer.
"""

import logging

from pydantic import BaseModel, Field

from movies_graph.browse.models import (
    DEFAULT_DEPTH,
    DEFAULT_LIMIT,
    MAX_DEPTH,
    MAX_LIMIT,
    MIN_LIMIT,
    FilterSet,
)
from movies_graph.shared.exceptions import ValidationError

logger = logging.getLogger("movies-graph.browse.filters")

RawValue = str | int | None

# Neo4j integers are signed 64-bit.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class BrowseParams(BaseModel):
    """Raw ``/graph`` parameters, untouched by any parsing."""

    limit: RawValue = Field(None, description="Max number of edges (1..1000, default 200)")
    rel: str | None = Field(
        None, description="CSV of relation types (ACTED_IN,DIRECTED,...); empty = all"
    )
    root: str | None = Field(None, description="Root node: Movie.title or Person.name")
    depth: RawValue = Field(None, description="Hops from root (0..6); 0 = no walk")
    node_incl: str | None = Field(None, description="CSV of node labels to include")
    node_excl: str | None = Field(None, description="CSV of node labels to exclude")
    released_gte: RawValue = Field(None, description="Minimum release year (inclusive)")
    released_lte: RawValue = Field(None, description="Maximum release year (inclusive)")


def split_csv(raw: str | None, *, upper: bool = False) -> tuple[str, ...]:
    """Split a comma-separated value, trimming tokens and dropping empty ones."""
    if not raw:
        return ()
    tokens = (token.strip() for token in raw.split(","))
    return tuple(token.upper() if upper else token for token in tokens if token)


def parse_int(name: str, raw: RawValue) -> int | None:
    """Read an optional integer parameter.

    Raises:
        ValidationError: If the value is present but not a 64-bit integer.
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValidationError(f"{name} must be an integer", parameter=name)
    if isinstance(raw, int):
        value = raw
    else:
        text = raw.strip()
        if not text:
            return None
        try:
            value = int(text)
        except ValueError:
            raise ValidationError(f"{name} must be an integer", parameter=name) from None
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValidationError(f"{name} is out of the 64-bit integer range", parameter=name)
    return value


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def normalize(params: BrowseParams) -> FilterSet:
    """Build the canonical FilterSet for one browse request.

    Relation types are uppercased, labels are kept verbatim (label matching
    is case-sensitive). ``depth`` is clamped to [0, 6] and ``limit`` to
    [1, 1000]. A root that is blank after trimming counts as no root.

    Raises:
        ValidationError: If a numeric parameter is not a 64-bit integer.
    """
    depth = parse_int("depth", params.depth)
    limit = parse_int("limit", params.limit)
    root = params.root.strip() if params.root else ""

    filters = FilterSet(
        rels=split_csv(params.rel, upper=True),
        node_incl=split_csv(params.node_incl),
        node_excl=split_csv(params.node_excl),
        root=root or None,
        depth=clamp(DEFAULT_DEPTH if depth is None else depth, 0, MAX_DEPTH),
        released_gte=parse_int("released_gte", params.released_gte),
        released_lte=parse_int("released_lte", params.released_lte),
        limit=clamp(DEFAULT_LIMIT if limit is None else limit, MIN_LIMIT, MAX_LIMIT),
    )
    logger.debug("Normalized browse filters: %s", filters)
    return filters
