"""
Identity keys for graph nodes.

A node's identity key decides deduplication inside one browse result.
Movies are identified by title, people by name and anything else by the
backend id. When the natural attribute is missing the backend id stands in,
so every node always has a usable display title.
"""

from dataclasses import dataclass
from typing import Any, Callable

from movies_graph.browse.models import NodeSnapshot

MOVIE_LABEL = "Movie"
PERSON_LABEL = "Person"


@dataclass(frozen=True)
class NodeIdentity:
    key: str
    label: str
    title: str


def _fallback_title(node_id: str) -> str:
    return f"#{node_id}"


def _natural(kind: str, attribute: str) -> Callable[[NodeSnapshot], NodeIdentity]:
    def _identify(node: NodeSnapshot) -> NodeIdentity:
        value: Any = node.props.get(attribute)
        title = _fallback_title(node.id) if value is None else str(value)
        return NodeIdentity(key=f"{kind}::{title}", label=kind, title=title)

    return _identify


def _by_id(node: NodeSnapshot) -> NodeIdentity:
    return NodeIdentity(key=f"node::{node.id}", label="node", title=_fallback_title(node.id))


# Checked in order: the first label present wins.
_DISPATCH: tuple[tuple[str, Callable[[NodeSnapshot], NodeIdentity]], ...] = (
    (MOVIE_LABEL, _natural("movie", "title")),
    (PERSON_LABEL, _natural("person", "name")),
)


def identify(node: NodeSnapshot) -> NodeIdentity:
    """Return the identity key, primary label and display title of a node.

    - ``Movie``  -> ("movie::<title>", "movie", title)
    - ``Person`` -> ("person::<name>", "person", name)
    - other      -> ("node::<id>", "node", "#<id>")
    """
    for label, rule in _DISPATCH:
        if label in node.labels:
            return rule(node)
    return _by_id(node)
