"""
Unit tests for GraphStore — record conversion and error mapping.

The Neo4j handler is mocked; no database needed.
"""

from contextlib import aclosing

import pytest
from unittest.mock import MagicMock

from neo4j.exceptions import ServiceUnavailable

from movies_graph.browse.graph_store import GraphStore, edge_from_record
from movies_graph.browse.models import FilterSet
from movies_graph.browse.query_builder import build_query
from movies_graph.shared.exceptions import StoreError

from tests.fakes import FakeNode, FakeRecord


def _record(rel="ACTED_IN"):
    s = FakeNode("4:db:1", {"Person"}, name="Keanu Reeves", born=1964)
    t = FakeNode("4:db:2", {"Movie"}, title="The Matrix", released=1999)
    return FakeRecord(
        s=s, t=t, rel=rel, sProps={"name": "Keanu Reeves", "born": 1964},
        tProps={"title": "The Matrix", "released": 1999},
    )


def _handler_streaming(records, error=None, released=None):
    handler = MagicMock()
    calls = []

    async def _stream(query, params=None):
        calls.append((query, params))
        try:
            for record in records:
                yield record
            if error is not None:
                raise error
        finally:
            if released is not None:
                released.append(query)

    handler.stream = _stream
    return handler, calls


class TestEdgeFromRecord:

    def test_converts_nodes_and_relation(self):
        result = edge_from_record(_record())
        assert result.rel == "ACTED_IN"
        assert result.source.id == "4:db:1"
        assert result.source.labels == frozenset({"Person"})
        assert result.target.props == {"title": "The Matrix", "released": 1999}

    def test_falls_back_to_node_items_without_props_columns(self):
        record = _record()
        del record["sProps"]
        assert edge_from_record(record).source.props == {"name": "Keanu Reeves", "born": 1964}


class TestGraphStore:

    async def test_streams_edges_with_bound_params(self):
        handler, calls = _handler_streaming([_record(), _record("DIRECTED")])
        query = build_query(FilterSet(rels=("ACTED_IN", "DIRECTED"), limit=10))

        edges = [e async for e in GraphStore(handler).execute(query)]

        assert [e.rel for e in edges] == ["ACTED_IN", "DIRECTED"]
        assert calls == [(query.text, query.params)]

    async def test_driver_errors_become_store_errors(self):
        handler, _ = _handler_streaming([_record()], error=ServiceUnavailable("gone"))
        query = build_query(FilterSet())

        with pytest.raises(StoreError):
            [e async for e in GraphStore(handler).execute(query)]

    async def test_early_close_releases_the_driver_stream(self):
        released = []
        handler, _ = _handler_streaming([_record(), _record(), _record()], released=released)
        query = build_query(FilterSet())

        async with aclosing(GraphStore(handler).execute(query)) as edges:
            async for _ in edges:
                break
            assert released == []

        assert released == [query.text]
