"""
Route tests for the FastAPI gateway.

Services are swapped through dependency overrides; the lifespan (and so
Neo4j) is never started.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from movies_graph.browse import BrowseService
from movies_graph.gateway.app import create_app
from movies_graph.gateway.config import GatewaySettings
from movies_graph.gateway.dependencies import (
    get_browse_service,
    get_handler,
    get_movie_repository,
)
from movies_graph.movies.models import Movie, MovieResult, VoteResult
from movies_graph.shared.exceptions import NotFoundError, StoreError

from tests.fakes import FakeStore, edge, movie, person


def _client(store=None, repository=None, handler=None, **settings):
    app = create_app(GatewaySettings(**settings))
    if store is not None:
        app.dependency_overrides[get_browse_service] = lambda: BrowseService(store)
    if repository is not None:
        app.dependency_overrides[get_movie_repository] = lambda: repository
    if handler is not None:
        app.dependency_overrides[get_handler] = lambda: handler
    return TestClient(app, raise_server_exceptions=False)


def _assert_opaque(body, status):
    assert body["status"] == status
    assert body["error"] == "internal_error"
    assert len(body["error_id"]) == 32
    assert set(body) == {"error", "status", "error_id"}


# ─── GET /graph ─────────────────────────────────────────────


class TestGraphRoute:

    def test_returns_nodes_and_links(self):
        store = FakeStore([edge(movie("MovieA"), person("PersonX"), "ACTED_IN")])

        response = _client(store).get("/graph", params={"limit": "2", "rel": "acted_in"})

        assert response.status_code == 200
        assert response.json() == {
            "nodes": [
                {"title": "MovieA", "label": "movie", "props": {"title": "MovieA"}},
                {"title": "PersonX", "label": "person", "props": {"name": "PersonX"}},
            ],
            "links": [{"source": 0, "target": 1, "rel": "ACTED_IN"}],
        }
        assert store.queries[0].params["rels"] == ["ACTED_IN"]
        assert store.queries[0].params["limit"] == 2

    def test_out_of_range_values_are_clamped_not_rejected(self):
        store = FakeStore()
        response = _client(store).get("/graph", params={"limit": "99999", "depth": "-2"})
        assert response.status_code == 200
        assert store.queries[0].params["limit"] == 1000

    def test_non_numeric_depth_is_opaque_400(self):
        store = FakeStore()
        response = _client(store).get("/graph", params={"depth": "deep"})
        assert response.status_code == 400
        _assert_opaque(response.json(), 400)
        assert "deep" not in response.text
        assert store.queries == []

    def test_year_outside_int64_is_opaque_400(self):
        store = FakeStore()
        response = _client(store).get("/graph", params={"released_gte": "1" + "0" * 20})
        assert response.status_code == 400
        _assert_opaque(response.json(), 400)
        assert store.queries == []

    def test_store_failure_is_opaque_500(self):
        store = FakeStore(error=StoreError("MATCH (s)-[r]->(t) exploded"))
        response = _client(store).get("/graph")
        assert response.status_code == 500
        _assert_opaque(response.json(), 500)
        assert "MATCH" not in response.text

    def test_unexpected_error_keeps_request_id_and_headers(self):
        store = FakeStore(error=OverflowError("Integer out of range"))
        response = _client(store).get("/graph", headers={"x-request-id": "req-7"})
        assert response.status_code == 500
        _assert_opaque(response.json(), 500)
        assert "Integer" not in response.text
        assert response.headers["x-request-id"] == "req-7"
        assert response.headers["x-frame-options"] == "DENY"

    def test_timeout_is_504(self):
        store = FakeStore(
            [edge(movie("A"), person("B"), "ACTED_IN")] * 3, hang_after=1
        )
        response = _client(store, request_timeout_secs=0.05).get("/graph")
        assert response.status_code == 504
        _assert_opaque(response.json(), 504)
        assert store.closed


# ─── Movie routes ───────────────────────────────────────────


@pytest.fixture
def repository():
    mock = MagicMock()
    mock.movie = AsyncMock(return_value=Movie(title="The Matrix", released=1999))
    mock.vote = AsyncMock(return_value=VoteResult(votes=7))
    mock.search = AsyncMock(return_value=[MovieResult(movie=Movie(title="The Matrix"))])
    return mock


class TestMovieRoutes:

    def test_movie_detail(self, repository):
        response = _client(repository=repository).get("/movie/The Matrix")
        assert response.status_code == 200
        assert response.json()["title"] == "The Matrix"
        repository.movie.assert_awaited_once_with("The Matrix")

    def test_missing_movie_is_404(self, repository):
        repository.movie.return_value = None
        response = _client(repository=repository).get("/movie/Nope")
        assert response.status_code == 404
        _assert_opaque(response.json(), 404)

    def test_vote(self, repository):
        response = _client(repository=repository).post("/movie/vote/The Matrix")
        assert response.status_code == 200
        assert response.json() == {"votes": 7}

    def test_vote_unknown_movie_is_404(self, repository):
        repository.vote.side_effect = NotFoundError("movie not found: Nope")
        response = _client(repository=repository).post("/movie/vote/Nope")
        assert response.status_code == 404

    def test_search_passes_pagination(self, repository):
        response = _client(repository=repository).get(
            "/search", params={"q": "matrix", "offset": "5", "limit": "10"}
        )
        assert response.status_code == 200
        assert response.json() == [
            {"movie": {"released": None, "title": "The Matrix", "tagline": None,
                       "votes": None, "cast": None}}
        ]
        repository.search.assert_awaited_once_with("matrix", offset=5, limit=10)

    def test_search_bad_offset_is_opaque_400(self, repository):
        response = _client(repository=repository).get(
            "/search", params={"q": "matrix", "offset": "many"}
        )
        assert response.status_code == 400
        _assert_opaque(response.json(), 400)

    def test_search_offset_outside_int64_is_opaque_400(self, repository):
        response = _client(repository=repository).get(
            "/search", params={"q": "matrix", "offset": str(2**63)}
        )
        assert response.status_code == 400
        _assert_opaque(response.json(), 400)
        repository.search.assert_not_awaited()


# ─── Health, headers, root ──────────────────────────────────


class TestPlumbing:

    def test_health_ok(self):
        handler = MagicMock()
        handler.verify = AsyncMock(return_value=True)
        response = _client(handler=handler).get("/health")
        assert response.status_code == 200
        assert response.text == "ok"

    def test_health_unavailable(self):
        handler = MagicMock()
        handler.verify = AsyncMock(return_value=False)
        response = _client(handler=handler).get("/health")
        assert response.status_code == 503
        _assert_opaque(response.json(), 503)

    def test_request_id_is_echoed_or_generated(self):
        client = _client(FakeStore())
        echoed = client.get("/graph", headers={"x-request-id": "abc-123"})
        assert echoed.headers["x-request-id"] == "abc-123"
        generated = client.get("/graph")
        assert generated.headers["x-request-id"]

    def test_security_headers(self):
        response = _client(FakeStore()).get("/graph")
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"
        assert response.headers["referrer-policy"] == "no-referrer"

    def test_root_redirects_to_docs(self):
        response = _client().get("/", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "/docs"
