"""
Movie Repository

Single-record lookups, the vote counter and paginated title search.
Each method is one parameterized Cypher statement against the movies graph.
"""

import logging
from typing import Any

from neo4j.exceptions import DriverError, Neo4jError

from movies_graph.movies.models import CastMember, Movie, MovieResult, VoteResult
from movies_graph.shared.database import Neo4jHandler
from movies_graph.shared.exceptions import NotFoundError, StoreError, ValidationError

logger = logging.getLogger("movies-graph.movies.repository")

MAX_TITLE_LENGTH = 200
DEFAULT_SEARCH_LIMIT = 25
MAX_SEARCH_LIMIT = 200

FIND_MOVIE = """
MATCH (movie:Movie {title: $title})
OPTIONAL MATCH (movie)<-[r]-(person:Person)
WITH movie.title AS title,
     movie.tagline AS tagline,
     movie.released AS released,
     movie.votes AS votes,
     collect({
        name: person.name,
        job: head(split(toLower(type(r)), '_')),
        role: r.roles
     }) AS cast
RETURN title, tagline, released, votes, cast
LIMIT 1
"""

VOTE_IN_MOVIE = """
MATCH (movie:Movie {title: $title})
SET movie.votes = coalesce(movie.votes, 0) + 1
RETURN movie.votes AS votes
"""

SEARCH_MOVIES = """
MATCH (movie:Movie)
WHERE toLower(movie.title) CONTAINS toLower($part)
RETURN movie
SKIP $offset LIMIT $limit
"""


def sanitize_title(title: str) -> str:
    """Trim a title taken from the URL path and check its length.

    Raises:
        ValidationError: If the title is blank or longer than 200 characters.
    """
    cleaned = title.strip()
    if not cleaned or len(cleaned) > MAX_TITLE_LENGTH:
        raise ValidationError("invalid title", parameter="title")
    return cleaned


def _cast_from_rows(raw: list[dict[str, Any]] | None) -> list[CastMember] | None:
    # OPTIONAL MATCH without people collects a single all-null entry.
    people = [
        CastMember(
            name=entry.get("name") or "",
            job=entry.get("job") or "",
            role=list(entry["role"]) if entry.get("role") else None,
        )
        for entry in raw or []
        if isinstance(entry, dict) and entry.get("name") is not None
    ]
    return people or None


class MovieRepository:
    """Point queries over Movie nodes."""

    def __init__(self, handler: Neo4jHandler):
        self._handler = handler

    async def _query(self, cypher: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        try:
            return await self._handler.run(cypher, params)
        except (Neo4jError, DriverError, OSError) as exc:
            raise StoreError(f"movie query failed: {exc}") from exc

    async def movie(self, title: str) -> Movie | None:
        """Return the movie with this exact title and its cast, or None."""
        rows = await self._query(FIND_MOVIE, {"title": sanitize_title(title)})
        if not rows:
            return None
        row = rows[0]
        movie = Movie(
            title=row.get("title"),
            tagline=row.get("tagline"),
            released=row.get("released"),
            votes=row.get("votes"),
            cast=_cast_from_rows(row.get("cast")),
        )
        logger.debug("Movie fetched: %s", movie.title)
        return movie

    async def vote(self, title: str) -> VoteResult:
        """Increment the vote counter of a movie and return the new total.

        Raises:
            NotFoundError: If no movie has this title.
        """
        title = sanitize_title(title)
        try:
            rows = await self._handler.write(VOTE_IN_MOVIE, {"title": title})
        except (Neo4jError, DriverError, OSError) as exc:
            raise StoreError(f"vote failed: {exc}") from exc
        if not rows:
            raise NotFoundError(f"movie not found: {title}")
        return VoteResult(votes=rows[0]["votes"])

    async def search(
        self, q: str, offset: int | None = None, limit: int | None = None
    ) -> list[MovieResult]:
        """Case-insensitive substring search on movie titles.

        ``limit`` defaults to 25 and is clamped to [1, 200]; a negative
        ``offset`` counts as 0.
        """
        limit = max(1, min(DEFAULT_SEARCH_LIMIT if limit is None else limit, MAX_SEARCH_LIMIT))
        offset = max(0, offset or 0)
        rows = await self._query(
            SEARCH_MOVIES, {"part": q, "offset": offset, "limit": limit}
        )
        results = [MovieResult(movie=Movie(**row["movie"])) for row in rows]
        logger.debug("Search %r -> %d results", q, len(results))
        return results
