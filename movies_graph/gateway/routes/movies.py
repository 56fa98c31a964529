"""
Movie routes — GET /movie/{title}, POST /movie/vote/{title} and GET /search.
"""

from fastapi import APIRouter, Depends, Query

from movies_graph.browse.filters import INT64_MAX
from movies_graph.gateway.dependencies import get_movie_repository
from movies_graph.movies import MovieRepository
from movies_graph.movies.models import Movie, MovieResult, VoteResult
from movies_graph.shared.exceptions import NotFoundError
from movies_graph.shared.logging import setup_logging

logger = setup_logging("gateway.routes.movies", level="INFO")

router = APIRouter()


@router.get("/movie/{title}", response_model=Movie)
async def get_movie(
    title: str,
    repository: MovieRepository = Depends(get_movie_repository),
) -> Movie:
    """Movie detail with its cast (exact title match)."""
    movie = await repository.movie(title)
    if movie is None:
        raise NotFoundError(f"movie not found: {title.strip()}")
    return movie


@router.post("/movie/vote/{title}", response_model=VoteResult)
async def vote(
    title: str,
    repository: MovieRepository = Depends(get_movie_repository),
) -> VoteResult:
    """Increase the vote counter of a movie."""
    return await repository.vote(title)


@router.get("/search", response_model=list[MovieResult])
async def search(
    q: str = Query(..., description="Part of the movie title"),
    offset: int | None = Query(None, le=INT64_MAX, description="Results to skip (default 0)"),
    limit: int | None = Query(None, le=INT64_MAX, description="Page size (1..200, default 25)"),
    repository: MovieRepository = Depends(get_movie_repository),
) -> list[MovieResult]:
    """Search movies by title substring with offset/limit pagination."""
    return await repository.search(q, offset=offset, limit=limit)
