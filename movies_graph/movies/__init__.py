"""Movie point queries — detail lookup, vote counter and title search."""

from movies_graph.movies.repository import MovieRepository

__all__ = ["MovieRepository"]
