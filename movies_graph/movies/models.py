"""
Movie API models — response bodies of the point-query routes.
"""

from pydantic import BaseModel, Field


class CastMember(BaseModel):
    """A person linked to a movie."""

    name: str = Field("", description="Person name")
    job: str = Field("", description="Relation kind, e.g. 'acted' or 'directed'")
    role: list[str] | None = Field(None, description="Roles played, if any")


class Movie(BaseModel):
    released: int | None = None
    title: str | None = None
    tagline: str | None = None
    votes: int | None = None
    cast: list[CastMember] | None = None


class MovieResult(BaseModel):
    movie: Movie


class VoteResult(BaseModel):
    votes: int = Field(..., description="Vote count after the increment")
