"""
Base configuration for the movies graph service.

Uses Pydantic Settings for environment-based configuration.
Each component extends BaseServiceSettings with its own prefix.
"""

from pydantic_settings import BaseSettings


class BaseServiceSettings(BaseSettings):
    """Base settings shared by every component of the service."""

    service_name: str = "movies-graph"

    # Neo4j connection (defaults point at the public movies demo database)
    neo4j_uri: str = "neo4j+s://demo.neo4jlabs.com"
    neo4j_username: str = "movies"
    neo4j_password: str = "movies"
    neo4j_database: str = "movies"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
