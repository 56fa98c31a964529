"""Movies graph service — browse a Neo4j movies graph over HTTP."""

__version__ = "1.0.0"
