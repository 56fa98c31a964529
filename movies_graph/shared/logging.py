"""
Structured logging with correlation IDs.

Provides a consistent logging setup for every module so that a failed
request can be found in the logs by the error id returned to the caller.
"""

import logging
import uuid


def setup_logging(name: str, level: str = "INFO") -> logging.Logger:
    """
    Configure structured logging for a component.

    Args:
        name: Logger name (used as prefix in every line).
        level: Log level string (e.g. 'INFO', 'DEBUG').

    Returns:
        Configured logger instance.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s",
    )
    return logging.getLogger(name)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for a failed request or a request trace."""
    return uuid.uuid4().hex
