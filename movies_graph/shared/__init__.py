"""
Shared building blocks — settings, logging, errors, database access.
"""
