"""Domain models and rules for the standard reference oracle.

This package holds the in-memory (Pydantic) models for observations and
derived reference data, plus the access-control, relay and rate rules that
operate on them. Nothing here knows how state is persisted; every component
receives an ``OracleStore`` handle so the logic can be exercised against an
in-memory store in tests.
"""

__all__ = [
    "access_control",
    "bulk_query",
    "errors",
    "rate_engine",
    "reference",
    "relay_ledger",
]
