"""
Shared enumerations for database models.

Mapping Python enums to database enums means an invalid
direction is rejected by the database, not just in Python.
"""

import enum


class Direction(str, enum.Enum):
    """Direction of a transaction record relative to its account."""
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"
