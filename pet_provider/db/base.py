"""SQLAlchemy Declarative Base — shared metadata for every table.

Invariants:
    - All tables register on Base.metadata
    - Base.metadata is the single source of truth for table definitions (alembic, tests)

Design Decisions:
    - Separate file for Base: avoids circular imports between models and infrastructure
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class holding the Pet Provider table metadata."""
    pass
