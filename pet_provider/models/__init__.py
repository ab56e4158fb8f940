"""Table Definitions — SQLAlchemy tables registered on Base.metadata.

Invariants:
    - Every table registers on Base.metadata (db/base.py)
    - Importing this package is enough for create_all / alembic to see every table

Design Decisions:
    - One file per table for locality
"""

from pet_provider.models.pet import pets_table  # noqa: F401
