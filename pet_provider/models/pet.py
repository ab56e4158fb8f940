"""Pets Table — the single relational table behind the provider.

Invariants:
    - _id is INTEGER PRIMARY KEY AUTOINCREMENT: assigned once by the engine, never reused
    - name NOT NULL, gender NOT NULL and IN (0, 1, 2)
    - weight NOT NULL DEFAULT 0 and >= 0; breed nullable
    - CHECK constraints mirror the validator — last line of defense, not the first

Design Decisions:
    - Core Table over declarative class: the provider speaks the storage contract
      (table name, columns, predicates) rather than ORM instances, and the
      primary key column is literally named "_id"
"""

from sqlalchemy import CheckConstraint, Column, Integer, Table, Text

from pet_provider.core.pet_contract import (
    TABLE_NAME, COLUMN_ID, COLUMN_PET_NAME, COLUMN_PET_BREED,
    COLUMN_PET_GENDER, COLUMN_PET_WEIGHT,
)
from pet_provider.db.base import Base

pets_table = Table(
    TABLE_NAME,
    Base.metadata,
    Column(COLUMN_ID, Integer, primary_key=True, autoincrement=True),
    Column(COLUMN_PET_NAME, Text, nullable=False),
    Column(COLUMN_PET_BREED, Text, nullable=True),
    Column(COLUMN_PET_GENDER, Integer, nullable=False),
    Column(COLUMN_PET_WEIGHT, Integer, nullable=False, server_default="0"),
    CheckConstraint(f"{COLUMN_PET_GENDER} IN (0, 1, 2)", name="ck_pets_gender"),
    CheckConstraint(f"{COLUMN_PET_WEIGHT} >= 0", name="ck_pets_weight"),
    CheckConstraint(f"length({COLUMN_PET_NAME}) > 0", name="ck_pets_name"),
    sqlite_autoincrement=True,
)
