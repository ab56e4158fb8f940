"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Gender values are exactly {0, 1, 2}
    - MatchCode values are the codes registered in the routing table
    - ContentValues is a mapping: an absent key and a key mapped to None differ

Design Decisions:
    - IntEnum for Gender: stored as INTEGER column, compares equal to raw ints
    - str Enum for ResourceKind: serializes to JSON without custom encoders
"""

from collections.abc import Mapping
from enum import Enum, IntEnum
from typing import Any


# ─── Value Types ─────────────────────────────────────────────────

# Proposed field set for insert/update. Presence of a key is meaningful.
ContentValues = Mapping[str, Any]


# ─── Enums ───────────────────────────────────────────────────────

class Gender(IntEnum):
    """Legal values of the pets.gender column."""
    UNKNOWN = 0
    MALE = 1
    FEMALE = 2


class ResourceKind(str, Enum):
    """Whether an identifier addresses the whole collection or a single row."""
    COLLECTION = "collection"
    ITEM = "item"


class MatchCode(IntEnum):
    """Codes returned by the URI matcher."""
    NO_MATCH = -1
    PETS = 100
    PET_ID = 101
