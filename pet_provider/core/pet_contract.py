"""Pet Contract — static schema of the pets entity: names, column types, legal values.

Invariants:
    - PET_SCHEMA is the single source of truth for column names and constraints
    - _id is system-assigned: never accepted in a caller field set
    - name and gender are required on create; breed and weight are optional
    - Integer columns never exceed MAX_INTEGER (the engine cannot bind larger values)
    - MIME types are derived from authority + path only, never from stored content

Design Decisions:
    - Frozen dataclasses for ColumnSpec/EntitySchema: the validator is driven by the
      schema instead of hardcoding one check per column
    - Authority is a parameter of the MIME helpers: one schema, many deployments
"""

from dataclasses import dataclass
from enum import Enum

from pet_provider.core.domain_types import Gender

CONTENT_SCHEME = "content"
CONTENT_AUTHORITY = "com.example.android.pets"
PATH_PETS = "pets"
TABLE_NAME = "pets"

CURSOR_DIR_BASE_TYPE = "vnd.android.cursor.dir"
CURSOR_ITEM_BASE_TYPE = "vnd.android.cursor.item"

COLUMN_ID = "_id"
COLUMN_PET_NAME = "name"
COLUMN_PET_BREED = "breed"
COLUMN_PET_GENDER = "gender"
COLUMN_PET_WEIGHT = "weight"

# Largest value a signed 64-bit INTEGER column can store.
MAX_INTEGER = 2**63 - 1


class ColumnType(str, Enum):
    INTEGER = "integer"
    TEXT = "text"


@dataclass(frozen=True)
class ColumnSpec:
    """One column of an entity and the constraints a value must satisfy."""
    name: str
    type: ColumnType
    required_on_create: bool = False
    nullable: bool = True
    non_empty: bool = False
    allowed_values: frozenset[int] | None = None
    minimum: int | None = None
    maximum: int | None = None
    system_assigned: bool = False


@dataclass(frozen=True)
class EntitySchema:
    """A table and its columns, in declaration order."""
    table_name: str
    primary_key: str
    columns: tuple[ColumnSpec, ...]

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(c.name for c in self.columns)

    def column(self, name: str) -> ColumnSpec | None:
        for spec in self.columns:
            if spec.name == name:
                return spec
        return None

    def has_column(self, name: str) -> bool:
        return self.column(name) is not None


PET_SCHEMA = EntitySchema(
    table_name=TABLE_NAME,
    primary_key=COLUMN_ID,
    columns=(
        ColumnSpec(
            COLUMN_ID, ColumnType.INTEGER,
            nullable=False, system_assigned=True, maximum=MAX_INTEGER,
        ),
        ColumnSpec(
            COLUMN_PET_NAME, ColumnType.TEXT,
            required_on_create=True, nullable=False, non_empty=True,
        ),
        # No need to check the breed, any text is valid (including null).
        ColumnSpec(COLUMN_PET_BREED, ColumnType.TEXT),
        ColumnSpec(
            COLUMN_PET_GENDER, ColumnType.INTEGER,
            required_on_create=True, nullable=False,
            allowed_values=frozenset(g.value for g in Gender),
        ),
        ColumnSpec(
            COLUMN_PET_WEIGHT, ColumnType.INTEGER,
            nullable=False, minimum=0, maximum=MAX_INTEGER,
        ),
    ),
)


def content_list_type(authority: str = CONTENT_AUTHORITY) -> str:
    """MIME type for a list of pets."""
    return f"{CURSOR_DIR_BASE_TYPE}/{authority}/{PATH_PETS}"


def content_item_type(authority: str = CONTENT_AUTHORITY) -> str:
    """MIME type for a single pet."""
    return f"{CURSOR_ITEM_BASE_TYPE}/{authority}/{PATH_PETS}"


def content_uri(authority: str = CONTENT_AUTHORITY) -> str:
    """Collection URI for the pets table."""
    return f"{CONTENT_SCHEME}://{authority}/{PATH_PETS}"
