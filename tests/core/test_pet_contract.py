"""Pet Contract — tests for the static entity schema and MIME helpers.

Tests:
    - Schema columns, required flags and primary key
    - Gender legal values are exactly {0, 1, 2}
    - Integer columns carry the signed 64-bit ceiling
    - MIME types derive from the authority only
"""

from pet_provider.core.domain_types import Gender
from pet_provider.core.pet_contract import (
    MAX_INTEGER, PET_SCHEMA, content_item_type, content_list_type, content_uri,
)


def test_schema_columns_in_declaration_order():
    assert PET_SCHEMA.table_name == "pets"
    assert PET_SCHEMA.primary_key == "_id"
    assert PET_SCHEMA.column_names == ("_id", "name", "breed", "gender", "weight")


def test_required_on_create_are_name_and_gender():
    required = {c.name for c in PET_SCHEMA.columns if c.required_on_create}
    assert required == {"name", "gender"}


def test_id_is_system_assigned():
    assert PET_SCHEMA.column("_id").system_assigned
    assert PET_SCHEMA.column("missing") is None


def test_gender_values():
    assert [g.value for g in Gender] == [0, 1, 2]
    assert PET_SCHEMA.column("gender").allowed_values == frozenset({0, 1, 2})


def test_integer_columns_capped_at_signed_64_bit():
    assert MAX_INTEGER == 9223372036854775807
    assert PET_SCHEMA.column("_id").maximum == MAX_INTEGER
    assert PET_SCHEMA.column("weight").maximum == MAX_INTEGER


def test_mime_types_follow_authority():
    assert content_list_type() == "vnd.android.cursor.dir/com.example.android.pets/pets"
    assert content_item_type("content-root") == "vnd.android.cursor.item/content-root/pets"


def test_content_uri():
    assert content_uri() == "content://com.example.android.pets/pets"
