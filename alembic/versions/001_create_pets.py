"""Create pets table.

Revision ID: 001_create_pets
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_create_pets"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "pets",
        sa.Column("_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("breed", sa.Text, nullable=True),
        sa.Column("gender", sa.Integer, nullable=False),
        sa.Column("weight", sa.Integer, nullable=False, server_default="0"),
        sa.CheckConstraint("gender IN (0, 1, 2)", name="ck_pets_gender"),
        sa.CheckConstraint("weight >= 0", name="ck_pets_weight"),
        sa.CheckConstraint("length(name) > 0", name="ck_pets_name"),
        sqlite_autoincrement=True,
    )


def downgrade() -> None:
    op.drop_table("pets")
