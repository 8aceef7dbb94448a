"""Baseline schema - birds and sightings

Revision ID: 5c1d2e7a9b3f
Revises:
Create Date: 2026-10-19 09:12:40.118204

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c1d2e7a9b3f"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "birds",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("color", sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("height", sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index(op.f("ix_birds_name"), "birds", ["name"], unique=False)
    op.create_index(op.f("ix_birds_color"), "birds", ["color"], unique=False)

    # bird_id carries no foreign key: sightings outlive the bird they reference
    op.create_table(
        "sightings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("bird_id", sa.Integer(), nullable=False),
        sa.Column("location", sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column("observed_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index(op.f("ix_sightings_bird_id"), "sightings", ["bird_id"], unique=False)
    op.create_index(op.f("ix_sightings_location"), "sightings", ["location"], unique=False)
    op.create_index(op.f("ix_sightings_observed_at"), "sightings", ["observed_at"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_sightings_observed_at"), table_name="sightings")
    op.drop_index(op.f("ix_sightings_location"), table_name="sightings")
    op.drop_index(op.f("ix_sightings_bird_id"), table_name="sightings")
    op.drop_table("sightings")
    op.drop_index(op.f("ix_birds_color"), table_name="birds")
    op.drop_index(op.f("ix_birds_name"), table_name="birds")
    op.drop_table("birds")
