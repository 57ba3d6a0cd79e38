"""Initial schema for the HostDesk backend

Revision ID: 0001
Revises:
Create Date: 2026-10-17

Creates properties, whatsapp_groups and door_codes. Child tables cascade on
property delete.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import mysql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp() -> sa.types.TypeEngine:
    """Timezone-aware timestamp with microseconds (DATETIME(6) on MySQL)."""
    return sa.DateTime(timezone=True).with_variant(
        mysql.DATETIME(timezone=True, fsp=6), "mysql"
    )


def upgrade() -> None:
    """Create all tables."""

    op.create_table(
        "properties",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("created_at", _timestamp(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_properties_name", "properties", ["name"])

    op.create_table(
        "whatsapp_groups",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("property_id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("template", sa.Text(), nullable=False),
        sa.Column("links", sa.JSON(), nullable=True),
        sa.Column("evolution_id", sa.String(255), nullable=True),
        sa.Column("created_at", _timestamp(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_whatsapp_groups_property", "whatsapp_groups", ["property_id"])

    op.create_table(
        "door_codes",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("property_id", sa.String(36), nullable=False),
        sa.Column("code_number", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("updated_at", _timestamp(), nullable=False),
        sa.Column("last_used_at", _timestamp(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("property_id", "code_number", name="uq_door_codes_property_slot"),
        sa.CheckConstraint("code_number >= 0 AND code_number <= 10", name="ck_door_codes_slot_range"),
    )
    op.create_index("ix_door_codes_property", "door_codes", ["property_id"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("ix_door_codes_property", table_name="door_codes")
    op.drop_table("door_codes")
    op.drop_index("ix_whatsapp_groups_property", table_name="whatsapp_groups")
    op.drop_table("whatsapp_groups")
    op.drop_index("ix_properties_name", table_name="properties")
    op.drop_table("properties")
