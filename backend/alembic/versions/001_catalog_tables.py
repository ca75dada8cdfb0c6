"""Catalog tables — refresh_state, final_entities, refresh_state_references, search.

Revision ID: 001_catalog_tables
Revises: None
Create Date: 2026-10-18

final_entities and search cascade from refresh_state so that deleting a
refresh_state row removes the entity everywhere. Reference edges are keyed by
reference strings and intentionally carry no foreign keys (they may dangle).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_catalog_tables"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "refresh_state",
        sa.Column("entity_id", sa.String(36), primary_key=True),
        sa.Column("entity_ref", sa.Text, nullable=False, unique=True),
    )
    # Reference and fact lookups compare lower(...) on the column side
    op.create_index(
        "refresh_state_entity_ref_lower_idx",
        "refresh_state", [sa.text("lower(entity_ref)")],
    )

    op.create_table(
        "final_entities",
        sa.Column(
            "entity_id", sa.String(36),
            sa.ForeignKey("refresh_state.entity_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("hash", sa.String(64), nullable=True),
        sa.Column("final_entity", sa.Text, nullable=True),
    )

    op.create_table(
        "refresh_state_references",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("source_entity_ref", sa.Text, nullable=False),
        sa.Column("target_entity_ref", sa.Text, nullable=False),
    )
    op.create_index(
        "refresh_state_references_source_lower_idx",
        "refresh_state_references", [sa.text("lower(source_entity_ref)")],
    )
    op.create_index(
        "refresh_state_references_target_lower_idx",
        "refresh_state_references", [sa.text("lower(target_entity_ref)")],
    )

    op.create_table(
        "search",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "entity_id", sa.String(36),
            sa.ForeignKey("refresh_state.entity_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("key", sa.Text, nullable=False),
        sa.Column("value", sa.Text, nullable=True),
    )
    op.create_index("search_entity_id_idx", "search", ["entity_id"])
    op.create_index("search_key_lower_idx", "search", [sa.text("lower(key)")])
    op.create_index("search_value_lower_idx", "search", [sa.text("lower(value)")])


def downgrade() -> None:
    op.drop_table("search")
    op.drop_table("refresh_state_references")
    op.drop_table("final_entities")
    op.drop_table("refresh_state")
