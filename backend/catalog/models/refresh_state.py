"""RefreshState ORM — one row per live entity, owned by the ingestion pipeline.

Invariants:
    - entity_id is the stable identity (never reused)
    - entity_ref is unique among live rows but may change when an entity is renamed
    - Deleting a row removes the entity: final_entities and search rows cascade

Design Decisions:
    - Only the identity columns are mapped: processing columns belong to ingestion
    - DB-level ON DELETE CASCADE on children (no ORM relationship needed for removal)
    - Separate index on lower(entity_ref) for case-insensitive reference lookups
"""

from sqlalchemy import Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from catalog.db.base import Base


class RefreshState(Base):
    """Processing state of an entity — the removal handle."""
    __tablename__ = "refresh_state"

    entity_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    entity_ref: Mapped[str] = mapped_column(
        Text, nullable=False, unique=True,
    )


Index("refresh_state_entity_ref_lower_idx", func.lower(RefreshState.entity_ref))
