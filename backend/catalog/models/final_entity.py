"""FinalEntity ORM — fully processed entity document, keyed by entity identity.

Invariants:
    - final_entity is JSON serialized as text; NULL until processing completes
    - Rows with a NULL document never appear in listings or satisfy a filter
    - Removed together with its refresh_state row (FK ON DELETE CASCADE)

Design Decisions:
    - Text column instead of JSON type: documents are stored exactly as produced upstream,
      and parse failures surface as DeserializationError at read time
"""

from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from catalog.db.base import Base


class FinalEntity(Base):
    """Final (stitched) entity document."""
    __tablename__ = "final_entities"

    entity_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("refresh_state.entity_id", ondelete="CASCADE"),
        primary_key=True,
    )
    hash: Mapped[str | None] = mapped_column(String(64), nullable=True)
    final_entity: Mapped[str | None] = mapped_column(Text, nullable=True)
