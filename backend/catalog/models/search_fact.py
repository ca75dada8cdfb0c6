"""SearchFact ORM — flattened key/value index over entity content.

Invariants:
    - One entity has many facts; a key may repeat with different values
    - value may be NULL (key present without a value)
    - Keys and values are matched case-insensitively
    - Removed together with the entity's refresh_state row (FK ON DELETE CASCADE)

Design Decisions:
    - key and value are indexed on lower(...) because filters compare lower-cased
"""

from sqlalchemy import Integer, String, Text, ForeignKey, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from catalog.db.base import Base


class SearchFact(Base):
    """A single (key, value) fact used by entity filters."""
    __tablename__ = "search"
    __table_args__ = (
        Index("search_entity_id_idx", "entity_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("refresh_state.entity_id", ondelete="CASCADE"),
        nullable=False,
    )
    key: Mapped[str] = mapped_column(Text, nullable=False)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)


Index("search_key_lower_idx", func.lower(SearchFact.key))
Index("search_value_lower_idx", func.lower(SearchFact.value))
