"""RefreshStateReference ORM — parent -> child edges between entity references.

Invariants:
    - source_entity_ref is the parent of target_entity_ref
    - Several edges may share a target (multiple parents); cycles are allowed
    - Endpoints are reference strings, not foreign keys: edges may dangle

Design Decisions:
    - Surrogate integer id: the same pair may be emitted by several processors
    - Endpoints indexed on lower(...): ancestry lookups compare references case-insensitively
"""

from sqlalchemy import Integer, Text, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from catalog.db.base import Base


class RefreshStateReference(Base):
    """Ownership/contribution edge in the entity graph."""
    __tablename__ = "refresh_state_references"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source_entity_ref: Mapped[str] = mapped_column(Text, nullable=False)
    target_entity_ref: Mapped[str] = mapped_column(Text, nullable=False)


Index(
    "refresh_state_references_source_lower_idx",
    func.lower(RefreshStateReference.source_entity_ref),
)
Index(
    "refresh_state_references_target_lower_idx",
    func.lower(RefreshStateReference.target_entity_ref),
)
