"""Boundary Protocols — contracts between the catalog core and its callers.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Transport layers depend on EntitiesCatalogLike, not on the SQLAlchemy implementation

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, the pure logic they call never is
    - Response types referenced as strings: schemas/ is a shell module
"""

from typing import TYPE_CHECKING, Any, NoReturn, Protocol, runtime_checkable

from catalog.core.domain_types import EntityId, EntityProjector
from catalog.core.entity_filter import EntityFilter

if TYPE_CHECKING:
    from catalog.schemas.catalog import (
        EntitiesResponse, EntityAncestryResponse, EntityPagination,
    )


@runtime_checkable
class EntitiesCatalogLike(Protocol):
    """Contract for the catalog read path — implemented by services.EntitiesCatalog."""
    async def list_entities(
        self,
        entity_filter: EntityFilter | None = None,
        pagination: "EntityPagination | None" = None,
        projector: EntityProjector | None = None,
    ) -> "EntitiesResponse": ...

    async def remove_entity_by_uid(self, uid: EntityId) -> None: ...

    async def entity_ancestry(self, root_ref: str) -> "EntityAncestryResponse": ...

    async def batch_add_or_update_entities(self, *args: Any, **kwargs: Any) -> NoReturn: ...
