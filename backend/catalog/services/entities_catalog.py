"""Entities Catalog — filtered/paginated listing, ancestry traversal and removal.

Invariants:
    - list_entities issues exactly one SELECT; input errors raise before any store access
    - Listing order is entity_id ascending (identity is stable, references may be renamed)
    - Rows with a NULL final document are never listed
    - entity_ancestry expands each reference at most once (AncestryWalk owns the seen-set)
    - Results are returned only after the whole walk completes: cancellation never yields
      a truncated item list
    - Corrupt stored documents raise DeserializationError; projector errors propagate as-is

Design Decisions:
    - Over-fetch limit + 1 rows to detect a next page without a COUNT query
    - Edge lookups use LEFT JOINs so dangling parents are still reported
    - Reference comparisons are case-insensitive (lower() on both sides)
    - Services do not own the engine: the caller passes an AsyncSession
"""

import json
import logging
from typing import Any, NoReturn

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.ancestry import AncestryWalk
from catalog.core.domain_types import Entity, EntityId, EntityProjector
from catalog.core.entity_filter import EntityFilter, compile_filter
from catalog.core.entity_ref import parse_entity_ref, stringify_entity_ref
from catalog.core.errors import (
    DeserializationError, EntityNotFoundError, ErrorContext,
    InvalidEntityRefError, UnsupportedOperationError,
)
from catalog.core.pagination import encode_cursor, resolve_pagination
from catalog.infrastructure.sql_predicate import lower_predicate
from catalog.models.final_entity import FinalEntity
from catalog.models.refresh_state import RefreshState
from catalog.models.refresh_state_reference import RefreshStateReference
from catalog.schemas.catalog import (
    EntitiesResponse, EntityAncestryItem, EntityAncestryResponse,
    EntityPagination, PageInfo,
)

logger = logging.getLogger(__name__)


def parse_entity_document(raw: str, entity_id: str | None = None) -> Entity:
    """Parse a stored final_entity text column into a document."""
    try:
        entity = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise DeserializationError(
            f"invalid JSON ({e})", ErrorContext(entity_id=entity_id),
        )
    if not isinstance(entity, dict):
        raise DeserializationError(
            "document is not a JSON object", ErrorContext(entity_id=entity_id),
        )
    return entity


def _normalize_ref(ref: str) -> str:
    try:
        return stringify_entity_ref(parse_entity_ref(ref))
    except InvalidEntityRefError:
        # Unparseable refs still get a plain lookup so they surface as not-found
        return ref.lower()


def root_lookup_query(entity_ref: str) -> Select:
    """Live state and final document of the entity with this normalized reference."""
    return (
        select(RefreshState.entity_id, FinalEntity.final_entity)
        .join(FinalEntity, FinalEntity.entity_id == RefreshState.entity_id)
        .where(func.lower(RefreshState.entity_ref) == entity_ref)
    )


def parents_lookup_query(entity_ref: str) -> Select:
    """Edges pointing at entity_ref, joined to each parent's live state (if any)."""
    return (
        select(
            RefreshStateReference.source_entity_ref,
            RefreshState.entity_id,
            RefreshState.entity_ref,
            FinalEntity.final_entity,
        )
        .select_from(RefreshStateReference)
        .outerjoin(
            RefreshState,
            func.lower(RefreshState.entity_ref)
            == func.lower(RefreshStateReference.source_entity_ref),
        )
        .outerjoin(FinalEntity, FinalEntity.entity_id == RefreshState.entity_id)
        .where(func.lower(RefreshStateReference.target_entity_ref) == entity_ref)
        .order_by(
            RefreshStateReference.source_entity_ref,
            RefreshStateReference.id,
        )
    )


class EntitiesCatalog:
    """Read path over final_entities, refresh_state, references and search."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Listing ─────────────────────────────────────────────────

    async def list_entities(
        self,
        entity_filter: EntityFilter | None = None,
        pagination: EntityPagination | None = None,
        projector: EntityProjector | None = None,
    ) -> EntitiesResponse:
        """List final entities matching the filter, one page at a time."""
        predicate = compile_filter(entity_filter)
        limit, offset = resolve_pagination(pagination)

        query = (
            select(FinalEntity.entity_id, FinalEntity.final_entity)
            .where(FinalEntity.final_entity.is_not(None))
            .where(lower_predicate(predicate))
            .order_by(FinalEntity.entity_id.asc())
        )
        if limit is not None:
            query = query.limit(limit + 1)
        if offset is not None:
            query = query.offset(offset)

        result = await self.db.execute(query)
        rows = list(result.all())

        # A zero limit never advances, so it never reports a next page
        if limit is None or limit == 0 or len(rows) <= limit:
            page_info = PageInfo(has_next_page=False)
        else:
            page_info = PageInfo(
                has_next_page=True,
                end_cursor=encode_cursor(limit, (offset or 0) + limit),
            )
        if limit is not None:
            rows = rows[:limit]

        entities = [
            parse_entity_document(row.final_entity, row.entity_id) for row in rows
        ]
        if projector is not None:
            entities = [projector(entity) for entity in entities]

        logger.debug(
            "Listed entities",
            extra={
                "limit": limit, "offset": offset, "row_count": len(entities),
                "has_next_page": page_info.has_next_page,
            },
        )
        return EntitiesResponse(entities=entities, page_info=page_info)

    # ─── Removal ─────────────────────────────────────────────────

    async def remove_entity_by_uid(self, uid: EntityId) -> None:
        """Delete the processing state of an entity. Missing ids are a no-op."""
        result = await self.db.execute(
            delete(RefreshState).where(RefreshState.entity_id == uid),
        )
        await self.db.commit()
        logger.info(
            f"Removed entity {uid} ({result.rowcount} row(s))",
            extra={"entity_id": uid},
        )

    # ─── Ancestry ────────────────────────────────────────────────

    async def _load_root(self, entity_ref: str) -> Entity | None:
        result = await self.db.execute(root_lookup_query(entity_ref))
        row = result.first()
        if row is None or row.final_entity is None:
            return None
        return parse_entity_document(row.final_entity, row.entity_id)

    async def _load_parents(
        self, entity_ref: str,
    ) -> list[tuple[str, Entity | None]]:
        """Direct parents of entity_ref with their current documents (None if dangling)."""
        result = await self.db.execute(parents_lookup_query(entity_ref))
        parents = []
        for row in result.all():
            if row.entity_id is None:
                # Dangling edge: only the edge knows the reference
                parents.append((row.source_entity_ref.lower(), None))
                continue
            parent = None
            if row.final_entity is not None:
                parent = parse_entity_document(row.final_entity, row.entity_id)
            parents.append((_normalize_ref(row.entity_ref), parent))
        return parents

    async def entity_ancestry(self, root_ref: str) -> EntityAncestryResponse:
        """Walk parent edges upward from root_ref, listing each ancestor once."""
        root_entity = await self._load_root(_normalize_ref(root_ref))
        if root_entity is None:
            raise EntityNotFoundError(root_ref)

        walk = AncestryWalk.start(root_entity)
        while not walk.done:
            current, current_ref = walk.next()
            walk.visit(current, await self._load_parents(current_ref))

        logger.debug(
            f"Resolved ancestry of {walk.root_entity_ref}",
            extra={"entity_ref": walk.root_entity_ref, "visited": len(walk.items)},
        )
        return EntityAncestryResponse(
            root_entity_ref=walk.root_entity_ref,
            items=[
                EntityAncestryItem(
                    entity=item.entity,
                    parent_entity_refs=item.parent_entity_refs,
                )
                for item in walk.items
            ],
        )

    # ─── Writes (not supported) ──────────────────────────────────

    async def batch_add_or_update_entities(self, *args: Any, **kwargs: Any) -> NoReturn:
        raise UnsupportedOperationError("batch_add_or_update_entities")
