"""Catalog Schemas — Pydantic models for listing, pagination and ancestry contracts.

Invariants:
    - Python attributes are snake_case; model_dump(by_alias=True) yields the camelCase wire shape
    - limit/offset are non-negative integers; the after cursor stays opaque here
    - Entity documents pass through as plain dicts (never re-modeled)

Design Decisions:
    - alias_generator over per-field aliases: one rule for every contract
    - populate_by_name: callers may build models with either spelling
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CatalogModel(BaseModel):
    """Shared config: camelCase aliases, snake_case attributes."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EntityPagination(CatalogModel):
    """Pagination request. Fields encoded in `after` override limit/offset."""
    limit: int | None = Field(default=None, ge=0)
    offset: int | None = Field(default=None, ge=0)
    after: str | None = None


class PageInfo(CatalogModel):
    has_next_page: bool = False
    end_cursor: str | None = None


class EntitiesResponse(CatalogModel):
    entities: list[dict[str, Any]] = []
    page_info: PageInfo = PageInfo()


class EntityAncestryItem(CatalogModel):
    entity: dict[str, Any]
    parent_entity_refs: list[str] = []


class EntityAncestryResponse(CatalogModel):
    root_entity_ref: str
    items: list[EntityAncestryItem] = []
