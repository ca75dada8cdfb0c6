"""Ancestry Walk — worklist and seen-set bookkeeping for parent traversal.

Invariants:
    - Pure dataclass: no IO, no async, no DB (the shell performs the lookups)
    - Each reference is expanded at most once; the seen-set is the single dedup guard
    - Cycles and diamonds terminate; every reachable node appears exactly once in items
    - A parent without a live document is recorded in parent_entity_refs but never expanded
    - An item is appended only after its parents are resolved

Design Decisions:
    - Explicit LIFO worklist instead of recursion: no call-stack growth on deep ancestries
    - Duplicate edges to the same parent collapse to one parent_entity_refs entry
"""

from dataclasses import dataclass, field

from catalog.core.domain_types import Entity, EntityRef
from catalog.core.entity_ref import entity_ref_of


@dataclass
class AncestryItem:
    entity: Entity
    parent_entity_refs: list[EntityRef] = field(default_factory=list)


@dataclass
class AncestryWalk:
    """Traversal state for one ancestry call."""

    root_entity_ref: EntityRef
    todo: list[Entity] = field(default_factory=list)
    seen: set[str] = field(default_factory=set)
    items: list[AncestryItem] = field(default_factory=list)

    @classmethod
    def start(cls, root_entity: Entity) -> "AncestryWalk":
        root_ref = entity_ref_of(root_entity)
        return cls(root_entity_ref=root_ref, todo=[root_entity], seen={root_ref})

    @property
    def done(self) -> bool:
        return not self.todo

    def next(self) -> tuple[Entity, EntityRef]:
        """Pop the next document to expand, with its reference."""
        current = self.todo.pop()
        current_ref = entity_ref_of(current)
        self.seen.add(current_ref)
        return current, current_ref

    def visit(
        self, current: Entity, parents: list[tuple[str, Entity | None]],
    ) -> AncestryItem:
        """Record current's direct parents and queue the unseen live ones."""
        parent_refs: list[EntityRef] = []
        for parent_ref, parent_entity in parents:
            if parent_ref in parent_refs:
                continue
            parent_refs.append(EntityRef(parent_ref))
            if parent_entity is None or parent_ref in self.seen:
                continue
            self.seen.add(parent_ref)
            self.todo.append(parent_entity)

        item = AncestryItem(entity=current, parent_entity_refs=parent_refs)
        self.items.append(item)
        return item
