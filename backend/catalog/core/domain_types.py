"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - EntityId is the stable identity assigned by ingestion — never reused
    - EntityRef is a `kind:namespace/name` string — unique among live entities, may change over time
    - Entity documents are opaque JSON objects; the catalog only reads kind/metadata from them

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - Entity kept as a plain dict alias: documents are owned upstream, not modeled here
"""

from typing import Any, Callable, NamedTuple, NewType


# ─── Identity Types ──────────────────────────────────────────────

EntityId = NewType("EntityId", str)
EntityRef = NewType("EntityRef", str)


# ─── Documents ───────────────────────────────────────────────────

Entity = dict[str, Any]

# Reshapes one entity document (e.g. partial field projection)
EntityProjector = Callable[[Entity], Entity]

DEFAULT_NAMESPACE = "default"


class EntityName(NamedTuple):
    """The three parts of an entity reference."""
    kind: str
    namespace: str
    name: str
