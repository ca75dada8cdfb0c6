"""Entity References — parse and stringify `kind:namespace/name` references.

Invariants:
    - Pure functions: no IO, no async, no DB
    - Stringified references are fully lower-cased (refs compare case-insensitively)
    - Namespace defaults to "default" when a document or ref omits it
    - A stored document without kind or metadata.name is corrupt (DeserializationError)

Design Decisions:
    - parse -> stringify round trip used to normalize caller-supplied refs before lookup
"""

from catalog.core.domain_types import DEFAULT_NAMESPACE, Entity, EntityName, EntityRef
from catalog.core.errors import DeserializationError, InvalidEntityRefError


def stringify_entity_ref(name: EntityName) -> EntityRef:
    """Format entity name parts as a normalized reference string."""
    return EntityRef(
        f"{name.kind.lower()}:{name.namespace.lower()}/{name.name.lower()}",
    )


def parse_entity_ref(
    ref: str,
    default_kind: str | None = None,
    default_namespace: str = DEFAULT_NAMESPACE,
) -> EntityName:
    """Parse `kind:namespace/name`, `kind:name`, `namespace/name` or `name`.

    Missing parts fall back to the defaults; a missing kind without a
    default_kind is an error.
    """
    if not isinstance(ref, str) or not ref.strip():
        raise InvalidEntityRefError(str(ref), "reference must be a non-empty string")

    kind, sep, rest = ref.partition(":")
    if not sep:
        kind, rest = default_kind or "", ref
    namespace, sep, name = rest.partition("/")
    if not sep:
        namespace, name = default_namespace, rest

    if "/" in kind:
        raise InvalidEntityRefError(ref, "kind must precede namespace")
    if not kind:
        raise InvalidEntityRefError(ref, "missing kind")
    if not namespace:
        raise InvalidEntityRefError(ref, "empty namespace")
    if not name or "/" in name or ":" in name:
        raise InvalidEntityRefError(ref, "malformed name")
    return EntityName(kind, namespace, name)


def entity_ref_of(entity: Entity) -> EntityRef:
    """Compute the reference of a stored entity document."""
    metadata = entity.get("metadata") if isinstance(entity, dict) else None
    kind = entity.get("kind") if isinstance(entity, dict) else None
    if not isinstance(kind, str) or not kind:
        raise DeserializationError("entity document has no kind")
    if not isinstance(metadata, dict) or not isinstance(metadata.get("name"), str):
        raise DeserializationError("entity document has no metadata.name")
    namespace = metadata.get("namespace") or DEFAULT_NAMESPACE
    if not isinstance(namespace, str):
        raise DeserializationError("entity document has a non-string metadata.namespace")
    return stringify_entity_ref(EntityName(kind, namespace, metadata["name"]))
