"""Entity Projection — build projectors that keep only selected dotted field paths.

Invariants:
    - Pure functions: no IO, no async, no DB
    - Projected documents contain only the requested paths; missing paths are skipped
    - Paths sharing a prefix merge into one nested object
    - The input document is never mutated (values deep-copied)
"""

import copy
from collections.abc import Iterable

from catalog.core.domain_types import Entity, EntityProjector
from catalog.core.errors import InvalidFieldsError

_MISSING = object()


def parse_fields_param(values: Iterable[str]) -> list[str] | None:
    """Flatten `fields=kind,metadata.name` style params. No fields -> None."""
    fields = []
    for value in values:
        for part in value.split(","):
            path = part.strip()
            if not path or any(not segment for segment in path.split(".")):
                raise InvalidFieldsError(f"'{value}' contains an empty field path")
            fields.append(path)
    return fields or None


def _lookup(entity: Entity, segments: list[str]):
    current = entity
    for segment in segments:
        if not isinstance(current, dict) or segment not in current:
            return _MISSING
        current = current[segment]
    return current


def build_fields_projector(fields: list[str]) -> EntityProjector:
    """Return a projector copying only the given dotted paths."""
    if not fields:
        raise InvalidFieldsError("at least one field path is required")
    paths = [field.split(".") for field in fields]

    def project(entity: Entity) -> Entity:
        output: Entity = {}
        for segments in paths:
            value = _lookup(entity, segments)
            if value is _MISSING:
                continue
            target = output
            for segment in segments[:-1]:
                target = target.setdefault(segment, {})
            target[segments[-1]] = copy.deepcopy(value)
        return output

    return project
