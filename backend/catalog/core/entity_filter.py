"""Entity Filters — tagged filter tree compiled to an immutable predicate IR.

Invariants:
    - Pure functions: no IO, no async, no DB
    - Filter trees are explicit tagged variants; shape probing happens only in parse_filter
    - compile_filter is exhaustive: any unknown node or malformed node content
      raises InvalidFilterError
    - Keys and values compare case-insensitively (lower-cased at compile time)
    - match_value_exists=False is the literal negation of the positive leaf condition
    - Empty AND matches everything; empty OR matches nothing

Design Decisions:
    - Predicate IR is store-agnostic: infrastructure/sql_predicate.py lowers it to SQL,
      evaluate_predicate lowers it to an in-memory check (reference evaluator)
    - Empty match_value_in treated like no values (key-exists check)
    - Frozen dataclasses: filters and predicates are hashable and safe to share
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Union

from catalog.core.errors import InvalidFilterError


# ─── Filter Tree (caller input) ──────────────────────────────────

@dataclass(frozen=True)
class EntitiesSearchFilter:
    """Leaf: match entities by a fact key and optionally its values."""
    key: str
    match_value_in: tuple[str, ...] | None = None
    match_value_exists: bool = True


@dataclass(frozen=True)
class AllOfFilter:
    """All sub-filters must hold."""
    all_of: tuple["EntityFilter", ...]


@dataclass(frozen=True)
class AnyOfFilter:
    """At least one sub-filter must hold."""
    any_of: tuple["EntityFilter", ...]


EntityFilter = Union[EntitiesSearchFilter, AllOfFilter, AnyOfFilter]


# ─── Predicate IR (compiler output) ──────────────────────────────

@dataclass(frozen=True)
class MatchAll:
    """Every entity matches."""


@dataclass(frozen=True)
class HasFact:
    """Entity has a fact with this key (and, if values is set, one of these values)."""
    key: str
    values: frozenset[str] | None = None


@dataclass(frozen=True)
class Negate:
    operand: "Predicate"


@dataclass(frozen=True)
class Conjunction:
    operands: tuple["Predicate", ...]


@dataclass(frozen=True)
class Disjunction:
    operands: tuple["Predicate", ...]


Predicate = Union[MatchAll, HasFact, Negate, Conjunction, Disjunction]


# ─── Compilation ─────────────────────────────────────────────────

def _compile_leaf(leaf: EntitiesSearchFilter) -> Predicate:
    if not isinstance(leaf.key, str) or not leaf.key:
        raise InvalidFilterError("filter key must be a non-empty string")
    match_value_in = leaf.match_value_in
    if match_value_in is not None and (
        not isinstance(match_value_in, (tuple, list))
        or not all(isinstance(v, str) for v in match_value_in)
    ):
        raise InvalidFilterError(
            f"match_value_in for '{leaf.key}' must be a sequence of strings",
        )
    if not isinstance(leaf.match_value_exists, bool):
        raise InvalidFilterError(
            f"match_value_exists for '{leaf.key}' must be a boolean",
        )
    values = None
    if match_value_in:
        values = frozenset(v.lower() for v in match_value_in)
    positive = HasFact(leaf.key.lower(), values)
    if not leaf.match_value_exists:
        return Negate(positive)
    return positive


def _children(children, field: str) -> tuple:
    if not isinstance(children, (tuple, list)):
        raise InvalidFilterError(f"{field} must be a sequence of filters")
    return tuple(children)


def compile_filter(entity_filter: EntityFilter | None) -> Predicate:
    """Compile a filter tree into a predicate. None matches everything."""
    if entity_filter is None:
        return MatchAll()
    if isinstance(entity_filter, EntitiesSearchFilter):
        return _compile_leaf(entity_filter)
    if isinstance(entity_filter, AllOfFilter):
        return Conjunction(tuple(
            compile_filter(f) for f in _children(entity_filter.all_of, "all_of")
        ))
    if isinstance(entity_filter, AnyOfFilter):
        return Disjunction(tuple(
            compile_filter(f) for f in _children(entity_filter.any_of, "any_of")
        ))
    raise InvalidFilterError(
        f"unrecognized filter node {type(entity_filter).__name__}",
    )


# ─── In-memory lowering ──────────────────────────────────────────

def _evaluate(predicate: Predicate, facts: list[tuple[str, str | None]]) -> bool:
    if isinstance(predicate, MatchAll):
        return True
    if isinstance(predicate, HasFact):
        return any(
            key == predicate.key
            and (predicate.values is None or value in predicate.values)
            for key, value in facts
        )
    if isinstance(predicate, Negate):
        return not _evaluate(predicate.operand, facts)
    if isinstance(predicate, Conjunction):
        return all(_evaluate(p, facts) for p in predicate.operands)
    if isinstance(predicate, Disjunction):
        return any(_evaluate(p, facts) for p in predicate.operands)
    raise InvalidFilterError(f"unrecognized predicate {type(predicate).__name__}")


def evaluate_predicate(
    predicate: Predicate, facts: Iterable[tuple[str, str | None]],
) -> bool:
    """Evaluate a predicate against one entity's (key, value) facts."""
    normalized = [
        (key.lower(), value.lower() if value is not None else None)
        for key, value in facts
    ]
    return _evaluate(predicate, normalized)


# ─── Parsing (JSON-like input boundary) ──────────────────────────

_LEAF_FIELDS = {"key", "matchValueIn", "matchValueExists"}


def _parse_leaf(raw: Mapping) -> EntitiesSearchFilter:
    unknown = set(raw) - _LEAF_FIELDS
    if unknown:
        raise InvalidFilterError(f"unknown leaf fields {sorted(unknown)}")
    key = raw["key"]
    if not isinstance(key, str) or not key:
        raise InvalidFilterError("key must be a non-empty string")

    values = raw.get("matchValueIn")
    if values is not None:
        if isinstance(values, str) or not isinstance(values, (list, tuple)):
            raise InvalidFilterError(f"matchValueIn for '{key}' must be a list")
        if not all(isinstance(v, str) for v in values):
            raise InvalidFilterError(f"matchValueIn for '{key}' must contain strings")
        values = tuple(values)

    exists = raw.get("matchValueExists", True)
    if exists is None:
        exists = True
    if not isinstance(exists, bool):
        raise InvalidFilterError(f"matchValueExists for '{key}' must be a boolean")
    return EntitiesSearchFilter(key, values, exists)


def _parse_children(raw: Mapping, field: str) -> tuple[EntityFilter, ...]:
    if set(raw) != {field}:
        raise InvalidFilterError(f"'{field}' node must not carry other fields")
    children = raw[field]
    if not isinstance(children, (list, tuple)):
        raise InvalidFilterError(f"'{field}' must be a list of filters")
    return tuple(parse_filter(child) for child in children)


def parse_filter(raw: Mapping | None) -> EntityFilter | None:
    """Convert a JSON-like filter ({key}, {allOf}, {anyOf}) into filter variants."""
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise InvalidFilterError(f"expected an object, got {type(raw).__name__}")

    markers = {"key", "allOf", "anyOf"} & set(raw)
    if len(markers) != 1:
        raise InvalidFilterError(
            "filter must have exactly one of 'key', 'allOf' or 'anyOf'",
        )
    marker = markers.pop()
    if marker == "key":
        return _parse_leaf(raw)
    if marker == "allOf":
        return AllOfFilter(_parse_children(raw, "allOf"))
    return AnyOfFilter(_parse_children(raw, "anyOf"))


def parse_filter_params(expressions: Iterable[str]) -> EntityFilter | None:
    """Parse query-string filters: each `a=b,c=d,e` is an AND, expressions are ORed.

    A bare key means "key exists"; repeated keys in one expression merge their values.
    """
    alternatives = []
    for expression in expressions:
        by_key: dict[str, list[str] | None] = {}
        for statement in expression.split(","):
            key, sep, value = statement.partition("=")
            key = key.strip()
            if not key:
                raise InvalidFilterError(
                    f"'{statement}' is not a valid statement "
                    "(expected a string on the form a=b or a= or a)",
                )
            current = by_key.setdefault(key, None)
            if sep:
                by_key[key] = (current or []) + [value.strip()]
        alternatives.append(AllOfFilter(tuple(
            EntitiesSearchFilter(key, tuple(values) if values else None)
            for key, values in by_key.items()
        )))
    if not alternatives:
        return None
    return AnyOfFilter(tuple(alternatives))
