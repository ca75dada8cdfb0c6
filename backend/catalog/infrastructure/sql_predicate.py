"""SQL Predicate Lowering — turns the filter predicate IR into a SQLAlchemy clause.

Invariants:
    - Fact checks are semi-joins (entity_id IN / NOT IN subselect on search); no rows
      are materialized in Python
    - Keys and values compared case-insensitively (lower() on the column side; the IR
      is already lower-cased)
    - Empty conjunction is TRUE, empty disjunction is FALSE
    - Unknown predicate nodes raise InvalidFilterError

Design Decisions:
    - IN over OUTER JOIN: joins multiply rows and degrade badly on SQLite for large sets
    - NOT IN is safe: search.entity_id is NOT NULL, so the subselect never yields NULL
    - lower(key) and lower(value) match the expression indexes declared on SearchFact
"""

from sqlalchemy import and_, false, func, not_, or_, select, true
from sqlalchemy.sql.elements import ColumnElement

from catalog.core.entity_filter import (
    Conjunction, Disjunction, HasFact, MatchAll, Negate, Predicate,
)
from catalog.core.errors import InvalidFilterError
from catalog.models.final_entity import FinalEntity
from catalog.models.search_fact import SearchFact


def _matching_entity_ids(predicate: HasFact):
    """Subselect of entity ids having a fact that satisfies the leaf."""
    conditions = [func.lower(SearchFact.key) == predicate.key]
    if predicate.values is not None:
        values = sorted(predicate.values)
        if len(values) == 1:
            conditions.append(func.lower(SearchFact.value) == values[0])
        else:
            conditions.append(func.lower(SearchFact.value).in_(values))
    return select(SearchFact.entity_id).where(*conditions)


def lower_predicate(
    predicate: Predicate, entity_id=FinalEntity.entity_id,
) -> ColumnElement[bool]:
    """Lower a predicate to a WHERE clause over the given entity id column."""
    if isinstance(predicate, MatchAll):
        return true()
    if isinstance(predicate, HasFact):
        return entity_id.in_(_matching_entity_ids(predicate))
    if isinstance(predicate, Negate):
        if isinstance(predicate.operand, HasFact):
            return entity_id.not_in(_matching_entity_ids(predicate.operand))
        return not_(lower_predicate(predicate.operand, entity_id))
    if isinstance(predicate, Conjunction):
        parts = [lower_predicate(p, entity_id) for p in predicate.operands]
        return and_(*parts) if parts else true()
    if isinstance(predicate, Disjunction):
        parts = [lower_predicate(p, entity_id) for p in predicate.operands]
        return or_(*parts) if parts else false()
    raise InvalidFilterError(f"unrecognized predicate {type(predicate).__name__}")
