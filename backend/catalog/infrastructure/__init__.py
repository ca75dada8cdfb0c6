"""Infrastructure Layer — database sessions, SQL lowering, and logging.

Invariants:
    - Infrastructure never holds catalog business rules (those live in core/)
    - All SQLAlchemy errors mapped to DatabaseError at the session boundary

Design Decisions:
    - Store-specific code (SQL predicate lowering) kept here so core/ stays store-agnostic
"""
