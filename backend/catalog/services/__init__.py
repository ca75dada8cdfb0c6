"""Services Layer — async orchestration of catalog reads against the store.

Invariants:
    - Services own the store round trips; core/ owns the decisions
    - One AsyncSession per service instance, supplied by the caller

Design Decisions:
    - Single EntitiesCatalog facade for the read path (ADR: one entry point per aggregate)
"""
