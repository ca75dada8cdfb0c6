"""Pydantic Schemas — request/response contracts for catalog operations.

Invariants:
    - Schemas validate at the system boundary (pagination input, responses)
    - Wire shape is camelCase; Python attributes are snake_case

Design Decisions:
    - Separate from models: schemas are contracts, models are persistence (ADR: DDD boundary)
"""
