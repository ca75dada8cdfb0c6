"""Core Layer — pure catalog logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, infrastructure/, models/ or db/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
    - Filter compilation, cursor codec and ancestry bookkeeping live here;
      the shell only runs the queries around them
"""
