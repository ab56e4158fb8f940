"""Core Layer — contract, URI routing, validation and selection logic. No IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Validation and selection checks return Result; the shell decides to raise

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
