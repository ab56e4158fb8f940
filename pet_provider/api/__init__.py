"""API Layer — FastAPI routes and error handlers over PetProvider.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses (SSE for the change stream)

Design Decisions:
    - Thin routes delegate to the provider (ADR: impureim sandwich)
"""
