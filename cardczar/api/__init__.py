"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses (or SSE for streams)

Design Decisions:
    - Thin routes delegate to GameService (impureim sandwich lives there)
"""
