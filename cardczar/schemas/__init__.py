"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Domain limits (hand size, blanks) imported from core/, never duplicated

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
