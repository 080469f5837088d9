"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Responses never expose password hashes or verification codes

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
