"""Pydantic Schemas — request/response validation and typed filters for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Filters enumerate the fields each entity may be queried by (extra="forbid")

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
