"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate shape at the system boundary; services only check
      relational existence and uniqueness

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
