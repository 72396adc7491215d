"""Pydantic Schemas — request/response contracts for the card endpoints.

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence (ADR: DDD boundary)
"""
