"""API Layer — FastAPI routes, dependencies and error handlers.

Design Decisions:
    - Thin routes delegate to CardService (ADR: ExMA impureim sandwich)
"""
