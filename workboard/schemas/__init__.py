"""Pydantic Schemas - request/response validation for API endpoints and live payloads.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Domain enums from core/ used for enum fields
"""
