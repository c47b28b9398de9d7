"""API Layer - FastAPI routes, identity dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every error leaves as {"error": {...}} JSON with a stable code
"""
