"""Infrastructure Layer - database session manager, logging, live fan-out hub.

Invariants:
    - Store exceptions are mapped to core/errors.py types before leaving this layer
    - Process-local shared state (the fan-out table) is guarded by a lock
"""
