"""Services Layer - async workflow components composed by the orchestrator.

Invariants:
    - Every mutation runs authorize -> validate -> commit -> notify/broadcast, in that order
    - Side effects (notifications, live events) never run before commit and never raise
"""
