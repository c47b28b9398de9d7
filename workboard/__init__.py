"""Workboard - project/task workflow engine.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
