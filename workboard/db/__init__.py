"""Database Declarative Base.

Invariants:
    - Every ORM model inherits from db.base.Base
"""
