"""Repositories - SQLAlchemy implementations of the store Protocols in core/.

Invariants:
    - One repository per entity collection, bound to one AsyncSession
    - Repositories flush but never commit; the workflow owns the commit
    - Reads return fresh rows (populate_existing); no entity state is cached across operations
"""
