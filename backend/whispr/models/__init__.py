"""ORM Models - one table per entity for the relational snapshot backend.

Invariants:
    - All models inherit from whispr.db.base.Base
    - Rows are dumb storage; validation happens in the row-to-entity mapping

Design Decisions:
    - Explicit imports per model (no star exports)
"""
