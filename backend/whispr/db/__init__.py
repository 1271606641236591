"""Database Metadata - SQLAlchemy Base shared by the relational snapshot backend.

Invariants:
    - Only used when persistence_backend == "database"

Design Decisions:
    - asyncpg driver for PostgreSQL, aiosqlite for tests
"""
