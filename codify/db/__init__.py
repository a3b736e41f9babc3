"""Database Infrastructure — SQLAlchemy Base and session factory helpers.

Invariants:
    - Single async engine per process (initialized via init_db)
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for PostgreSQL; aiosqlite for the test suite
"""
