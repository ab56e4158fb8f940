"""Database Metadata — SQLAlchemy Base shared by tables and migrations.

Invariants:
    - One MetaData for the process: create_all and alembic see the same tables

Design Decisions:
    - asyncpg driver for PostgreSQL, aiosqlite for SQLite (native async drivers)
"""
