"""Database Infrastructure — SQLAlchemy declarative base shared by all ORM models.

Invariants:
    - All sessions are async (AsyncSession), provided by infrastructure/database.py
"""
