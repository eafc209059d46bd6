# src/rjilat/db/__init__.py
"""Database engine, sessions and transaction helpers."""

from .session import Base, SessionLocal, get_db
from .transaction import transaction

__all__ = ["Base", "SessionLocal", "get_db", "transaction"]
