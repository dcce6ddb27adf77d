"""Persistence - SQLAlchemy async and in-memory repositories."""

from signalgate.infrastructure.persistence.database import Base, DatabaseManager

__all__ = ["Base", "DatabaseManager"]
