"""SQLAlchemy declarative base for journal storage."""

from ledger_kernel.db.base import Base, UUIDString

__all__ = ["Base", "UUIDString"]
