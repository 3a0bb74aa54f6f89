"""
Module: ledger_kernel.db.base
Responsibility: Declarative base for the journal storage tables read by
    ``SqlLedgerSource``.  Fixes the primary key convention and the column
    type used for amounts.
Architecture position: Kernel > DB.  MUST NOT import from models/,
    selectors/ or outer layers.
Invariants enforced:
    - Decimal columns are Numeric(38, 9); amounts never pass through float.
    - Primary keys are uuid4 values stored as String(36) so the same models
      run on SQLite and PostgreSQL.
"""

from decimal import Decimal
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """UUID <-> String(36)."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else UUID(value)


class Base(DeclarativeBase):
    """Base for journal storage models; every table gets a UUID ``id``."""

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9),
        UUID: UUIDString(),
    }

    id: Mapped[UUID] = mapped_column(
        UUIDString(),
        primary_key=True,
        default=uuid4,
    )
