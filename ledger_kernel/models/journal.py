"""
Module: ledger_kernel.models.journal
Responsibility: ORM models for the journal storage read by the report
    builder: journal headers (documents), journal items (postings) and the
    hierarchy code titles used for header labeling.
Architecture position: Kernel > Models.  Imports only from db/base.py.

Invariants enforced:
    - debit and credit are Numeric(38, 9), never float.
    - A journal's ``code`` is its document number within a fiscal year.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import (
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import Base, UUIDString


class JournalStatus(str, Enum):
    """Lifecycle status of a journal document."""

    DRAFT = "draft"
    TEMPORARY = "temporary"
    PERMANENT = "permanent"


class CodeKind(str, Enum):
    """Which hierarchy level a code title belongs to."""

    GROUP = "group"
    GENERAL = "general"
    SPECIFIC = "specific"
    DETAIL = "detail"


class Journal(Base):
    """Journal document header."""

    __tablename__ = "journals"

    __table_args__ = (
        Index("idx_journals_fiscal_year", "fiscal_year_id"),
        Index("idx_journals_date", "date"),
        Index("idx_journals_code", "code"),
    )

    fiscal_year_id: Mapped[str] = mapped_column(String(64), nullable=False)

    # Document number; nullable for unnumbered drafts
    code: Mapped[int | None] = mapped_column(Integer, nullable=True)

    journal_date: Mapped[date] = mapped_column("date", Date, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=JournalStatus.DRAFT.value,
    )

    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    items: Mapped[list[JournalItem]] = relationship(
        back_populates="journal",
        order_by="JournalItem.line_seq",
    )


class JournalItem(Base):
    """A single posting line of a journal document."""

    __tablename__ = "journal_items"

    __table_args__ = (
        Index("idx_journal_items_journal", "journal_id"),
        Index("idx_journal_items_account_code", "account_code"),
    )

    journal_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("journals.id"),
        nullable=False,
    )

    line_seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    account_code: Mapped[str] = mapped_column(String(32), nullable=False)

    detail_code: Mapped[str | None] = mapped_column(String(32), nullable=True)

    debit: Mapped[Decimal] = mapped_column(
        Numeric(38, 9),
        nullable=False,
        default=Decimal("0"),
    )

    credit: Mapped[Decimal] = mapped_column(
        Numeric(38, 9),
        nullable=False,
        default=Decimal("0"),
    )

    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    journal: Mapped[Journal] = relationship(back_populates="items")


class HierarchyCode(Base):
    """Title of a group/general/specific/detail code."""

    __tablename__ = "hierarchy_codes"

    __table_args__ = (
        UniqueConstraint("kind", "code", name="uq_hierarchy_code_kind_code"),
    )

    kind: Mapped[str] = mapped_column(String(20), nullable=False)

    code: Mapped[str] = mapped_column(String(32), nullable=False)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
