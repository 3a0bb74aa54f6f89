"""
Module: ledger_kernel.selectors.base
Responsibility: Common base for read-only journal queries.
Architecture position: Kernel > Selectors.  May import from db/ and models/.

Invariants enforced:
    - Selectors only read: no add, delete, flush or commit.
    - The caller owns the session and its transaction.
    - Results are plain dicts, never ORM instances, so they can cross into
      ingestion without holding a session open.
"""

from abc import ABC

from sqlalchemy.orm import Session


class BaseSelector(ABC):
    def __init__(self, session: Session):
        self.session = session
