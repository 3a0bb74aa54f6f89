"""
Ledger Kernel - shared infrastructure for the ledger report builder.

Provides:
- Structured JSON logging
- Typed exception hierarchy with machine-readable codes
- Injectable clock
- SQLAlchemy models and read-only selectors for journal data
"""

__version__ = "0.1.0"
