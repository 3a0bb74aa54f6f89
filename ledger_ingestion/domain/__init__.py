"""Pure ingestion types and validators. ZERO I/O."""
