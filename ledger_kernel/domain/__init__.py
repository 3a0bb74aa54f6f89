"""Pure domain helpers shared by ingestion and reporting. ZERO I/O."""
