"""
db/ - Database Layer
====================
PostgreSQL connection pool, schema setup, and the key-value tables
that hold subscriber records and the cached quote catalog.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
