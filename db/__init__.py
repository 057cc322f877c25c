"""
db/ - Database Layer
====================
Owns the PostgreSQL connection, schema initialization, and raw SQL execution.
This layer is the lowest in the architecture and has no dependencies on other layers
besides the shared value objects in models/.
"""
