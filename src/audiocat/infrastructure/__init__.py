"""Infrastructure layer — SQLite engine, schema, search index, repositories.

This layer depends on stdlib, SQLAlchemy, and the domain models it persists.
It must never import from services, commands, or output.
"""
