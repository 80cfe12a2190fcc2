"""Infrastructure layer — database, token ledger, repository.

This layer depends on stdlib and third-party libs (SQLAlchemy, Alembic).
It must never import from services, commands, or output.
"""
