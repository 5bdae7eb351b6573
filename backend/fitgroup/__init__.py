"""
FitGroup Backend — Application Package Initializer
==================================================

What: Marks the `fitgroup` directory as a Python package.
Why:  Enables module imports like `from fitgroup.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Lifecycle, Ranking,     │  ← Invariants, transactions
    │   Records, Tags, Webhooks, Files)   │
    ├─────────────────────────────────────┤
    │   Formatters (wire projections)     │  ← ORM entity → response model
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Services receive their database session through their constructor, so
    every layer can be tested against an in-memory database.
"""

__version__ = "1.0.0"
