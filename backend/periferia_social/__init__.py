"""
Periferia Social Backend — Application Package Initializer
==========================================================

What: Marks the `periferia_social` directory as a Python package.
Why:  Enables module imports like `from periferia_social.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    This backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │     Routes + Dependencies (API)     │  ← HTTP concerns, bearer token parsing
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Auth, posts, likes, ownership checks
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Explicit Database handle, async sessions
    └─────────────────────────────────────┘

    Routes never touch the ORM directly and services never build HTTP responses.
    The global exception handlers in main.py are the only place where a failure
    becomes a status code.
"""

__version__ = "1.0.0"
