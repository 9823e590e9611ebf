"""
TutorMatch Backend: Application Package Initializer
=====================================================

What:  Marks the `tutormatch` directory as a Python package.
Who:   Used by uvicorn (`uvicorn tutormatch.main:app`), Alembic and pytest.

Architecture Note:
    The backend is layered the same way for every page:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← query/form parsing, redirects
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← search, dashboard, tutor posts
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic view-models
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never build SQL; services never touch the HTTP request.
"""

__version__ = "1.0.0"
