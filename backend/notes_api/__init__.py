"""
Notes API — Application Package Initializer
============================================

What: Marks the `notes_api` directory as a Python package.
Who:  Used by uvicorn (`notes_api.main:app`), the CLI and pytest.

Architecture Note:
    The backend is layered:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Document Store)       │  ← id parsing, document validation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes shape responses and status codes; the store client owns every
    read and write of note documents; failures travel up as exceptions
    and are normalized in one place (see main.register_exception_handlers).
"""

__version__ = "1.0.0"
