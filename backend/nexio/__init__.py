"""
Nexio Backend — Application Package Initializer
================================================

What: Marks the `nexio` directory as a Python package.
Who:  Imported by uvicorn (`nexio.main:app`), Alembic, pytest, and the client SDK.

Architecture Note:
    The service follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, identity, status codes
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← presence checks, shaping, fan-out
    ├─────────────────────────────────────┤
    │        Storage (Data Access)        │  ← CRUD + counter statements
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    `nexio.client` sits outside the stack: it talks to the routes over HTTP
    exactly as the mobile app does.
"""

__version__ = "1.0.0"
