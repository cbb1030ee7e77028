"""
Wedding Gallery Backend — Application Package Initializer
==========================================================

What: Marks the `wedding_api` directory as a Python package.
Who:  Imported by uvicorn (`wedding_api.main:app`), Alembic, and pytest.

Architecture Note:
    The backend is split into the same thin layers as any FastAPI service:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Blessings, Media)       │  ← presence checks, SDK calls
    ├─────────────────────────────────────┤
    │   Stores (memory | database)        │  ← blessing persistence
    ├─────────────────────────────────────┤
    │   Schemas & Models (Data)           │  ← Pydantic + SQLAlchemy ORM
    └─────────────────────────────────────┘

    Routes never talk to Cloudinary or the database directly; they receive
    a BlessingService and a MediaGateway through FastAPI dependencies.
"""

__version__ = "1.0.0"
