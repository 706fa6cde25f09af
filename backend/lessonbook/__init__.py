"""
LessonBook Backend — Application Package Initializer
=====================================================

What: Marks the `lessonbook` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, collection resolver
    ├─────────────────────────────────────┤
    │    Services (CRUD + Validators)     │  ← storage operations, shape checks
    ├─────────────────────────────────────┤
    │            Schemas (Data)           │  ← Pydantic lesson/order shapes
    ├─────────────────────────────────────┤
    │     Database (Document Store)       │  ← async MongoDB client + handles
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
