"""
CivicMap Backend — Application Package Initializer
===================================================

What: Read-only API serving bulletins, named locations and parking-space
      polygons from MongoDB to the map frontend, plus a static welcome message.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Query + Record Mappers) │  ← Projection, shaping, faults
    ├─────────────────────────────────────┤
    │   Models (storage) & Schemas (API)  │  ← Pydantic on both sides
    ├─────────────────────────────────────┤
    │       Database (Document Store)     │  ← One shared AsyncMongoClient
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
