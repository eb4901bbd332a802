"""
CivicMap Backend — Stored Document Models
==========================================

What:  Pydantic models describing the documents as they sit in MongoDB.
How:   The record mappers validate each raw document against one of these
       models and translate validation failures into mapping faults.

Schema tolerance:
    - Unknown fields are ignored, so newer writers can add fields freely.
    - Scalars are strict: a latitude stored as "25.0" is a type mismatch,
      not silently parsed. Integers are accepted where a float is declared.
    - Keys without a default are mandatory even when their value may be null
      (bulletin title/content).

Collections:
    bulletins      → BulletinDocument
    locations      → LocationDocument
    parklocations  → ParkingSpaceDocument (with a GeoJSON PolygonGeometry)
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr

# [longitude, latitude]
Position = List[StrictFloat]
Ring = List[Position]


class StoredDocument(BaseModel):
    """Base for storage-side models: extra fields (incl. the primary key) are dropped."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class BulletinDocument(StoredDocument):
    """A bulletin (announcement). `_id` is projected away by the query."""

    id: StrictInt
    title: Optional[StrictStr]
    content: Optional[StrictStr]


class LocationDocument(StoredDocument):
    """A named point of interest along a road."""

    name: StrictStr
    latitude: StrictFloat
    longitude: StrictFloat
    road: StrictStr
    is_valid: StrictBool = Field(alias="isValid")


class PolygonGeometry(StoredDocument):
    """
    GeoJSON Polygon as stored under `location`.

    coordinates: rings → positions → [longitude, latitude]. Ring 0 is the outer
    boundary; any further rings are holes and are never read, so they are left
    unvalidated. A missing or null `coordinates` reads as None so the mapper can
    report it as a geometry fault. Ring 0 is checked against `Ring` by the mapper.
    """

    type: Optional[StrictStr] = None
    coordinates: Optional[List[Any]] = None


class ParkingSpaceDocument(StoredDocument):
    """
    A parking space polygon.

    `parktype` and `valid` were added in a later schema revision; older
    documents lack them.
    """

    parking_id: StrictStr
    road: StrictStr
    parktype: Optional[StrictStr] = None
    valid: Optional[StrictBool] = None
    location: Optional[PolygonGeometry] = None
