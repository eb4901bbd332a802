"""
CivicMap Backend — Pydantic Response Schemas
=============================================

What:  Pydantic models defining the JSON contract consumed by the map frontend.
How:   FastAPI serializes these by alias, which yields the frontend's field
       names (parkingId, parkType, isValid).

Design Decision:
    Schemas are separate from the stored document models in models/documents.py:
    storage names (parking_id, parktype) and the storage key never leak into
    the API, and the rename table lives in exactly one place (the aliases below
    plus the mappers).
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BulletinView(BaseModel):
    """
    What:  One announcement.
    Who:   Items of GET /welcome/bulletins.
    """
    id: int = Field(description="Bulletin number")
    title: Optional[str] = Field(description="Bulletin title (null if stored as null)")
    content: Optional[str] = Field(description="Bulletin body (null if stored as null)")


class LocationView(BaseModel):
    """
    What:  A named location on a road.
    Who:   Items of GET /welcome/locations.

    Latitude/longitude are passed through unvalidated against real-world ranges.
    """
    name: str = Field(description="Location name")
    latitude: float = Field(description="Latitude", examples=[25.0])
    longitude: float = Field(description="Longitude", examples=[121.5])
    road: str = Field(description="Road the location belongs to")
    is_valid: bool = Field(alias="isValid", description="Whether the location is in use")

    model_config = ConfigDict(populate_by_name=True)


class ParkingSpaceView(BaseModel):
    """
    What:  A parking space with its outer boundary ring.
    Who:   Items of GET /welcome/parkingspaces.

    parkType and valid are schema-version-optional: None means "not stored" and
    the route omits them from the JSON instead of emitting null.
    """
    parking_id: str = Field(alias="parkingId", description="Parking space identifier")
    road: str = Field(description="Road name")
    park_type: Optional[str] = Field(default=None, alias="parkType", description="Space type")
    valid: Optional[bool] = Field(default=None, description="Whether the space is in use")
    coordinates: List[List[float]] = Field(
        description="Outer ring of the polygon as [[longitude, latitude], ...]",
        examples=[[[121.5, 25.0], [121.5001, 25.0], [121.5001, 25.0001], [121.5, 25.0]]],
    )

    model_config = ConfigDict(populate_by_name=True)


class WelcomeResponse(BaseModel):
    """Body of GET /welcome: the welcome file contents, verbatim."""
    message: str = Field(description="Welcome text")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "missing_field", "not_found")
        message: Human-readable description
        details: The underlying fault detail (collection, field, types, driver message)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "geometry_error",
            "message": "Invalid polygon geometry in 'parklocations': coordinates is empty",
            "details": {"collection": "parklocations", "field": "location.coordinates"},
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Underlying fault detail")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and document store status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    store: str = Field(description="Document store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
