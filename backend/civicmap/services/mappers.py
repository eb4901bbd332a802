"""
CivicMap Backend — Record Mappers
==================================

What:  Pure functions turning one raw stored document into its API value.
How:   Validate the document against its storage model (models/documents.py),
       translate any pydantic validation failure into a mapping fault, then
       rename fields into the response schema (schemas/civic.py).
Who:   Called by CivicDataService for every fetched document.

Rename table (fixed, the frontend depends on it):
    bulletins      id, title, content             → id, title, content
    locations      name, latitude, longitude,     → same names
                   road, isValid
    parklocations  parking_id                     → parkingId
                   road                           → road
                   parktype (optional)            → parkType (omitted if absent)
                   valid (optional)               → valid (omitted if absent)
                   location.coordinates[0]        → coordinates (outer ring only)

Faults:
    MissingFieldError   a mandatory key is absent
    TypeMismatchError   a value has the wrong type (expected vs actual recorded)
    GeometryError       location absent, no rings, or an empty outer ring
"""

from typing import Any, Dict, List, Mapping, Tuple, Type, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from civicmap.exceptions import (
    GeometryError,
    MissingFieldError,
    RecordMappingError,
    TypeMismatchError,
)
from civicmap.models.documents import (
    BulletinDocument,
    LocationDocument,
    ParkingSpaceDocument,
    Ring,
)
from civicmap.schemas.civic import BulletinView, LocationView, ParkingSpaceView

DocumentT = TypeVar("DocumentT", bound=BaseModel)

BULLETINS = "bulletins"
LOCATIONS = "locations"
PARKING_SPACES = "parklocations"

_OUTER_RING_LOC = ("location", "coordinates", 0)
_ring_adapter = TypeAdapter(Ring)

# pydantic error type → the declared type reported in TypeMismatchError
_EXPECTED_TYPES: Dict[str, str] = {
    "int_type": "integer",
    "string_type": "string",
    "float_type": "number",
    "bool_type": "boolean",
    "list_type": "array",
    "model_type": "object",
    "model_attributes_type": "object",
    "dict_type": "object",
}


def _field_path(loc: tuple) -> str:
    # ("location", "coordinates", 0, 1) → "location.coordinates[0][1]"
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def _translate(
    exc: PydanticValidationError,
    collection: str,
    loc_prefix: Tuple[Any, ...] = (),
) -> RecordMappingError:
    """Turn the first validation error into the matching mapping fault."""
    error = exc.errors()[0]
    field = _field_path(loc_prefix + tuple(error["loc"]))
    if error["type"] == "missing":
        return MissingFieldError(collection=collection, field=field)
    return TypeMismatchError(
        collection=collection,
        field=field,
        expected=_EXPECTED_TYPES.get(error["type"], error["type"]),
        actual=type(error.get("input")).__name__,
        context={"detail": error["msg"]},
    )


def _validate(model: Type[DocumentT], doc: Mapping[str, Any], collection: str) -> DocumentT:
    try:
        return model.model_validate(doc)
    except PydanticValidationError as exc:
        raise _translate(exc, collection) from exc


def _validate_outer_ring(ring: Any, collection: str) -> List[List[float]]:
    try:
        return _ring_adapter.validate_python(ring)
    except PydanticValidationError as exc:
        raise _translate(exc, collection, _OUTER_RING_LOC) from exc


def map_bulletin(doc: Mapping[str, Any], collection: str = BULLETINS) -> BulletinView:
    """
    Map a bulletins document.

    title/content may be null but their keys must exist; a document without
    them raises MissingFieldError instead of emitting null.
    """
    stored = _validate(BulletinDocument, doc, collection)
    return BulletinView(id=stored.id, title=stored.title, content=stored.content)


def map_location(doc: Mapping[str, Any], collection: str = LOCATIONS) -> LocationView:
    """Map a locations document. Integer coordinates are widened to float."""
    stored = _validate(LocationDocument, doc, collection)
    return LocationView(
        name=stored.name,
        latitude=float(stored.latitude),
        longitude=float(stored.longitude),
        road=stored.road,
        is_valid=stored.is_valid,
    )


def map_parking_space(
    doc: Mapping[str, Any],
    include_park_type: bool = True,
    include_valid: bool = True,
    collection: str = PARKING_SPACES,
) -> ParkingSpaceView:
    """
    Map a parklocations document, keeping only the polygon's outer ring.

    Args:
        doc: Raw stored document (its `_id` is ignored).
        collection: Collection name reported in faults.
        include_park_type: Emit `parkType` when the document has `parktype`.
        include_valid: Emit `valid` when the document has it.

    Raises:
        MissingFieldError: parking_id or road absent.
        TypeMismatchError: a field or an outer-ring coordinate has the wrong type.
        GeometryError: location absent, coordinates null or empty, or ring 0 empty.

    Hole rings (coordinates[1:]) are discarded without being validated.
    """
    stored = _validate(ParkingSpaceDocument, doc, collection)

    geometry = stored.location
    if geometry is None:
        raise GeometryError(
            collection=collection,
            reason="location is missing",
            context={"parking_id": stored.parking_id},
        )
    if not geometry.coordinates:
        missing = geometry.coordinates is None
        raise GeometryError(
            collection=collection,
            reason="coordinates is missing" if missing else "coordinates is empty",
            field="location.coordinates",
            context={"parking_id": stored.parking_id},
        )
    outer_ring = _validate_outer_ring(geometry.coordinates[0], collection)
    if not outer_ring:
        raise GeometryError(
            collection=collection,
            reason="outer ring is empty",
            field="location.coordinates[0]",
            context={"parking_id": stored.parking_id},
        )

    return ParkingSpaceView(
        parking_id=stored.parking_id,
        road=stored.road,
        park_type=stored.parktype if include_park_type else None,
        valid=stored.valid if include_valid else None,
        coordinates=[[float(value) for value in position] for position in outer_ring],
    )
