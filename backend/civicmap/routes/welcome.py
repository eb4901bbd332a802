"""
CivicMap Backend — Welcome Route Handlers
==========================================

What:  GET /welcome and the three civic data listings under it.
How:   Thin handlers: call the service, return its values. Faults propagate
       to the global exception handlers in main.py, which produce the
       404/500 error bodies.
Who:   Called by the map frontend.

Route Inventory:
    GET /welcome                → {"message": "..."}        404 / 500
    GET /welcome/bulletins      → [BulletinView, ...]       500
    GET /welcome/locations      → [LocationView, ...]       500
    GET /welcome/parkingspaces  → [ParkingSpaceView, ...]   500

All paths are mounted under settings.api_prefix (see main.create_app).
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from civicmap.database import DocumentStore, get_store
from civicmap.schemas.civic import (
    BulletinView,
    ErrorResponse,
    LocationView,
    ParkingSpaceView,
    WelcomeResponse,
)
from civicmap.services.civic_data_service import CivicDataService
from civicmap.services.welcome_service import welcome_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/welcome", tags=["Welcome"])

_SERVER_ERROR = {500: {"description": "Store or data-integrity fault", "model": ErrorResponse}}


def get_civic_data_service(store: DocumentStore = Depends(get_store)) -> CivicDataService:
    """Dependency: a query service bound to the shared document store."""
    return CivicDataService(store)


@router.get(
    "",
    response_model=WelcomeResponse,
    responses={
        404: {"description": "Welcome file missing", "model": ErrorResponse},
        500: {"description": "Welcome file unreadable", "model": ErrorResponse},
    },
    summary="Welcome message",
)
async def get_welcome_message() -> WelcomeResponse:
    """Return the contents of the welcome file."""
    message = await welcome_service.get_welcome_text()
    return WelcomeResponse(message=message)


@router.get(
    "/bulletins",
    response_model=List[BulletinView],
    responses=_SERVER_ERROR,
    summary="List all bulletins",
)
async def list_bulletins(
    service: CivicDataService = Depends(get_civic_data_service),
) -> List[BulletinView]:
    """Every bulletin in storage order; title and content may be null."""
    return await service.list_bulletins()


@router.get(
    "/locations",
    response_model=List[LocationView],
    responses=_SERVER_ERROR,
    summary="List all named locations",
)
async def list_locations(
    service: CivicDataService = Depends(get_civic_data_service),
) -> List[LocationView]:
    """Every named location in storage order."""
    return await service.list_locations()


@router.get(
    "/parkingspaces",
    response_model=List[ParkingSpaceView],
    # parkType/valid missing from the stored document are left out of the JSON
    response_model_exclude_none=True,
    responses=_SERVER_ERROR,
    summary="List all parking spaces with their outer boundary ring",
)
async def list_parking_spaces(
    service: CivicDataService = Depends(get_civic_data_service),
) -> List[ParkingSpaceView]:
    """
    Parking spaces for the map layer.

    coordinates is the polygon's outer ring as [[longitude, latitude], ...];
    holes are not returned.
    """
    return await service.list_parking_spaces()
