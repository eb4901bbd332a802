"""
CivicMap Backend — Civic Data Service (Query Service)
======================================================

What:  One read operation per resource: bulletins, locations, parking spaces.
How:   Full-collection find through the shared DocumentStore, storage key
       projected away where the stored shape carries it, every document run
       through its record mapper.
Who:   Called by the /welcome route handlers.

Guarantees:
    - Read-only and idempotent; every call reads the current store state.
    - Results keep storage iteration order (no sort is applied).
    - Empty collection → empty list.
    - All-or-nothing: the first store or mapping fault aborts the call and
      propagates unchanged (StoreConnectionError, MissingFieldError,
      TypeMismatchError, GeometryError). No partial list is ever returned.
"""

import logging
from typing import List

from civicmap.config import settings
from civicmap.database import DocumentStore
from civicmap.schemas.civic import BulletinView, LocationView, ParkingSpaceView
from civicmap.services.mappers import map_bulletin, map_location, map_parking_space

logger = logging.getLogger(__name__)


class CivicDataService:
    """
    Query service bound to the process-wide document store.

    Instances hold no per-request state; the route dependency builds one per
    request around the shared store.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    async def list_bulletins(self) -> List[BulletinView]:
        """Return every bulletin, storage key excluded."""
        collection = settings.bulletins_collection
        docs = await self.store.find_all(collection, exclude=[settings.store_key_field])
        logger.info("Fetched %d bulletins", len(docs))
        for doc in docs:
            logger.debug("bulletin: %s", doc)
        return [map_bulletin(doc, collection=collection) for doc in docs]

    async def list_locations(self) -> List[LocationView]:
        """Return every location, storage key excluded."""
        collection = settings.locations_collection
        docs = await self.store.find_all(collection, exclude=[settings.store_key_field])
        logger.info("Fetched %d locations", len(docs))
        for doc in docs:
            logger.debug("location: %s", doc)
        return [map_location(doc, collection=collection) for doc in docs]

    async def list_parking_spaces(self) -> List[ParkingSpaceView]:
        """
        Return every parking space with its outer boundary ring.

        No projection: the parking mapper reads only the fields it renames,
        so the storage key never reaches the response.
        """
        collection = settings.parking_collection
        docs = await self.store.find_all(collection)
        logger.info("Fetched %d parking spaces", len(docs))
        for doc in docs:
            logger.debug(
                "parking space: id=%s road=%s parktype=%s valid=%s",
                doc.get("parking_id"),
                doc.get("road"),
                doc.get("parktype"),
                doc.get("valid"),
            )
        return [
            map_parking_space(
                doc,
                include_park_type=settings.parking_include_park_type,
                include_valid=settings.parking_include_valid,
                collection=collection,
            )
            for doc in docs
        ]
