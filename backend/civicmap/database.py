"""
CivicMap Backend — Document Store Access
=========================================

What:  The process-wide MongoDB client, the one query primitive the services
       need, and the FastAPI dependency that hands the store to routes.
How:   connect_store() builds one AsyncMongoClient during the lifespan startup,
       pings it (with a bounded tenacity retry) and stores it on app.state.
       Every request reuses it through get_store(); nothing reconnects per request.
Who:   Lifespan (connect/close), health route (ping), CivicDataService (find_all).

Query primitive:
    find_all(collection, exclude=[...])
    → db[collection].find({}, {field: 0 for field in exclude})
    Full-collection scan in storage iteration order. No sort, filter, index or
    aggregation is involved.

Failure translation:
    Any pymongo.errors.PyMongoError (server selection timeout, network error,
    auth failure, ...) becomes StoreConnectionError. At startup that error stops
    the process; per request it becomes a 500 through the global handler.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from civicmap.config import settings
from civicmap.exceptions import StoreConnectionError

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    Thin wrapper around one AsyncMongoClient and its target database.

    The driver's client is safe to share across concurrent requests; this
    wrapper adds no mutable state of its own.
    """

    def __init__(self, client: AsyncMongoClient, database_name: str):
        self.client = client
        self.database = client[database_name]
        self.database_name = database_name

    async def find_all(
        self,
        collection: str,
        exclude: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Fetch every document of a collection, optionally excluding fields.

        Args:
            collection: Collection name.
            exclude: Field names to project away (e.g. ["_id"]).

        Returns:
            Raw documents as dicts, in storage iteration order. Empty list for
            an empty collection.

        Raises:
            StoreConnectionError: The store could not answer the query.
        """
        projection = {field: 0 for field in exclude} if exclude else None
        try:
            cursor = self.database[collection].find({}, projection)
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(
                "Query on %s.%s failed: %s",
                self.database_name,
                collection,
                str(e),
            )
            raise StoreConnectionError(
                message=f"Could not read the '{collection}' collection from the document store",
                context={
                    "collection": collection,
                    "error_type": type(e).__name__,
                    "error": str(e),
                },
            ) from e

    async def ping(self) -> None:
        """Round-trip a ping command; raises PyMongoError if the server is unreachable."""
        await self.client.admin.command("ping")

    async def close(self) -> None:
        """Close all pooled connections."""
        await self.client.close()


async def connect_store() -> DocumentStore:
    """
    Create the shared client and verify the store answers.

    When:    Once, during application startup (lifespan).
    How:     Pings up to STORE_CONNECT_ATTEMPTS times with exponential backoff
             and jitter. Only this startup check retries; request-time queries
             never do.

    Raises:
        StoreConnectionError: Still unreachable after the last attempt.
    """
    client = AsyncMongoClient(
        settings.mongodb_url,
        serverSelectionTimeoutMS=settings.store_server_selection_timeout_ms,
        appname="civicmap",
    )
    store = DocumentStore(client, settings.mongodb_database)

    try:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(PyMongoError),
            stop=stop_after_attempt(settings.store_connect_attempts),
            wait=wait_exponential_jitter(
                initial=settings.store_connect_min_wait,
                max=settings.store_connect_max_wait,
                jitter=1,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                await store.ping()
    except PyMongoError as e:
        logger.error(
            "Document store unreachable after %d attempt(s): %s",
            settings.store_connect_attempts,
            str(e),
        )
        await client.close()
        raise StoreConnectionError(
            message="Could not connect to the document store",
            context={
                "database": settings.mongodb_database,
                "attempts": settings.store_connect_attempts,
                "error_type": type(e).__name__,
                "error": str(e),
            },
        ) from e

    logger.info("Connected to document store, database=%s", settings.mongodb_database)
    return store


def get_store(request: Request) -> DocumentStore:
    """
    FastAPI dependency returning the process-wide store created at startup.

    Example usage in a route:
        @router.get("/things")
        async def list_things(store: DocumentStore = Depends(get_store)):
            return await store.find_all("things")
    """
    return request.app.state.store
