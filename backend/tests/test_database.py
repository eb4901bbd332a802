"""
CivicMap Backend — Document Store Unit Tests
=============================================

What:  Tests for DocumentStore.find_all and connect_store.
How:   The pymongo client is replaced with MagicMock/AsyncMock objects.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from pymongo.errors import ServerSelectionTimeoutError

from civicmap.database import DocumentStore, connect_store
from civicmap.exceptions import StoreConnectionError


def _store_with_collection():
    client = MagicMock()
    store = DocumentStore(client, "announcement_db")
    # MagicMock returns the same child for every key
    collection = store.database.__getitem__.return_value
    return store, collection


class TestFindAll:

    @pytest.mark.asyncio
    async def test_excludes_requested_fields(self):
        store, collection = _store_with_collection()
        collection.find.return_value.to_list = AsyncMock(return_value=[{"id": 1}])

        docs = await store.find_all("bulletins", exclude=["_id"])

        assert docs == [{"id": 1}]
        collection.find.assert_called_once_with({}, {"_id": 0})

    @pytest.mark.asyncio
    async def test_no_projection_without_exclude(self):
        store, collection = _store_with_collection()
        collection.find.return_value.to_list = AsyncMock(return_value=[])

        docs = await store.find_all("parklocations")

        assert docs == []
        collection.find.assert_called_once_with({}, None)

    @pytest.mark.asyncio
    async def test_driver_error_becomes_store_connection_error(self):
        store, collection = _store_with_collection()
        collection.find.return_value.to_list = AsyncMock(
            side_effect=ServerSelectionTimeoutError("no servers found")
        )

        with pytest.raises(StoreConnectionError) as exc_info:
            await store.find_all("locations", exclude=["_id"])

        assert exc_info.value.context["collection"] == "locations"
        assert exc_info.value.context["error_type"] == "ServerSelectionTimeoutError"


class TestConnectStore:

    @pytest.mark.asyncio
    async def test_connects_and_pings_once(self):
        with patch("civicmap.database.AsyncMongoClient") as client_cls:
            client = client_cls.return_value
            client.admin.command = AsyncMock(return_value={"ok": 1})

            store = await connect_store()

        assert store.client is client
        client.admin.command.assert_awaited_once_with("ping")

    @pytest.mark.asyncio
    async def test_unreachable_store_raises_and_closes_client(self, monkeypatch):
        from civicmap.config import settings
        monkeypatch.setattr(settings, "store_connect_attempts", 1)

        with patch("civicmap.database.AsyncMongoClient") as client_cls:
            client = client_cls.return_value
            client.admin.command = AsyncMock(
                side_effect=ServerSelectionTimeoutError("connection refused")
            )
            client.close = AsyncMock()

            with pytest.raises(StoreConnectionError) as exc_info:
                await connect_store()

        client.close.assert_awaited_once()
        assert exc_info.value.context["attempts"] == 1
