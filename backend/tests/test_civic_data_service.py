"""
CivicMap Backend — Civic Data Service Unit Tests
=================================================

What:  Tests for CivicDataService list operations.
How:   Uses the fake_store fixture (no MongoDB needed).

What we test:
    ✅ Projection of the storage key for bulletins/locations, none for parking
    ✅ Storage order preserved
    ✅ Empty collections → empty lists
    ✅ First bad document aborts the whole call (no partial results)
    ✅ Store failures propagate as StoreConnectionError
    ✅ Configurable key field and optional parking fields
"""

import pytest
from unittest.mock import AsyncMock

from civicmap.config import settings
from civicmap.exceptions import GeometryError, MissingFieldError, StoreConnectionError
from civicmap.services.civic_data_service import CivicDataService
from conftest import HOLE_RING, OUTER_RING, make_parking_doc


class TestListBulletins:

    @pytest.mark.asyncio
    async def test_returns_mapped_bulletins_in_storage_order(self, fake_store, store_data):
        store_data["bulletins"].extend([
            {"_id": "k2", "id": 2, "title": "Second", "content": "b"},
            {"_id": "k1", "id": 1, "title": "First", "content": "a"},
        ])

        result = await CivicDataService(fake_store).list_bulletins()

        assert [b.id for b in result] == [2, 1]
        fake_store.find_all.assert_awaited_once_with("bulletins", exclude=["_id"])

    @pytest.mark.asyncio
    async def test_empty_collection_returns_empty_list(self, fake_store):
        result = await CivicDataService(fake_store).list_bulletins()

        assert result == []

    @pytest.mark.asyncio
    async def test_missing_title_fails_whole_call(self, fake_store, store_data):
        store_data["bulletins"].extend([
            {"_id": "k1", "id": 1, "title": "ok", "content": "a"},
            {"_id": "k2", "id": 2, "content": "no title"},
        ])

        with pytest.raises(MissingFieldError) as exc_info:
            await CivicDataService(fake_store).list_bulletins()

        assert exc_info.value.field == "title"

    @pytest.mark.asyncio
    async def test_custom_key_field_is_projected_away(self, fake_store, store_data, monkeypatch):
        monkeypatch.setattr(settings, "store_key_field", "bulletin_key")
        store_data["bulletins"].append(
            {"bulletin_key": "x", "id": 7, "title": "T", "content": "C"}
        )

        result = await CivicDataService(fake_store).list_bulletins()

        assert result[0].id == 7
        fake_store.find_all.assert_awaited_once_with("bulletins", exclude=["bulletin_key"])


class TestListLocations:

    @pytest.mark.asyncio
    async def test_returns_locations(self, fake_store, store_data):
        store_data["locations"].append(
            {"_id": "k", "name": "X", "latitude": 25.0, "longitude": 121.5, "road": "Y", "isValid": True}
        )

        result = await CivicDataService(fake_store).list_locations()

        assert len(result) == 1
        assert result[0].is_valid is True
        fake_store.find_all.assert_awaited_once_with("locations", exclude=["_id"])

    @pytest.mark.asyncio
    async def test_empty_collection_returns_empty_list(self, fake_store):
        assert await CivicDataService(fake_store).list_locations() == []


class TestListParkingSpaces:

    @pytest.mark.asyncio
    async def test_empty_collection_returns_empty_list(self, fake_store):
        """An empty parking collection is not a fault."""
        result = await CivicDataService(fake_store).list_parking_spaces()

        assert result == []

    @pytest.mark.asyncio
    async def test_no_projection_and_outer_ring_only(self, fake_store, store_data):
        store_data["parklocations"].append(
            make_parking_doc(location={"type": "Polygon", "coordinates": [OUTER_RING, HOLE_RING]})
        )

        result = await CivicDataService(fake_store).list_parking_spaces()

        assert result[0].coordinates == OUTER_RING
        fake_store.find_all.assert_awaited_once_with("parklocations")

    @pytest.mark.asyncio
    async def test_geometry_fault_aborts_call(self, fake_store, store_data):
        store_data["parklocations"].extend([
            make_parking_doc(),
            make_parking_doc(parking_id="P-002", location={"type": "Polygon", "coordinates": []}),
        ])

        with pytest.raises(GeometryError):
            await CivicDataService(fake_store).list_parking_spaces()

    @pytest.mark.asyncio
    async def test_optional_fields_follow_settings(self, fake_store, store_data, monkeypatch):
        monkeypatch.setattr(settings, "parking_include_park_type", False)
        store_data["parklocations"].append(make_parking_doc())

        result = await CivicDataService(fake_store).list_parking_spaces()

        assert result[0].park_type is None
        assert result[0].valid is True


class TestStoreFailures:

    @pytest.mark.asyncio
    async def test_store_error_propagates(self, fake_store):
        fake_store.find_all = AsyncMock(
            side_effect=StoreConnectionError(context={"collection": "bulletins"})
        )

        with pytest.raises(StoreConnectionError):
            await CivicDataService(fake_store).list_bulletins()
