"""Unit tests for BookingService against the in-memory collection."""

import asyncio

import pytest

from marketplace_api.models import BookingCreate, BookingStatusUpdate
from marketplace_api.services.booking_service import BookingService
from marketplace_api.services.errors import (
    AlreadyBookedError, InvalidIdError, NotFoundError, StatusRequiredError
)

from conftest import FakeCollection


class RacingCollection(FakeCollection):
    """Existence check always misses, as when two inserts overlap."""

    async def find_one(self, query=None):
        await asyncio.sleep(0)
        return None


@pytest.fixture
async def bookings():
    collection = FakeCollection("bookings")
    await collection.create_index([("serviceId", 1), ("userEmail", 1)], unique=True)
    return BookingService(collection)


@pytest.mark.asyncio
async def test_duplicate_insert_is_mapped_to_already_booked():
    collection = RacingCollection("bookings")
    await collection.create_index([("serviceId", 1), ("userEmail", 1)], unique=True)
    service = BookingService(collection)
    data = BookingCreate(serviceId="s1", userEmail="a@x.com")

    results = await asyncio.gather(
        service.create(data), service.create(data), return_exceptions=True
    )

    assert sum(isinstance(r, AlreadyBookedError) for r in results) == 1
    assert len(collection.docs) == 1


@pytest.mark.asyncio
async def test_sequential_duplicate_is_rejected(bookings):
    data = BookingCreate(serviceId="s1", userEmail="a@x.com")
    await bookings.create(data)

    with pytest.raises(AlreadyBookedError) as exc_info:
        await bookings.create(data)

    assert exc_info.value.details == {"serviceId": "s1", "userEmail": "a@x.com"}


@pytest.mark.asyncio
async def test_is_booked(bookings):
    await bookings.create(BookingCreate(serviceId="s1", userEmail="a@x.com"))

    assert await bookings.is_booked("s1", "a@x.com") is True
    assert await bookings.is_booked("s2", "a@x.com") is False


@pytest.mark.asyncio
async def test_list_results_are_json_ready(bookings):
    await bookings.create(BookingCreate(serviceId="s1", userEmail="a@x.com"))

    [booking] = await bookings.list_for_user("a@x.com")

    assert isinstance(booking["_id"], str)
    assert isinstance(booking["createdAt"], str)


@pytest.mark.asyncio
async def test_update_status_validates_before_parsing_id(bookings):
    with pytest.raises(StatusRequiredError):
        await bookings.update_status("not-an-id", BookingStatusUpdate(status=""))

    with pytest.raises(InvalidIdError):
        await bookings.update_status("not-an-id", BookingStatusUpdate(status="accepted"))


@pytest.mark.asyncio
async def test_update_status_sets_updated_at(bookings):
    result = await bookings.create(BookingCreate(serviceId="s1", userEmail="a@x.com"))

    response = await bookings.update_status(result.insertedId, BookingStatusUpdate(status="accepted"))

    assert response.result.modifiedCount == 1
    stored = bookings.bookings.docs[0]
    assert stored["status"] == "accepted"
    assert "updatedAt" in stored


@pytest.mark.asyncio
async def test_delete_and_delete_unchecked(bookings):
    result = await bookings.create(BookingCreate(serviceId="s1", userEmail="a@x.com"))

    assert (await bookings.delete_unchecked(result.insertedId)).deletedCount == 1
    assert (await bookings.delete_unchecked(result.insertedId)).deletedCount == 0
    with pytest.raises(NotFoundError):
        await bookings.delete(result.insertedId)
