"""
Booking service for the Marketplace API.

Handles booking creation with the one-booking-per-user-per-service rule,
presence checks, listings and status transitions. Status is a free-form
string; any authenticated caller may overwrite it.
"""
import logging
from datetime import datetime, timezone
from typing import List

from pymongo.errors import DuplicateKeyError

from marketplace_api.models import (
    BookingCreate, BookingStatusUpdate, InsertResult, UpdateResult,
    DeleteResult, MutationResponse
)
from marketplace_api.services.errors import (
    AlreadyBookedError, InvalidInputError, NotFoundError, StatusRequiredError
)
from marketplace_api.utils import parse_object_id, serialize_mongo_doc

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "pending"


class BookingService:
    """Service for booking CRUD operations and status updates."""

    def __init__(self, bookings_collection):
        self.bookings = bookings_collection

    async def create(self, data: BookingCreate) -> InsertResult:
        """
        Insert a booking unless the user already booked this service.

        The existence check is only a fast path. The unique index on
        (serviceId, userEmail) decides concurrent inserts, and the losing
        insert surfaces as DuplicateKeyError.

        Raises:
            AlreadyBookedError: If a booking exists for the pair
        """
        doc = data.model_dump(exclude_none=True)
        doc.pop("_id", None)
        doc.setdefault("status", DEFAULT_STATUS)
        doc["createdAt"] = datetime.now(timezone.utc)

        pair = {"serviceId": doc["serviceId"], "userEmail": doc["userEmail"]}
        if await self.bookings.find_one(pair):
            raise AlreadyBookedError(doc["serviceId"], doc["userEmail"])

        try:
            result = await self.bookings.insert_one(doc)
        except DuplicateKeyError:
            logger.info(f"Concurrent duplicate booking rejected for {pair}")
            raise AlreadyBookedError(doc["serviceId"], doc["userEmail"])

        logger.info(f"Created booking {result.inserted_id} for {doc['userEmail']}")
        return InsertResult(acknowledged=True, insertedId=str(result.inserted_id))

    async def is_booked(self, service_id: str, email: str) -> bool:
        booking = await self.bookings.find_one({"serviceId": service_id, "userEmail": email})
        return booking is not None

    async def list_for_user(self, email: str) -> List[dict]:
        if not email:
            raise InvalidInputError("Email is required", field="email")
        bookings = await self.bookings.find({"userEmail": email}).to_list(length=None)
        return [serialize_mongo_doc(b) for b in bookings]

    async def list_all(self) -> List[dict]:
        """List every booking (administrative view, no filtering)."""
        bookings = await self.bookings.find().to_list(length=None)
        return [serialize_mongo_doc(b) for b in bookings]

    async def update_status(self, booking_id: str, data: BookingStatusUpdate) -> MutationResponse:
        """
        Overwrite a booking's status. No ownership check is applied.

        A missing booking and an update that changes nothing both raise
        NotFoundError.
        """
        if not data.status:
            raise StatusRequiredError()
        oid = parse_object_id(booking_id)

        # Matching on a different status folds the no-op case into zero matches
        result = await self.bookings.update_one(
            {"_id": oid, "status": {"$ne": data.status}},
            {"$set": {"status": data.status, "updatedAt": datetime.now(timezone.utc)}}
        )
        if result.matched_count == 0 or result.modified_count == 0:
            raise NotFoundError("Booking not found or status unchanged")

        return MutationResponse(
            message="Status updated",
            result=UpdateResult(
                matchedCount=result.matched_count,
                modifiedCount=result.modified_count
            )
        )

    async def delete(self, booking_id: str) -> DeleteResult:
        """Delete a booking by id. No ownership check is applied."""
        oid = parse_object_id(booking_id)
        result = await self.bookings.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise NotFoundError("Booking not found")
        return DeleteResult(deletedCount=result.deleted_count)

    async def delete_unchecked(self, booking_id: str) -> DeleteResult:
        """Delete a booking by id and report the raw count, even when zero."""
        oid = parse_object_id(booking_id)
        result = await self.bookings.delete_one({"_id": oid})
        return DeleteResult(deletedCount=result.deleted_count)
