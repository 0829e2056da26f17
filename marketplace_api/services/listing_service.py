"""
Listing service for the Marketplace API.

This service handles CRUD operations on service listings. Ownership is
enforced inside the store filter: updates and deletes match on both the
listing id and the principal's email in a single operation, so a wrong owner
and a missing id are indistinguishable to the caller.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from marketplace_api.models import (
    Principal, ServiceCreate, ServiceUpdate, InsertResult, UpdateResult,
    DeleteResult, MutationResponse, SERVICE_MUTABLE_FIELDS
)
from marketplace_api.services.errors import (
    ForbiddenError, InvalidInputError, NoFieldsToUpdateError, OwnerMismatchError
)
from marketplace_api.utils import parse_object_id, serialize_mongo_doc

logger = logging.getLogger(__name__)


class ListingService:
    """Service for listing CRUD operations and owner checks."""

    def __init__(self, services_collection):
        self.services = services_collection

    # =========================================================================
    # Write Operations
    # =========================================================================

    async def create(self, data: ServiceCreate) -> InsertResult:
        """
        Insert a listing as supplied by the caller.

        No ownership check happens here: the stated userEmail is trusted.
        """
        doc = data.model_dump(exclude_none=True)
        doc.pop("_id", None)
        doc["createdAt"] = datetime.now(timezone.utc)

        result = await self.services.insert_one(doc)
        logger.info(f"Created service {result.inserted_id} for {doc['userEmail']}")
        return InsertResult(acknowledged=True, insertedId=str(result.inserted_id))

    async def update(
        self,
        service_id: str,
        data: ServiceUpdate,
        principal: Principal
    ) -> MutationResponse:
        """
        Update the mutable fields of a listing owned by the principal.

        Raises:
            InvalidIdError: If service_id is not a valid ObjectId
            NoFieldsToUpdateError: If no mutable field was supplied
            ForbiddenError: If no listing matches both id and owner
        """
        oid = parse_object_id(service_id)
        fields = {
            k: v for k, v in data.model_dump(exclude_unset=True).items()
            if k in SERVICE_MUTABLE_FIELDS
        }
        if not fields:
            raise NoFieldsToUpdateError()
        fields["updatedAt"] = datetime.now(timezone.utc)

        result = await self.services.update_one(
            {"_id": oid, "userEmail": principal.email},
            {"$set": fields}
        )
        if result.matched_count == 0:
            logger.info(f"Update of service {service_id} refused for {principal.email}")
            raise ForbiddenError()

        return MutationResponse(
            message="Service updated",
            result=UpdateResult(
                matchedCount=result.matched_count,
                modifiedCount=result.modified_count
            )
        )

    async def delete(self, service_id: str, principal: Principal) -> DeleteResult:
        """Delete a listing owned by the principal, raising ForbiddenError otherwise."""
        oid = parse_object_id(service_id)
        result = await self.services.delete_one({"_id": oid, "userEmail": principal.email})
        if result.deleted_count == 0:
            logger.info(f"Delete of service {service_id} refused for {principal.email}")
            raise ForbiddenError()
        return DeleteResult(deletedCount=result.deleted_count)

    # =========================================================================
    # Read Operations
    # =========================================================================

    async def list_by_owner(self, email: Optional[str], principal: Principal) -> List[dict]:
        """List the principal's own listings; the queried email must be theirs."""
        if not email:
            raise InvalidInputError("Email is required", field="email")
        if email != principal.email:
            raise OwnerMismatchError()

        services = await self.services.find({"userEmail": email}).to_list(length=None)
        return [serialize_mongo_doc(s) for s in services]

    async def get_by_id(self, service_id: str) -> Optional[dict]:
        """Public lookup; returns None when no listing has this id."""
        oid = parse_object_id(service_id)
        service = await self.services.find_one({"_id": oid})
        return serialize_mongo_doc(service) if service else None
