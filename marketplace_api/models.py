"""
Pydantic models for the Marketplace API
"""
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.networks import validate_email
from typing import Annotated, Optional


# Fields an owner may change on a listing
SERVICE_MUTABLE_FIELDS = ("serviceName", "description", "serviceArea", "price", "imageUrl")


def _check_email_format(value: str) -> str:
    # Ownership is exact string equality, so the address is stored as sent
    validate_email(value)
    return value


ClaimedEmail = Annotated[str, AfterValidator(_check_email_format)]


class Principal(BaseModel):
    """Verified identity bound to a request"""
    email: str


class ServiceCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    userEmail: ClaimedEmail
    serviceName: Optional[str] = None
    description: Optional[str] = None
    serviceArea: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    imageUrl: Optional[str] = None


class ServiceUpdate(BaseModel):
    serviceName: Optional[str] = None
    description: Optional[str] = None
    serviceArea: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    imageUrl: Optional[str] = None


class BookingCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    serviceId: str = Field(..., min_length=1)
    userEmail: ClaimedEmail
    status: Optional[str] = None


class BookingStatusUpdate(BaseModel):
    status: Optional[str] = None


class InsertResult(BaseModel):
    acknowledged: bool = True
    insertedId: str


class UpdateResult(BaseModel):
    acknowledged: bool = True
    matchedCount: int
    modifiedCount: int


class DeleteResult(BaseModel):
    acknowledged: bool = True
    deletedCount: int


class MutationResponse(BaseModel):
    message: str
    result: UpdateResult


class BookedResponse(BaseModel):
    booked: bool
