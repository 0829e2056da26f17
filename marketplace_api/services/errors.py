"""
Service-layer errors for the Marketplace API.

Every error carries a stable machine-readable code and the HTTP status the
routers answer with.
"""


class MarketplaceError(Exception):
    """Base exception for marketplace service errors."""
    status_code = 400

    def __init__(self, code: str, message: str, details: dict = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidInputError(MarketplaceError):
    """Raised when a required field is missing or empty."""
    def __init__(self, message: str, field: str = None):
        details = {"field": field} if field else None
        super().__init__("INVALID_INPUT", message, details)


class NoFieldsToUpdateError(MarketplaceError):
    """Raised when an update carries none of the mutable fields."""
    def __init__(self):
        super().__init__("NO_FIELDS", "No fields to update")


class StatusRequiredError(MarketplaceError):
    """Raised when a status update has an empty or missing status."""
    def __init__(self):
        super().__init__("STATUS_REQUIRED", "Status is required", {"field": "status"})


class InvalidIdError(MarketplaceError):
    """Raised when a path identifier is not a valid ObjectId."""
    def __init__(self, value):
        super().__init__("INVALID_ID", "Invalid ID format", {"id": str(value)})


class AlreadyBookedError(MarketplaceError):
    """Raised when a booking already exists for the (serviceId, userEmail) pair."""
    def __init__(self, service_id: str, user_email: str):
        super().__init__(
            "ALREADY_BOOKED",
            "Already booked",
            {"serviceId": service_id, "userEmail": user_email}
        )


class ForbiddenError(MarketplaceError):
    """Raised when the principal has no rights over the targeted record."""
    status_code = 403

    def __init__(self, message: str = "Forbidden access", code: str = "FORBIDDEN"):
        super().__init__(code, message)


class OwnerMismatchError(ForbiddenError):
    """Raised when an owner-scoped query names another user's email."""
    def __init__(self):
        super().__init__("You can only view your own services", code="OWNER_MISMATCH")


class NotFoundError(MarketplaceError):
    """Raised when a filtered mutation matched or changed nothing."""
    status_code = 404

    def __init__(self, message: str):
        super().__init__("NOT_FOUND", message)
