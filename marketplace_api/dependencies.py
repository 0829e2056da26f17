"""
FastAPI dependencies for the Marketplace API
Hands the shared database handle and service objects to route handlers
"""
from fastapi import Depends, Request

from marketplace_api.database import SERVICES_COLLECTION, BOOKINGS_COLLECTION
from marketplace_api.services.listing_service import ListingService
from marketplace_api.services.booking_service import BookingService


def get_db(request: Request):
    return request.app.state.db


def get_listing_service(db=Depends(get_db)) -> ListingService:
    return ListingService(db[SERVICES_COLLECTION])


def get_booking_service(db=Depends(get_db)) -> BookingService:
    return BookingService(db[BOOKINGS_COLLECTION])
