"""
Booking routes for the Marketplace API

Only status updates and deletes require a bearer token, and neither checks
that the caller owns the booking.
"""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from typing import Any, Dict, List, Optional

from marketplace_api.models import (
    Principal, BookingCreate, BookingStatusUpdate, BookedResponse,
    InsertResult, DeleteResult, MutationResponse
)
from marketplace_api.auth import get_current_principal
from marketplace_api.dependencies import get_booking_service
from marketplace_api.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", response_model=InsertResult)
async def create_booking(
    booking_data: BookingCreate,
    bookings: BookingService = Depends(get_booking_service)
):
    return await bookings.create(booking_data)


@router.get("", response_model=List[Dict[str, Any]])
async def list_my_bookings(
    email: Optional[str] = Query(None),
    bookings: BookingService = Depends(get_booking_service)
):
    return await bookings.list_for_user(email)


@router.get("/all", response_model=List[Dict[str, Any]])
async def list_all_bookings(bookings: BookingService = Depends(get_booking_service)):
    return await bookings.list_all()


@router.get("/check/{service_id}", response_model=BookedResponse)
async def check_booked(
    service_id: str,
    email: Optional[str] = Query(None),
    bookings: BookingService = Depends(get_booking_service)
):
    """Report whether the user already booked this service"""
    if not email:
        return JSONResponse(
            status_code=400,
            content={"booked": False, "code": "INVALID_INPUT", "message": "Email is required"}
        )
    return BookedResponse(booked=await bookings.is_booked(service_id, email))


@router.put("/{booking_id}/status", response_model=MutationResponse)
async def update_booking_status(
    booking_id: str,
    status_data: BookingStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    bookings: BookingService = Depends(get_booking_service)
):
    return await bookings.update_status(booking_id, status_data)


@router.delete("/{booking_id}", response_model=DeleteResult)
async def delete_booking(
    booking_id: str,
    principal: Principal = Depends(get_current_principal),
    bookings: BookingService = Depends(get_booking_service)
):
    return await bookings.delete(booking_id)
