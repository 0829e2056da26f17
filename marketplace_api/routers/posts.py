"""
Legacy "posts" routes for the Marketplace API

Aliases over the bookings collection with no authentication at all.
"""
from fastapi import APIRouter, Depends, Query
from typing import Any, Dict, List, Optional

from marketplace_api.models import DeleteResult
from marketplace_api.dependencies import get_booking_service
from marketplace_api.services.booking_service import BookingService

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=List[Dict[str, Any]])
async def list_posts(
    email: Optional[str] = Query(None),
    bookings: BookingService = Depends(get_booking_service)
):
    return await bookings.list_for_user(email)


@router.delete("/{booking_id}", response_model=DeleteResult)
async def delete_post(
    booking_id: str,
    bookings: BookingService = Depends(get_booking_service)
):
    return await bookings.delete_unchecked(booking_id)
