"""
Service listing routes for the Marketplace API
"""
from fastapi import APIRouter, Depends, Query
from typing import Any, Dict, List, Optional

from marketplace_api.models import (
    Principal, ServiceCreate, ServiceUpdate, InsertResult, DeleteResult, MutationResponse
)
from marketplace_api.auth import get_current_principal
from marketplace_api.dependencies import get_listing_service
from marketplace_api.services.listing_service import ListingService

router = APIRouter(prefix="/service", tags=["services"])


@router.post("", response_model=InsertResult)
async def create_service(
    service_data: ServiceCreate,
    listings: ListingService = Depends(get_listing_service)
):
    """Publish a listing; the owner named in the body is trusted"""
    return await listings.create(service_data)


@router.get("", response_model=List[Dict[str, Any]])
async def list_my_services(
    email: Optional[str] = Query(None),
    principal: Principal = Depends(get_current_principal),
    listings: ListingService = Depends(get_listing_service)
):
    return await listings.list_by_owner(email, principal)


@router.get("/{service_id}", response_model=Optional[Dict[str, Any]])
async def get_service(
    service_id: str,
    listings: ListingService = Depends(get_listing_service)
):
    """Public listing view"""
    return await listings.get_by_id(service_id)


@router.put("/{service_id}", response_model=MutationResponse)
async def update_service(
    service_id: str,
    service_data: ServiceUpdate,
    principal: Principal = Depends(get_current_principal),
    listings: ListingService = Depends(get_listing_service)
):
    return await listings.update(service_id, service_data, principal)


@router.delete("/{service_id}", response_model=DeleteResult)
async def delete_service(
    service_id: str,
    principal: Principal = Depends(get_current_principal),
    listings: ListingService = Depends(get_listing_service)
):
    return await listings.delete(service_id, principal)
