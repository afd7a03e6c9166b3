"""
Marketplace catalog endpoints.

Public, read-only access to the predefined services users can
subscribe to.  No authentication is required.
"""

from typing import List

from fastapi import APIRouter

from subscription_tracker.app.core.errors import NotFoundError
from subscription_tracker.app.schemas.available_service import AvailableServiceRead
from subscription_tracker.app.services.catalog_service import CatalogService


router = APIRouter()


@router.get("", response_model=List[AvailableServiceRead])
async def list_available_services() -> List[AvailableServiceRead]:
    return await CatalogService.list_services()


@router.get("/{service_id}", response_model=AvailableServiceRead)
async def get_available_service(service_id: str) -> AvailableServiceRead:
    service = await CatalogService.get_service(service_id)
    if service is None:
        raise NotFoundError("Service not found")
    return service
