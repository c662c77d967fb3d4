"""
Property API endpoints for dealer listing management and the public listing.
Dealer routes act only on the caller's own properties.
"""

from fastapi import APIRouter, Depends, File, Path, Query, Request, UploadFile, status
from typing import Optional, List

from dealer_listings.config import Settings
from dealer_listings.services.property import PropertyService
from dealer_listings.repositories.property import PropertySearchFilters
from dealer_listings.utils.validators import MAX_OFFSET
from dealer_listings.schemas.property import (
    PropertyForm,
    PropertyResponse,
    MessageResponse,
    PropertyCreatedResponse
)
from dealer_listings.schemas.error import (
    get_error_responses,
    get_auth_error_responses,
    get_owned_resource_error_responses
)
from dealer_listings.utils.dependencies import (
    get_app_settings,
    get_current_dealer_id,
    get_property_service
)


router = APIRouter(tags=["Properties"])


@router.post(
    "/add-property",
    response_model=PropertyCreatedResponse,
    status_code=status.HTTP_200_OK,
    summary="Add property",
    description="Create a listing owned by the authenticated dealer. Accepts multipart form data with an optional image.",
    responses=get_auth_error_responses()
)
async def add_property(
    form: PropertyForm = Depends(PropertyForm.as_form),
    image: Optional[UploadFile] = File(None, description="Listing image (JPEG, PNG or WebP)"),
    dealer_id: int = Depends(get_current_dealer_id),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyCreatedResponse:
    """
    Create a new property for the authenticated dealer.

    Raises:
        ValidationError: If a field or the image is invalid
        StoreError: If the property cannot be stored
    """
    created = await property_service.add_property(dealer_id, form.to_record(), image)
    return PropertyCreatedResponse(message="Property added successfully.", id=created.id)


@router.get(
    "/properties",
    response_model=List[PropertyResponse],
    status_code=status.HTTP_200_OK,
    summary="List properties",
    description="Public listing with exact-match filters, name/location search and pagination",
    responses=get_error_responses(422, 500)
)
async def list_properties(
    request: Request,
    bedrooms: Optional[int] = Query(None, ge=0, description="Exact number of bedrooms"),
    kitchen: Optional[bool] = Query(None, description="Has kitchen"),
    wifi: Optional[bool] = Query(None, description="Has wifi"),
    parking: Optional[bool] = Query(None, description="Has parking"),
    food: Optional[bool] = Query(None, description="Food included"),
    search: Optional[str] = Query(None, max_length=255, description="Case-insensitive match on name or location"),
    page: int = Query(1, ge=1, le=MAX_OFFSET, description="Page number (starts from 1)"),
    limit: Optional[int] = Query(None, ge=1, description="Properties per page, capped at the configured maximum"),
    settings: Settings = Depends(get_app_settings),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    """
    Search the public listing.

    Returns:
        The requested page in insertion order, images as absolute URLs
    """
    filters = PropertySearchFilters(
        bedrooms=bedrooms,
        kitchen=kitchen,
        wifi=wifi,
        parking=parking,
        food=food,
        search=search,
        page=page,
        limit=limit if limit is not None else settings.default_page_size,
        max_limit=settings.max_page_size
    )

    properties = await property_service.search_properties(filters)
    base_url = str(request.base_url)
    return [PropertyResponse.model_validate(prop.to_dict(base_url)) for prop in properties]


@router.get(
    "/dealer/properties",
    response_model=List[PropertyResponse],
    status_code=status.HTTP_200_OK,
    summary="List own properties",
    description="All properties owned by the authenticated dealer",
    responses=get_error_responses(401, 403, 500)
)
async def list_dealer_properties(
    request: Request,
    dealer_id: int = Depends(get_current_dealer_id),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    """Get the caller's properties, oldest first."""
    properties = await property_service.list_dealer_properties(dealer_id)
    base_url = str(request.base_url)
    return [PropertyResponse.model_validate(prop.to_dict(base_url)) for prop in properties]


@router.put(
    "/dealer/properties/{property_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Update own property",
    description="Replace the listing fields of a property owned by the caller. The image changes only if a new one is uploaded.",
    responses=get_owned_resource_error_responses()
)
async def update_property(
    property_id: int = Path(..., description="Property ID"),
    form: PropertyForm = Depends(PropertyForm.as_form),
    image: Optional[UploadFile] = File(None, description="Replacement image (JPEG, PNG or WebP)"),
    dealer_id: int = Depends(get_current_dealer_id),
    property_service: PropertyService = Depends(get_property_service)
) -> MessageResponse:
    """
    Update an owned property.

    Raises:
        PropertyNotFoundError: If the property is missing or owned by another dealer
    """
    await property_service.update_property(property_id, dealer_id, form.to_record(), image)
    return MessageResponse(message="Property updated successfully.")


@router.delete(
    "/dealer/properties/{property_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete own property",
    description="Delete a property owned by the caller",
    responses=get_owned_resource_error_responses()
)
async def delete_property(
    property_id: int = Path(..., description="Property ID"),
    dealer_id: int = Depends(get_current_dealer_id),
    property_service: PropertyService = Depends(get_property_service)
) -> MessageResponse:
    """
    Delete an owned property.

    Raises:
        PropertyNotFoundError: If the property is missing or owned by another dealer
    """
    await property_service.delete_property(property_id, dealer_id)
    return MessageResponse(message="Property deleted successfully.")
