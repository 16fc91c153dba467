from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from farmlink.api.deps import get_listing_store
from farmlink.auth.gate import Operation, requires
from farmlink.crud.listings import CROP, ListingStore
from farmlink.errors import NotFoundOrUnauthorized
from farmlink.schemas.base import CreatedResponse, MessageResponse
from farmlink.schemas.crop import Crop, CropCreate, CropList
from farmlink.schemas.user import IdentityClaim

router = APIRouter()

# All crops, for vendors to browse
@router.get("/crops", response_model=CropList)
def read_crops(
    search: Optional[str] = Query(None, description="Match crop, farmer name or location"),
    listings: ListingStore = Depends(get_listing_store),
    identity: IdentityClaim = Depends(requires(Operation.BROWSE_CROPS)),
):
    rows = listings.list_all(CROP, search=search)
    return CropList(crops=[Crop.model_validate(r) for r in rows])

# The logged-in farmer's own crops
@router.get("/my-crops", response_model=CropList)
def read_my_crops(
    listings: ListingStore = Depends(get_listing_store),
    identity: IdentityClaim = Depends(requires(Operation.VIEW_OWN_CROPS)),
):
    rows = listings.list_by_owner(CROP, identity.id)
    return CropList(crops=[Crop.model_validate(r) for r in rows])

@router.post("/crops", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_crop(
    crop: CropCreate,
    listings: ListingStore = Depends(get_listing_store),
    identity: IdentityClaim = Depends(requires(Operation.CREATE_CROP)),
):
    crop_id = listings.create(CROP, identity.id, identity.full_name, crop.model_dump())
    return CreatedResponse(message="Crop posted successfully!", id=crop_id)

@router.delete("/crops/{crop_id}", response_model=MessageResponse)
def delete_crop(
    crop_id: int,
    listings: ListingStore = Depends(get_listing_store),
    identity: IdentityClaim = Depends(requires(Operation.DELETE_CROP)),
):
    if not listings.delete_owned(CROP, crop_id, identity.id):
        raise NotFoundOrUnauthorized("Crop not found or unauthorized.")
    return MessageResponse(message="Crop deleted.")
