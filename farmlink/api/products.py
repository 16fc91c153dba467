from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from farmlink.api.deps import get_listing_store
from farmlink.auth.gate import Operation, requires
from farmlink.crud.listings import PRODUCT, ListingStore
from farmlink.errors import NotFoundOrUnauthorized
from farmlink.schemas.base import CreatedResponse, MessageResponse
from farmlink.schemas.product import Product, ProductCreate, ProductList
from farmlink.schemas.user import IdentityClaim

router = APIRouter()

# All products, for farmers to browse
@router.get("/products", response_model=ProductList)
def read_products(
    search: Optional[str] = Query(None, description="Match product, vendor name, location or description"),
    listings: ListingStore = Depends(get_listing_store),
    identity: IdentityClaim = Depends(requires(Operation.BROWSE_PRODUCTS)),
):
    rows = listings.list_all(PRODUCT, search=search)
    return ProductList(products=[Product.model_validate(r) for r in rows])

# The logged-in vendor's own products
@router.get("/my-products", response_model=ProductList)
def read_my_products(
    listings: ListingStore = Depends(get_listing_store),
    identity: IdentityClaim = Depends(requires(Operation.VIEW_OWN_PRODUCTS)),
):
    rows = listings.list_by_owner(PRODUCT, identity.id)
    return ProductList(products=[Product.model_validate(r) for r in rows])

@router.post("/products", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    product: ProductCreate,
    listings: ListingStore = Depends(get_listing_store),
    identity: IdentityClaim = Depends(requires(Operation.CREATE_PRODUCT)),
):
    product_id = listings.create(PRODUCT, identity.id, identity.full_name, product.model_dump())
    return CreatedResponse(message="Product posted successfully!", id=product_id)

@router.delete("/products/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: int,
    listings: ListingStore = Depends(get_listing_store),
    identity: IdentityClaim = Depends(requires(Operation.DELETE_PRODUCT)),
):
    if not listings.delete_owned(PRODUCT, product_id, identity.id):
        raise NotFoundOrUnauthorized("Product not found or unauthorized.")
    return MessageResponse(message="Product deleted.")
