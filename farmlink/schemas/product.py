from typing import Any, List, Optional
from pydantic import BaseModel
from farmlink.schemas.base import TimestampSchema

class ProductCreate(BaseModel):
    product_name: Optional[str] = None
    price: Any = None
    description: Optional[str] = None
    location: Optional[str] = None
    phone: Optional[str] = None

class Product(TimestampSchema):
    id: int
    vendor_id: int
    vendor_name: str
    product_name: str
    price: float
    description: str = ""
    location: str
    phone: str

class ProductList(BaseModel):
    success: bool = True
    products: List[Product]
