from typing import Any, List, Optional
from pydantic import BaseModel
from farmlink.schemas.base import TimestampSchema

class CropCreate(BaseModel):
    crop_name: Optional[str] = None
    quantity: Optional[str] = None
    # Accepts numbers or numeric strings; checked by the listing store.
    price_per_kg: Any = None
    location: Optional[str] = None
    phone: Optional[str] = None

class Crop(TimestampSchema):
    id: int
    farmer_id: int
    farmer_name: str
    crop_name: str
    quantity: str
    price_per_kg: float
    location: str
    phone: str

class CropList(BaseModel):
    success: bool = True
    crops: List[Crop]
