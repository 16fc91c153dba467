from sqlalchemy import Column, String, Float, ForeignKey, Integer
from sqlalchemy.orm import relationship
from farmlink.models.base import BaseModel
from farmlink.models.user import User

class Crop(BaseModel):
    __tablename__ = "crops"
    
    farmer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    # Snapshot of the farmer's name when the crop was posted.
    farmer_name = Column(String(100), nullable=False)
    crop_name = Column(String(100), nullable=False)
    quantity = Column(String(50), nullable=False)
    price_per_kg = Column(Float, nullable=False)
    location = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False)
    
    farmer = relationship(User)
