from sqlalchemy import Column, String, Float, ForeignKey, Integer
from sqlalchemy.orm import relationship
from farmlink.models.base import BaseModel
from farmlink.models.user import User

class Product(BaseModel):
    __tablename__ = "products"
    
    vendor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    # Snapshot of the vendor's name when the product was posted.
    vendor_name = Column(String(100), nullable=False)
    product_name = Column(String(100), nullable=False)
    price = Column(Float, nullable=False)
    description = Column(String, nullable=False, default="", server_default="")
    location = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False)
    
    vendor = relationship(User)
