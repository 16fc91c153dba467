from sqlalchemy import Column, String, Enum
from farmlink.models.base import BaseModel

ROLES = ("farmer", "vendor")

class User(BaseModel):
    __tablename__ = "users"
    
    full_name = Column(String(100), nullable=False)
    phone = Column(String(15), unique=True, index=True, nullable=False)
    location = Column(String(100), nullable=False)
    role = Column(Enum(*ROLES, name="user_roles", create_constraint=True), nullable=False)
    password_hash = Column(String(255), nullable=False)
