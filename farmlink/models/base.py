from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.sql import func
from farmlink.db.session import Base

class BaseModel(Base):
    __abstract__ = True
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
