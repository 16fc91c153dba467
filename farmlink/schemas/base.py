from datetime import datetime
from pydantic import BaseModel, ConfigDict

class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

class TimestampSchema(BaseSchema):
    created_at: datetime

class MessageResponse(BaseModel):
    success: bool = True
    message: str

class CreatedResponse(MessageResponse):
    id: int
