from typing import Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field
from farmlink.schemas.base import TimestampSchema

# Fields are optional here so that missing values reach the credential
# store and come back as a 400 with a readable message.
class UserCreate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    role: Optional[str] = Field(default=None, validation_alias=AliasChoices("role", "user_type"))
    password: Optional[str] = None

class LoginRequest(BaseModel):
    phone: Optional[str] = None
    password: Optional[str] = None

class UserPublic(TimestampSchema):
    id: int
    full_name: str
    phone: str
    location: str
    role: str

    # Older clients read the role as `user_type`.
    @computed_field
    @property
    def user_type(self) -> str:
        return self.role

class IdentityClaim(BaseModel):
    """Verified payload of a session token."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    phone: str
    role: str
    full_name: str
    location: str

class LoginResponse(BaseModel):
    success: bool = True
    token: str
    token_type: str = "bearer"
    user: UserPublic

class ProfileResponse(BaseModel):
    success: bool = True
    user: UserPublic
