from fastapi import APIRouter, Depends, status

from farmlink.api.deps import get_credential_store
from farmlink.auth.security import SessionManager, get_session_manager
from farmlink.crud.users import CredentialStore
from farmlink.schemas.base import MessageResponse
from farmlink.schemas.user import IdentityClaim, LoginRequest, LoginResponse, UserCreate, UserPublic

router = APIRouter(tags=["auth"])

# REGISTER: create the account; the client logs in separately
@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    user_data: UserCreate,
    users: CredentialStore = Depends(get_credential_store),
):
    users.register(
        full_name=user_data.full_name,
        phone=user_data.phone,
        location=user_data.location,
        role=user_data.role,
        password=user_data.password,
    )
    return MessageResponse(message="Registration successful! Please login.")

# LOGIN: returns user + token
@router.post("/login", response_model=LoginResponse)
def login(
    credentials: LoginRequest,
    users: CredentialStore = Depends(get_credential_store),
    sessions: SessionManager = Depends(get_session_manager),
):
    user = users.authenticate(credentials.phone, credentials.password)
    token = sessions.issue(IdentityClaim.model_validate(user))
    return LoginResponse(token=token, user=UserPublic.model_validate(user))
