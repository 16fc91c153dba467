from fastapi import APIRouter, Depends

from farmlink.api.deps import get_credential_store
from farmlink.auth.security import get_current_identity
from farmlink.crud.users import CredentialStore
from farmlink.errors import NotFound
from farmlink.schemas.user import IdentityClaim, ProfileResponse, UserPublic

router = APIRouter()

@router.get("/profile", response_model=ProfileResponse)
def read_profile(
    users: CredentialStore = Depends(get_credential_store),
    identity: IdentityClaim = Depends(get_current_identity),
):
    db_user = users.find_by_id(identity.id)
    if db_user is None:
        raise NotFound("User not found.")
    return ProfileResponse(user=UserPublic.model_validate(db_user))
