from fastapi import Depends
from sqlalchemy.orm import Session

from farmlink.auth.security import PasswordHasher, get_password_hasher
from farmlink.crud.listings import ListingStore
from farmlink.crud.users import CredentialStore
from farmlink.db.session import get_db


def get_credential_store(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> CredentialStore:
    return CredentialStore(db, hasher)


def get_listing_store(db: Session = Depends(get_db)) -> ListingStore:
    return ListingStore(db)
