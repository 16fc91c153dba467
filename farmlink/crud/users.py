import logging
import re
from typing import Optional

from passlib.exc import PasswordValueError
from passlib.utils import MAX_PASSWORD_SIZE
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from farmlink.auth.security import PasswordHasher
from farmlink.crud.base import is_present, storage_guard
from farmlink.errors import DuplicateIdentity, InvalidCredentials, ValidationError
from farmlink.models.user import ROLES, User

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"\d{10,15}", re.ASCII)
MIN_PASSWORD_LENGTH = 6


class CredentialStore:
    """Users table: registration, lookup and password checks."""

    def __init__(self, db: Session, hasher: PasswordHasher):
        self.db = db
        self.hasher = hasher

    def register(self, full_name, phone, location, role, password) -> int:
        if not all(is_present(v) for v in (full_name, phone, location, role, password)):
            raise ValidationError("All fields are required.")
        if role not in ROLES:
            raise ValidationError("Role must be farmer or vendor.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        if "\x00" in password or len(password.encode("utf-8")) > MAX_PASSWORD_SIZE:
            raise ValidationError("Password contains unsupported characters or is too long.")
        phone = phone.strip()
        if not PHONE_PATTERN.fullmatch(phone):
            raise ValidationError("Enter a valid phone number (10-15 digits).")

        if self.find_by_phone(phone) is not None:
            raise DuplicateIdentity()

        try:
            password_hash = self.hasher.hash(password)
        except PasswordValueError:
            raise ValidationError("Password contains unsupported characters or is too long.")

        db_user = User(
            full_name=full_name.strip(),
            phone=phone,
            location=location.strip(),
            role=role,
            password_hash=password_hash,
        )
        with storage_guard(self.db, "register user", "Registration failed. Try again."):
            try:
                self.db.add(db_user)
                self.db.commit()
            except IntegrityError:
                # Lost a race with a concurrent registration of the same phone.
                self.db.rollback()
                raise DuplicateIdentity()
            self.db.refresh(db_user)

        logger.info("Registered %s id=%s", db_user.role, db_user.id)
        return db_user.id

    def find_by_phone(self, phone: str) -> Optional[User]:
        with storage_guard(self.db, "look up user by phone"):
            return self.db.query(User).filter(User.phone == phone).first()

    def find_by_id(self, user_id: int) -> Optional[User]:
        with storage_guard(self.db, "look up user by id"):
            return self.db.query(User).filter(User.id == user_id).first()

    def authenticate(self, phone, password) -> User:
        if not is_present(phone) or not is_present(password):
            raise ValidationError("Phone number and password are required.")

        user = self.find_by_phone(phone.strip())
        if user is None:
            # Spend the same time as a real check so unknown phones are not distinguishable.
            self.hasher.dummy_verify()
            logger.info("Failed login for unknown phone %s", phone.strip())
            raise InvalidCredentials()
        if not self.hasher.verify(password, user.password_hash):
            logger.info("Failed login for user id=%s", user.id)
            raise InvalidCredentials()
        return user

    def delete(self, user_id: int) -> bool:
        """Remove a user; their crops and products go with them."""
        with storage_guard(self.db, "delete user"):
            removed = self.db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
            self.db.commit()
        if removed:
            logger.info("Deleted user id=%s", user_id)
        return removed > 0
