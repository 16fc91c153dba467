from passlib.context import CryptContext
from passlib.exc import PasswordValueError
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from typing import Callable, Optional
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi import Depends, Request

from farmlink.config import MIN_BCRYPT_ROUNDS
from farmlink.errors import Unauthenticated, SessionExpired
from farmlink.schemas.user import IdentityClaim

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_HOURS = 24

bearer_scheme = HTTPBearer(auto_error=False)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PasswordHasher:
    """Salted bcrypt hashing with a configurable cost."""

    def __init__(self, rounds: int = 12):
        if rounds < MIN_BCRYPT_ROUNDS:
            raise ValueError(f"bcrypt rounds must be at least {MIN_BCRYPT_ROUNDS}")
        self.rounds = rounds
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        # passlib compares in constant time and raises ValueError for a
        # digest it cannot parse. A password bcrypt refuses (NUL byte or
        # over passlib's size cap) can never match.
        try:
            return self._context.verify(password, password_hash)
        except PasswordValueError:
            return False

    def dummy_verify(self) -> None:
        self._context.dummy_verify()


class SessionManager:
    """Issues and verifies signed, time-bound session tokens."""

    def __init__(
        self,
        secret: str,
        ttl_hours: int = ACCESS_TOKEN_EXPIRE_HOURS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret:
            raise ValueError("jwt secret must not be blank")
        self._secret = secret
        self.ttl = timedelta(hours=ttl_hours)
        self._clock = clock or utcnow

    def issue(self, claim: IdentityClaim) -> str:
        issued_at = self._clock()
        expire = issued_at + self.ttl
        to_encode = {
            "sub": str(claim.id),
            "phone": claim.phone,
            "role": claim.role,
            "full_name": claim.full_name,
            "location": claim.location,
            "iat": int(issued_at.timestamp()),
            "exp": int(expire.timestamp()),
        }
        return jwt.encode(to_encode, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> IdentityClaim:
        # Expiry is checked against the injected clock, not jose's.
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM], options={"verify_exp": False})
        except JWTError:
            raise Unauthenticated("Invalid session. Please login again.")

        expires_at = payload.get("exp")
        if not isinstance(expires_at, int) or isinstance(expires_at, bool):
            raise Unauthenticated("Invalid session. Please login again.")
        if self._clock().timestamp() >= expires_at:
            raise SessionExpired()

        try:
            return IdentityClaim(
                id=int(payload["sub"]),
                phone=payload["phone"],
                role=payload["role"],
                full_name=payload["full_name"],
                location=payload["location"],
            )
        except (KeyError, TypeError, ValueError):
            raise Unauthenticated("Invalid session. Please login again.")


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    sessions: SessionManager = Depends(get_session_manager),
) -> Optional[IdentityClaim]:
    if credentials is None or not credentials.credentials:
        return None
    return sessions.verify(credentials.credentials)


def get_current_identity(
    identity: Optional[IdentityClaim] = Depends(get_optional_identity),
) -> IdentityClaim:
    if identity is None:
        raise Unauthenticated()
    return identity
