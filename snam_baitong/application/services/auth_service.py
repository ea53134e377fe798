"""Auth service — password hashing, session tokens, login/logout."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext

from snam_baitong.config import get_settings
from snam_baitong.core.clock import isoformat_utc, utcnow
from snam_baitong.core.exceptions import (
    ForbiddenException,
    UnauthorizedException,
    ValidationException,
)
from snam_baitong.domain.enums import Role, UserStatus
from snam_baitong.domain.models.user import User
from snam_baitong.domain.repositories.revoked_token_repository import RevokedTokenRepository
from snam_baitong.domain.repositories.user_repository import UserRepository
from snam_baitong.domain.schemas.auth import Identity, UserRead

settings = get_settings()
logger = structlog.get_logger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

INVALID_CREDENTIALS = "Invalid credentials"
INVALID_TOKEN = "Invalid or expired token"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# Used to spend the same bcrypt time on unknown usernames as on wrong passwords.
_DUMMY_HASH = hash_password(uuid.uuid4().hex)


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> Tuple[str, str, datetime]:
    """Sign a session token. Returns (token, jti, expires_at)."""
    now = utcnow()
    expire = now + (expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES))
    jti = uuid.uuid4().hex
    payload = {
        "sub": str(user.id),
        "username": user.username,
        "role": Role(user.role).value,
        "jti": jti,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return token, jti, expire


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry; raise UnauthorizedException otherwise."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise UnauthorizedException(INVALID_TOKEN) from e

    if not payload.get("jti") or not payload.get("sub"):
        raise UnauthorizedException(INVALID_TOKEN)
    try:
        Role(payload.get("role"))
        int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise UnauthorizedException(INVALID_TOKEN) from e
    return payload


def read_unverified_claims(token: str) -> Dict[str, Any]:
    """Claims without checking signature or expiry (logout only needs jti/exp)."""
    try:
        return jwt.get_unverified_claims(token)
    except JWTError as e:
        raise UnauthorizedException(INVALID_TOKEN) from e


def identity_from_payload(payload: Dict[str, Any]) -> Identity:
    return Identity(
        id=int(payload["sub"]),
        username=payload.get("username", ""),
        role=Role(payload["role"]),
        token_id=payload["jti"],
    )


def authenticate_user(repo: UserRepository, username: Optional[str], password: Optional[str]) -> User:
    """Resolve credentials to an active user.

    Unknown usernames and wrong passwords fail with the same message. The
    disabled check runs only after the password matched, so it cannot be
    used to probe which usernames exist.
    """
    if not username or not password:
        raise ValidationException("username and password are required")

    user = repo.get_by_username(username)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        logger.info("Login failed", username=username, reason="unknown_user")
        raise UnauthorizedException(INVALID_CREDENTIALS)

    if not verify_password(password, user.password_hash):
        logger.info("Login failed", username=username, reason="bad_password")
        raise UnauthorizedException(INVALID_CREDENTIALS)

    if user.status != UserStatus.ACTIVE:
        logger.info("Login refused", username=username, reason="disabled")
        raise ForbiddenException("Account disabled")

    return user


def login(repo: UserRepository, username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
    user = authenticate_user(repo, username, password)
    token, jti, expires_at = create_access_token(user)
    logger.info("User logged in", user_id=user.id, role=Role(user.role).value, jti=jti)
    return {
        "token": token,
        "tokenType": "bearer",
        "expiresAt": isoformat_utc(expires_at),
        "user": UserRead.model_validate(user).to_json(),
    }


def logout(revoked_repo: RevokedTokenRepository, token: str, user_id: Optional[int] = None) -> None:
    """Put the token's jti on the revocation list until the token would expire anyway."""
    claims = read_unverified_claims(token)
    jti = claims.get("jti")
    exp = claims.get("exp")
    if not jti or exp is None:
        raise UnauthorizedException(INVALID_TOKEN)

    expires_at = datetime.fromtimestamp(int(exp), tz=timezone.utc)
    revoked_repo.add(jti, expires_at, user_id)
    logger.info("User logged out", user_id=user_id, jti=jti)


def ensure_admin(repo: UserRepository, username: str, password: str) -> bool:
    """Create the bootstrap admin when no admin account exists yet."""
    if repo.has_admin():
        return False
    if repo.get_by_username(username) is not None:
        logger.warning("Bootstrap admin username taken by a non-admin account", username=username)
        return False

    repo.create({
        "username": username,
        "password_hash": hash_password(password),
        "role": Role.ADMIN,
        "status": UserStatus.ACTIVE,
    })
    logger.info("Default admin user created", username=username)
    return True
