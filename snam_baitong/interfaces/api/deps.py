"""FastAPI dependency — bearer token authentication and role gates."""

from typing import Callable, Iterable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from snam_baitong.application.services.auth_service import decode_access_token, identity_from_payload
from snam_baitong.core.exceptions import ForbiddenException, UnauthorizedException
from snam_baitong.domain.enums import Role
from snam_baitong.domain.repositories.revoked_token_repository import RevokedTokenRepository
from snam_baitong.domain.schemas.auth import Identity
from snam_baitong.interfaces.deps import get_revoked_token_repository

# auto_error=False so a missing header reaches our own 401 envelope.
security = HTTPBearer(auto_error=False)


def get_bearer_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise UnauthorizedException("Missing or malformed token")
    return credentials.credentials


def get_current_identity(
    token: str = Depends(get_bearer_token),
    revoked_repo: RevokedTokenRepository = Depends(get_revoked_token_repository),
) -> Identity:
    """Verify the bearer token and attach the caller's identity."""
    payload = decode_access_token(token)

    if revoked_repo.is_revoked(payload["jti"]):
        raise UnauthorizedException("Token revoked")

    return identity_from_payload(payload)


def is_role_allowed(role: Role, allowed: Iterable[Role]) -> bool:
    """An empty allow-list admits any authenticated role."""
    allowed = tuple(allowed)
    return not allowed or role in allowed


def require_roles(*roles: Role) -> Callable[..., Identity]:
    def checker(identity: Identity = Depends(get_current_identity)) -> Identity:
        if not is_role_allowed(identity.role, roles):
            raise ForbiddenException("Forbidden for this role")
        return identity

    return checker


require_admin = require_roles(Role.ADMIN)
