"""Auth API routes — login, logout, me."""

from fastapi import APIRouter, Depends

from snam_baitong.application.services import auth_service
from snam_baitong.application.services.user_service import get_user_or_404
from snam_baitong.domain.repositories.revoked_token_repository import RevokedTokenRepository
from snam_baitong.domain.repositories.user_repository import UserRepository
from snam_baitong.domain.schemas.auth import Identity, LoginRequest, UserRead
from snam_baitong.interfaces.api.deps import get_bearer_token, get_current_identity
from snam_baitong.interfaces.deps import get_revoked_token_repository, get_user_repository

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login")
def login(body: LoginRequest, repo: UserRepository = Depends(get_user_repository)):
    result = auth_service.login(repo, body.username, body.password)
    return {"success": True, **result}


@router.post("/logout")
def logout(
    token: str = Depends(get_bearer_token),
    revoked_repo: RevokedTokenRepository = Depends(get_revoked_token_repository),
):
    # Signature and expiry are checked, revocation is not: logging out twice is harmless.
    payload = auth_service.decode_access_token(token)
    auth_service.logout(revoked_repo, token, int(payload["sub"]))
    return {"success": True, "message": "Logged out"}


@router.get("/me")
def get_me(
    identity: Identity = Depends(get_current_identity),
    repo: UserRepository = Depends(get_user_repository),
):
    user = get_user_or_404(repo, identity.id)
    return {"success": True, "data": UserRead.model_validate(user).to_json()}
