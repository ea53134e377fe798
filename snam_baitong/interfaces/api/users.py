"""Users API routes — admin-only account management."""

from fastapi import APIRouter, Depends, Path, status

from snam_baitong.application.services import user_service
from snam_baitong.domain.repositories.user_repository import UserRepository
from snam_baitong.domain.schemas.auth import Identity, UserCreate, UserRead, UserUpdate
from snam_baitong.domain.schemas.common import MAX_ID
from snam_baitong.interfaces.api.deps import require_admin
from snam_baitong.interfaces.deps import get_user_repository

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("")
def list_users(
    repo: UserRepository = Depends(get_user_repository),
    identity: Identity = Depends(require_admin),
):
    users = user_service.list_users(repo)
    return {"success": True, "data": [UserRead.model_validate(u).to_json() for u in users]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    repo: UserRepository = Depends(get_user_repository),
    identity: Identity = Depends(require_admin),
):
    user = user_service.create_user(repo, body)
    return {"success": True, "data": UserRead.model_validate(user).to_json()}


@router.put("/{user_id}")
def update_user(
    body: UserUpdate,
    user_id: int = Path(..., ge=1, le=MAX_ID),
    repo: UserRepository = Depends(get_user_repository),
    identity: Identity = Depends(require_admin),
):
    user = user_service.update_user(repo, user_id, body)
    return {"success": True, "data": UserRead.model_validate(user).to_json()}


@router.delete("/{user_id}")
def delete_user(
    user_id: int = Path(..., ge=1, le=MAX_ID),
    repo: UserRepository = Depends(get_user_repository),
    identity: Identity = Depends(require_admin),
):
    user_service.delete_user(repo, user_id)
    return {"success": True, "message": "User deleted"}
