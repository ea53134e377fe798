"""User service — ministry/admin account management."""

from typing import List

import structlog

from snam_baitong.application.services.auth_service import hash_password
from snam_baitong.core.exceptions import (
    ConflictException,
    EntityNotFoundException,
    ValidationException,
)
from snam_baitong.domain.models.user import User
from snam_baitong.domain.repositories.user_repository import UserRepository
from snam_baitong.domain.schemas.auth import UserCreate, UserUpdate

logger = structlog.get_logger(__name__)

USERNAME_TAKEN = "Username already exists"


def list_users(repo: UserRepository) -> List[User]:
    return repo.list()


def get_user_or_404(repo: UserRepository, user_id: int) -> User:
    user = repo.get_by_id(user_id)
    if user is None:
        raise EntityNotFoundException("User not found")
    return user


def create_user(repo: UserRepository, body: UserCreate) -> User:
    username = (body.username or "").strip()
    if not username or not body.password or body.role is None:
        raise ValidationException("username, password and role are required")

    if repo.get_by_username(username) is not None:
        raise ConflictException(USERNAME_TAKEN)

    try:
        user = repo.create({
            "username": username,
            "password_hash": hash_password(body.password),
            "role": body.role,
        })
    except ConflictException as e:
        # Lost a race against another insert of the same username.
        raise ConflictException(USERNAME_TAKEN) from e

    logger.info("User created", user_id=user.id, username=user.username, role=user.role.value)
    return user


def update_user(repo: UserRepository, user_id: int, body: UserUpdate) -> User:
    user = get_user_or_404(repo, user_id)

    supplied = body.model_dump(exclude_unset=True)
    updates = {}
    if supplied.get("role") is not None:
        updates["role"] = supplied["role"]
    if supplied.get("status") is not None:
        updates["status"] = supplied["status"]
    if supplied.get("password"):
        updates["password_hash"] = hash_password(supplied["password"])

    if not updates:
        raise ValidationException("No fields to update")

    user = repo.update(user, updates)
    logger.info("User updated", user_id=user.id, fields=sorted(k for k in updates if k != "password_hash"))
    return user


def delete_user(repo: UserRepository, user_id: int) -> None:
    user = get_user_or_404(repo, user_id)
    repo.delete(user)
    logger.info("User deleted", user_id=user_id)
