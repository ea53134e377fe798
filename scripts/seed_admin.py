"""Create the tables and the bootstrap admin account.

Usage: python -m scripts.seed_admin [username] [password]
"""

import sys

from snam_baitong.application.services.auth_service import ensure_admin
from snam_baitong.config import get_settings
from snam_baitong.domain.models.plant import Plant  # noqa: F401
from snam_baitong.domain.models.qr_token import QRToken  # noqa: F401
from snam_baitong.domain.models.revoked_token import RevokedToken  # noqa: F401
from snam_baitong.domain.models.user import User
from snam_baitong.infrastructure.database import Base, SessionLocal, engine
from snam_baitong.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def seed(username: str, password: str) -> bool:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        return ensure_admin(SQLAlchemyUserRepository(db, User), username, password)
    finally:
        db.close()


def main(argv=None) -> int:
    settings = get_settings()
    args = list(sys.argv[1:] if argv is None else argv)
    username = args[0] if len(args) > 0 else settings.ADMIN_USERNAME
    password = args[1] if len(args) > 1 else settings.ADMIN_PASSWORD

    if seed(username, password):
        print(f"Admin user '{username}' created.")
    else:
        print("An admin account already exists; nothing to do.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
