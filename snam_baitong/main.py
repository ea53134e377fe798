"""FastAPI application — main entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from snam_baitong.config import get_settings
from snam_baitong.core.exceptions import register_exception_handlers
from snam_baitong.core.logging import configure_logging
from snam_baitong.core.middleware import setup_middleware
from snam_baitong.infrastructure.database import Base, SessionLocal, engine

# Import all models so SQLAlchemy knows about them
from snam_baitong.domain.models.plant import Plant  # noqa: F401
from snam_baitong.domain.models.qr_token import QRToken  # noqa: F401
from snam_baitong.domain.models.revoked_token import RevokedToken  # noqa: F401
from snam_baitong.domain.models.user import User

# Import routers
from snam_baitong.interfaces.api.auth import router as auth_router
from snam_baitong.interfaces.api.plants import router as plants_router
from snam_baitong.interfaces.api.qr import router as qr_router
from snam_baitong.interfaces.api.sensors import router as sensors_router
from snam_baitong.interfaces.api.telegram import router as telegram_router
from snam_baitong.interfaces.api.users import router as users_router

settings = get_settings()

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)


def bootstrap_admin() -> None:
    from snam_baitong.application.services.auth_service import ensure_admin
    from snam_baitong.infrastructure.repositories.user_repository import SQLAlchemyUserRepository

    db = SessionLocal()
    try:
        ensure_admin(SQLAlchemyUserRepository(db, User), settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown events."""
    logger.info("Starting Snam Baitong backend...", env=settings.ENVIRONMENT)

    # Create DB tables (no migrations tool; create_all is idempotent)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    bootstrap_admin()

    if settings.SCHEDULER_ENABLED:
        from snam_baitong.scheduler.jobs import start_scheduler
        start_scheduler()

    yield

    if settings.SCHEDULER_ENABLED:
        from snam_baitong.scheduler.jobs import stop_scheduler
        stop_scheduler()
    logger.info("Snam Baitong backend stopped")


app = FastAPI(
    title="Snam Baitong — Farm Monitoring API",
    description="Plant registry, sensor snapshots and public QR crop views",
    version="1.0.0",
    lifespan=lifespan,
)

# Request ids, request logging, CORS
setup_middleware(app)

# Uniform {success, error} envelope for every failure
register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(plants_router)
app.include_router(users_router)
app.include_router(qr_router)
app.include_router(sensors_router)
app.include_router(telegram_router)


@app.get("/health")
def health():
    return {"success": True, "status": "healthy"}
