"""APScheduler jobs — nightly purge of expired revocation entries."""

import logging
from datetime import datetime

import pytz
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from snam_baitong.config import get_settings
from snam_baitong.core.clock import utcnow
from snam_baitong.infrastructure.database import SessionLocal
from snam_baitong.infrastructure.repositories.revoked_token_repository import SQLAlchemyRevokedTokenRepository

settings = get_settings()
logger = logging.getLogger(__name__)
tz = pytz.timezone(settings.TIMEZONE)

scheduler = AsyncIOScheduler(timezone=tz)


def purge_revoked_tokens(session_factory=SessionLocal) -> int:
    """Drop revocation entries for tokens that would be rejected as expired anyway."""
    db = session_factory()
    try:
        removed = SQLAlchemyRevokedTokenRepository(db).purge_expired(utcnow())
        logger.info(f"Purged {removed} expired revocation entries")
        return removed
    finally:
        db.close()


async def revocation_purge_job():
    logger.info(f"Running revocation purge job at {datetime.now(tz).strftime('%Y-%m-%d %H:%M')}")
    try:
        purge_revoked_tokens()
    except Exception as e:
        logger.error(f"Revocation purge job failed: {e}")


def start_scheduler():
    """Start the APScheduler with the nightly revocation purge."""
    scheduler.add_job(
        revocation_purge_job,
        trigger=CronTrigger(hour=settings.REVOCATION_PURGE_HOUR, minute=0, timezone=tz),
        id="revocation_purge",
        name="Revocation List Purge (Nightly)",
        replace_existing=True,
    )

    scheduler.start()
    logger.info(f"Scheduler started — revocation purge daily at {settings.REVOCATION_PURGE_HOUR:02d}:00 {settings.TIMEZONE}")


def stop_scheduler():
    """Stop the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
