"""Telegram API routes — send messages, inspect updates, bot webhook."""

import secrets
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, Query

from snam_baitong.application.services import telegram_service
from snam_baitong.config import get_settings
from snam_baitong.core.exceptions import UnauthorizedException, UpstreamServiceException
from snam_baitong.domain.schemas.auth import Identity
from snam_baitong.domain.schemas.telegram import TelegramSendLatestRequest, TelegramSendRequest
from snam_baitong.infrastructure.telegram import TelegramBotClient
from snam_baitong.infrastructure.timeseries import SensorReader
from snam_baitong.interfaces.api.deps import get_current_identity, require_admin
from snam_baitong.interfaces.deps import get_sensor_reader, get_telegram_client

settings = get_settings()
router = APIRouter(prefix="/api/telegram", tags=["Telegram"])


@router.post("/send")
def send_message(
    body: TelegramSendRequest,
    client: TelegramBotClient = Depends(get_telegram_client),
    identity: Identity = Depends(require_admin),
):
    return {"success": True, "data": telegram_service.send_text(client, body)}


@router.get("/updates")
def list_updates(
    limit: int = Query(5, ge=1, le=100),
    client: TelegramBotClient = Depends(get_telegram_client),
    identity: Identity = Depends(require_admin),
):
    return {"success": True, "data": client.get_updates(limit)}


@router.post("/send-latest")
def send_latest(
    body: Optional[TelegramSendLatestRequest] = None,
    client: TelegramBotClient = Depends(get_telegram_client),
    reader: SensorReader = Depends(get_sensor_reader),
    identity: Identity = Depends(get_current_identity),
):
    data = telegram_service.send_latest(client, reader, body or TelegramSendLatestRequest())
    return {"success": True, "data": data}


@router.post("/webhook")
def webhook(
    update: Dict[str, Any],
    client: TelegramBotClient = Depends(get_telegram_client),
    reader: SensorReader = Depends(get_sensor_reader),
    secret_token: Optional[str] = Header(None, alias="X-Telegram-Bot-Api-Secret-Token"),
):
    """Called by Telegram, not by users; guarded by the webhook secret when one is set."""
    expected = settings.TELEGRAM_WEBHOOK_SECRET
    if expected and not secrets.compare_digest(secret_token or "", expected):
        raise UnauthorizedException("Invalid webhook secret")

    try:
        handled = telegram_service.handle_update(client, reader, update)
    except UpstreamServiceException:
        # Telegram redelivers the update on any non-2xx answer.
        handled = False
    return {"success": True, "handled": handled}
