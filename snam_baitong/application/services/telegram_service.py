"""Telegram service — push sensor snapshots to a chat and answer the /update command."""

from typing import Any, Dict, Optional

import structlog

from snam_baitong.application.services.sensor_service import compute_plant_status, fetch_latest_snapshot
from snam_baitong.core.exceptions import UpstreamServiceException, ValidationException
from snam_baitong.domain.schemas.telegram import TelegramSendLatestRequest, TelegramSendRequest
from snam_baitong.infrastructure.telegram import TelegramBotClient
from snam_baitong.infrastructure.timeseries import SensorReader

logger = structlog.get_logger(__name__)

UPDATE_COMMAND = "/update"
SENSORS_UNAVAILABLE = "Sensor data is unavailable right now."


def format_snapshot_message(snapshot: Optional[Dict[str, Any]]) -> str:
    """Plain-text rendering of a snapshot, one reading per line."""
    if not snapshot or not snapshot.get("readings"):
        return "No sensor data available."

    lines = ["Latest sensor data"]
    if snapshot.get("location"):
        lines.append(f"Location: {snapshot['location']}")
    if snapshot.get("recordedAt"):
        lines.append(f"Recorded: {snapshot['recordedAt']}")
    for field, reading in snapshot["readings"].items():
        unit = f" {reading['unit']}" if reading.get("unit") else ""
        lines.append(f"{field}: {reading.get('value')}{unit}")

    status = compute_plant_status(snapshot["readings"])
    lines.append(f"Status: {status['level']}")
    for item in status["outOfRange"]:
        lines.append(f"  {item['field']} outside {item['min']}-{item['max']}")
    return "\n".join(lines)


def send_text(client: TelegramBotClient, body: TelegramSendRequest) -> Dict[str, Any]:
    if not body.text or not body.text.strip():
        raise ValidationException("text is required")
    return client.send_message(
        body.text,
        chat_id=body.chat_id,
        parse_mode=body.parse_mode,
        disable_notification=body.disable_notification,
    )


def send_latest(
    client: TelegramBotClient,
    reader: SensorReader,
    body: TelegramSendLatestRequest,
) -> Dict[str, Any]:
    snapshot = fetch_latest_snapshot(reader)
    result = client.send_message(
        format_snapshot_message(snapshot),
        chat_id=body.chat_id,
        disable_notification=body.disable_notification,
    )
    logger.info("Latest sensors sent to Telegram", chat_id=body.chat_id or client.default_chat_id)
    return result


def _command(text: str) -> str:
    # "/update@SomeBot extra" -> "/update"
    return text.strip().split(maxsplit=1)[0].split("@", 1)[0].lower() if text.strip() else ""


def handle_update(client: TelegramBotClient, reader: SensorReader, update: Dict[str, Any]) -> bool:
    """Answer an incoming /update command in the chat it came from.

    Returns True when a reply was sent. Anything else in the update is ignored.
    """
    message = update.get("message") or update.get("edited_message") or {}
    text = message.get("text") or ""
    chat_id = (message.get("chat") or {}).get("id")
    if chat_id is None or _command(text) != UPDATE_COMMAND:
        return False

    try:
        reply = format_snapshot_message(fetch_latest_snapshot(reader))
    except UpstreamServiceException as e:
        logger.warning("Sensor read failed for Telegram /update", error=e.message)
        reply = SENSORS_UNAVAILABLE

    client.send_message(reply, chat_id=chat_id)
    logger.info("Answered Telegram /update", chat_id=chat_id)
    return True
