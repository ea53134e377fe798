"""Telegram Bot API HTTP client.

Only the two calls the dashboard needs: sendMessage and getUpdates.
"""

import logging
from typing import Any, Dict, List, Optional, Union

import httpx

from snam_baitong.config import Settings, get_settings
from snam_baitong.core.exceptions import UpstreamServiceException, ValidationException

logger = logging.getLogger(__name__)

ChatId = Union[int, str]


class TelegramBotClient:
    """Client for `https://api.telegram.org/bot<token>/<method>`."""

    def __init__(
        self,
        token: str,
        default_chat_id: Optional[ChatId] = None,
        base_url: str = "https://api.telegram.org",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.token = token
        self.default_chat_id = default_chat_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.token)

    def _call(self, method: str, payload: Dict[str, Any]) -> Any:
        if not self.configured:
            raise UpstreamServiceException("Telegram bot is not configured")

        url = f"{self.base_url}/bot{self.token}/{method}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            error_text = e.response.text[:200] if e.response.text else "No response body"
            logger.warning(f"Telegram API error on {method}: {e.response.status_code} - {error_text}")
            raise UpstreamServiceException("Telegram request failed") from e
        except (httpx.HTTPError, ValueError) as e:
            # Type only: the request URL embeds the bot token.
            logger.warning(f"Telegram API connection error on {method}: {type(e).__name__}")
            raise UpstreamServiceException("Telegram request failed") from e

        if not isinstance(data, dict) or not data.get("ok"):
            description = data.get("description") if isinstance(data, dict) else None
            logger.warning(f"Telegram API refused {method}: {description}")
            raise UpstreamServiceException("Telegram request failed")
        return data.get("result")

    def send_message(
        self,
        text: str,
        chat_id: Optional[ChatId] = None,
        parse_mode: Optional[str] = None,
        disable_notification: bool = False,
    ) -> Dict[str, Any]:
        target = chat_id if chat_id not in (None, "") else self.default_chat_id
        if target in (None, ""):
            raise ValidationException("chatId is required when TELEGRAM_CHAT_ID is not set")

        payload: Dict[str, Any] = {"chat_id": target, "text": text}
        if parse_mode:
            payload["parse_mode"] = parse_mode
        if disable_notification:
            payload["disable_notification"] = True

        result = self._call("sendMessage", payload)
        logger.info(f"Telegram message sent to chat {target}")
        return result

    def get_updates(self, limit: int = 5) -> List[Dict[str, Any]]:
        result = self._call("getUpdates", {"limit": limit})
        return result if isinstance(result, list) else []


def build_telegram_client(settings: Optional[Settings] = None) -> TelegramBotClient:
    settings = settings or get_settings()
    if not settings.TELEGRAM_BOT_TOKEN:
        logger.warning("TELEGRAM_BOT_TOKEN not set -> Telegram routes will fail")
    return TelegramBotClient(
        token=settings.TELEGRAM_BOT_TOKEN,
        default_chat_id=settings.TELEGRAM_CHAT_ID,
        base_url=settings.TELEGRAM_API_URL,
        timeout=settings.TELEGRAM_TIMEOUT_SECONDS,
    )
