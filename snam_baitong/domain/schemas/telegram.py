"""Pydantic schemas for the Telegram routes."""

from typing import Literal, Optional, Union

from snam_baitong.domain.schemas.common import CamelModel


class TelegramSendRequest(CamelModel):
    text: Optional[str] = None
    chat_id: Optional[Union[int, str]] = None
    parse_mode: Optional[Literal["Markdown", "MarkdownV2", "HTML"]] = None
    disable_notification: bool = False


class TelegramSendLatestRequest(CamelModel):
    chat_id: Optional[Union[int, str]] = None
    disable_notification: bool = False
