from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ParseMode(str, Enum):
    HTML = "HTML"
    MARKDOWN_V2 = "MarkdownV2"


class SendMessageRequest(BaseModel):
    """Outbound sendMessage envelope. Built once per event and never mutated."""

    model_config = ConfigDict(frozen=True)

    chat_id: str
    message_thread_id: Optional[str] = None
    text: str
    parse_mode: Optional[ParseMode] = ParseMode.HTML

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ApiResponse(BaseModel):
    """Envelope returned by every Bot API method."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    error_code: Optional[int] = None
    description: Optional[str] = None
    result: Optional[Any] = None
