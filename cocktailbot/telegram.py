"""A small asynchronous client for the Telegram Bot API and its data types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import aiohttp

DEFAULT_API_URL = "https://api.telegram.org"
DEFAULT_PARSE_MODE = "MarkdownV2"

_MARKDOWN_SPECIAL = frozenset("\\_*[]()~`>#+-=|{}.!")


class TelegramError(Exception):
    """The Bot API refused a request or could not be reached."""

    def __init__(self, message: str, error_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.error_code = error_code


def escape(text: str) -> str:
    """Escape every MarkdownV2 special character with a backslash."""
    return "".join(f"\\{ch}" if ch in _MARKDOWN_SPECIAL else ch for ch in text)


@dataclass(frozen=True)
class InlineKeyboardButton:
    """A button that sends callback data when pressed."""

    text: str
    callback_data: str

    def to_dict(self) -> dict[str, str]:
        return {"text": self.text, "callback_data": self.callback_data}


@dataclass
class InlineKeyboardMarkup:
    """Rows of inline buttons attached to a message."""

    inline_keyboard: list[list[InlineKeyboardButton]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "inline_keyboard": [
                [button.to_dict() for button in row] for row in self.inline_keyboard
            ]
        }


@dataclass(frozen=True)
class Message:
    message_id: int
    chat_id: int
    from_user_id: Optional[int] = None
    text: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        sender = data.get("from")
        return cls(
            message_id=data["message_id"],
            chat_id=data["chat"]["id"],
            from_user_id=None if sender is None else sender["id"],
            text=data.get("text"),
        )


@dataclass(frozen=True)
class CallbackQuery:
    """A press of an inline button."""

    id: str
    from_user_id: int
    data: Optional[str] = None
    message: Optional[Message] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CallbackQuery":
        message = data.get("message")
        return cls(
            id=data["id"],
            from_user_id=data["from"]["id"],
            data=data.get("data"),
            message=None if message is None else Message.from_dict(message),
        )

    @property
    def chat_id(self) -> Optional[int]:
        return None if self.message is None else self.message.chat_id

    @property
    def message_id(self) -> Optional[int]:
        return None if self.message is None else self.message.message_id


@dataclass(frozen=True)
class Update:
    update_id: int
    message: Optional[Message] = None
    callback_query: Optional[CallbackQuery] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Update":
        message = data.get("message")
        callback = data.get("callback_query")
        return cls(
            update_id=data["update_id"],
            message=None if message is None else Message.from_dict(message),
            callback_query=None if callback is None else CallbackQuery.from_dict(callback),
        )


class BotClient:
    """Calls Bot API methods; text messages use MarkdownV2 by default."""

    def __init__(
        self,
        token: str,
        session=None,
        api_url: str = DEFAULT_API_URL,
        parse_mode: Optional[str] = DEFAULT_PARSE_MODE,
    ) -> None:
        self._token = token
        self._session = session
        self._owns_session = session is None
        self._api_url = api_url.rstrip("/")
        self.parse_mode = parse_mode

    def __repr__(self) -> str:
        return f"BotClient(api_url={self._api_url!r})"

    async def __aenter__(self) -> "BotClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _get_session(self):
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def call(self, method: str, payload=None) -> Any:
        """Invoke a Bot API method and return its result."""
        url = f"{self._api_url}/bot{self._token}/{method}"
        try:
            async with self._get_session().post(url, json=payload or {}) as response:
                body = await response.json(content_type=None)
        except aiohttp.ClientError as exc:
            raise TelegramError(f"{method} failed: {exc}") from exc
        except ValueError as exc:
            raise TelegramError(f"{method} returned a malformed response") from exc
        if not isinstance(body, dict):
            raise TelegramError(f"{method} returned a malformed response")
        if not body.get("ok"):
            raise TelegramError(
                body.get("description", f"{method} failed"), body.get("error_code")
            )
        return body.get("result")

    def _text_payload(self, text: str, reply_markup) -> dict[str, Any]:
        payload: dict[str, Any] = {"text": text}
        if self.parse_mode:
            payload["parse_mode"] = self.parse_mode
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup.to_dict()
        return payload

    async def send_message(self, chat_id, text, reply_markup=None) -> Message:
        payload = {"chat_id": chat_id, **self._text_payload(text, reply_markup)}
        return Message.from_dict(await self.call("sendMessage", payload))

    async def edit_message_text(
        self, chat_id, message_id, text, reply_markup=None
    ) -> Optional[Message]:
        payload = {
            "chat_id": chat_id,
            "message_id": message_id,
            **self._text_payload(text, reply_markup),
        }
        result = await self.call("editMessageText", payload)
        return Message.from_dict(result) if isinstance(result, dict) else None

    async def answer_callback_query(
        self, callback_query_id, text=None, show_alert=False
    ) -> bool:
        payload: dict[str, Any] = {"callback_query_id": callback_query_id}
        if text is not None:
            payload["text"] = text
        if show_alert:
            payload["show_alert"] = True
        return bool(await self.call("answerCallbackQuery", payload))

    async def get_updates(self, offset=None, timeout=30) -> list[Update]:
        """Long-poll for message and callback query updates."""
        payload: dict[str, Any] = {
            "timeout": timeout,
            "allowed_updates": ["message", "callback_query"],
        }
        if offset is not None:
            payload["offset"] = offset
        result = await self.call("getUpdates", payload)
        return [Update.from_dict(item) for item in result or []]

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None