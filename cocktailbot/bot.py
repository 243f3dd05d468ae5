"""Routes Telegram updates to handlers according to the chat's dialogue state."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .callback_handlers import (
    default_callback_handler,
    receive_cocktail_name_callback_handler,
)
from .dialogue import DialogueStorage, State, StateKind
from .message_processor import MessageProcessor
from .telegram import CallbackQuery, Message, TelegramError, Update

log = logging.getLogger(__name__)

MENU_COMMAND = "menu"


def is_menu_command(text: str) -> bool:
    """Tell whether the text is the ``/menu`` command, optionally addressed ``/menu@bot``."""
    words = text.split()
    if len(words) != 1 or not words[0].startswith("/"):
        return False
    name = words[0][1:].split("@", 1)[0]
    return name == MENU_COMMAND


def _chat_id(update: Update) -> Optional[int]:
    if update.message is not None:
        return update.message.chat_id
    if update.callback_query is not None:
        return update.callback_query.chat_id
    return None


class BotDispatcher:
    """Polls for updates and hands each to the handler matching the chat state."""

    def __init__(
        self,
        bot,
        repository_factory,
        dialogue: Optional[DialogueStorage] = None,
        poll_timeout: int = 30,
        retry_delay: float = 5.0,
    ) -> None:
        self._bot = bot
        self._repositories = repository_factory
        self.dialogue = DialogueStorage() if dialogue is None else dialogue
        self._poll_timeout = poll_timeout
        self._retry_delay = retry_delay

    async def _processor(self) -> MessageProcessor:
        users = await self._repositories.get_user_repository()
        cocktails = await self._repositories.get_cocktails_repository()
        return MessageProcessor(self._bot, users, cocktails)

    async def dispatch(self, update: Update) -> bool:
        """Handle one update; False when no handler accepts it."""
        chat_id = _chat_id(update)
        handled = False
        if chat_id is not None:
            state = self.dialogue.get(chat_id)
            if update.message is not None:
                handled = await self._on_message(update.message, state)
            elif update.callback_query is not None:
                await self._on_callback(update.callback_query, state)
                handled = True
        if not handled:
            log.warning("Unhandled update: %r", update)
        return handled

    async def _on_message(self, message: Message, state: State) -> bool:
        if message.text is None:
            return False
        if is_menu_command(message.text):
            await self._show_menu(message)
            return True
        if state.kind is StateKind.RECEIVE_COCKTAIL_NAME:
            await self._receive_cocktail_name(message, message.text)
            return True
        return False

    async def _show_menu(self, message: Message) -> None:
        if message.from_user_id is None:
            raise ValueError("can't get user info from telegram message")
        processor = await self._processor()
        await processor.show_main_menu(
            message.from_user_id, message.chat_id, message.message_id, False
        )

    async def _receive_cocktail_name(self, message: Message, text: str) -> None:
        processor = await self._processor()
        await processor.show_cocktails_by_name(message.chat_id, None, text, 0)
        self.dialogue.update(
            message.chat_id, State(StateKind.RECEIVED_COCKTAIL_NAME, cocktail_name=text)
        )

    async def _on_callback(self, callback: CallbackQuery, state: State) -> None:
        processor = await self._processor()
        if state.kind is StateKind.RECEIVED_COCKTAIL_NAME:
            await receive_cocktail_name_callback_handler(
                processor, self.dialogue, callback, state.cocktail_name
            )
        else:
            await default_callback_handler(processor, self._bot, self.dialogue, callback)

    async def run(self) -> None:
        """Poll and dispatch until cancelled; handler errors are logged, not raised."""
        offset: Optional[int] = None
        while True:
            try:
                updates = await self._bot.get_updates(
                    offset=offset, timeout=self._poll_timeout
                )
            except TelegramError as exc:
                log.error("Failed to fetch updates: %s", exc)
                await asyncio.sleep(self._retry_delay)
                continue
            for update in updates:
                offset = update.update_id + 1
                try:
                    await self.dispatch(update)
                except Exception:
                    log.exception("An error has occurred in the dispatcher")