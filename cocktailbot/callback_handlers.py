"""Handlers for inline keyboard button presses."""

from __future__ import annotations

import logging
from uuid import UUID

from .commands import MenuCommand, MenuKind, parse_menu_command
from .dialogue import DialogueStorage, State, StateKind
from .message_processor import MessageProcessor
from .telegram import CallbackQuery, escape

log = logging.getLogger(__name__)

SEARCH_BY_NAME_PROMPT = "Напишите мне полное название коктейля или его часть."


class UnsupportedCommandError(Exception):
    """A menu command that is not handled in the current dialogue state."""


def _location(callback: CallbackQuery) -> tuple[int, int]:
    if callback.message is None:
        raise ValueError(f"callback {callback.id} carries no message")
    return callback.message.chat_id, callback.message.message_id


def _previous_page(command: MenuCommand) -> MenuCommand:
    page = "" if command.prev_page is None else str(command.prev_page)
    return parse_menu_command(f"{command.prev_command} {page}")


async def _show_main_menu(
    processor: MessageProcessor, dialogue: DialogueStorage, callback: CallbackQuery
) -> None:
    chat_id, message_id = _location(callback)
    await processor.show_main_menu(callback.from_user_id, chat_id, message_id, True)
    dialogue.exit(chat_id)


async def _handle_cocktail_navigation(
    processor: MessageProcessor, command: MenuCommand, callback: CallbackQuery
) -> bool:
    """Commands shared by both dialogue states; False when the kind is not one of them."""
    kind = command.kind
    if kind is MenuKind.COCKTAILS_PAGES:
        await processor.show_cocktail_pages(
            callback, parse_menu_command(command.prev_command), command.total_pages
        )
    elif kind is MenuKind.SEARCH_BY_ID:
        prev_page = _previous_page(command)
        await processor.show_cocktail(callback, prev_page, UUID(command.cocktail_id))
    elif kind is MenuKind.ADD_TO_FAVORITE:
        prev_page = _previous_page(command)
        await processor.add_to_favorite(callback, prev_page, UUID(command.cocktail_id))
    elif kind is MenuKind.REMOVE_FROM_FAVORITE:
        prev_page = _previous_page(command)
        await processor.remove_from_favorite(callback, prev_page, UUID(command.cocktail_id))
    else:
        return False
    return True


async def default_callback_handler(
    processor: MessageProcessor, bot, dialogue: DialogueStorage, callback: CallbackQuery
) -> None:
    """Handle a button press outside the search-by-name results.

    Raises UnsupportedCommandError for commands with no handler here.
    """
    if callback.data is None:
        return
    log.debug("User %s press menu button: %s", callback.from_user_id, callback.data)
    command = parse_menu_command(callback.data)
    kind = command.kind

    if kind is MenuKind.MAIN_MENU:
        await _show_main_menu(processor, dialogue, callback)
    elif kind is MenuKind.COCKTAILS_LIST:
        await processor.show_cocktails_list(callback, command.page)
    elif kind is MenuKind.SEARCH_BY_NAME:
        chat_id, message_id = _location(callback)
        await bot.edit_message_text(chat_id, message_id, escape(SEARCH_BY_NAME_PROMPT))
        dialogue.update(chat_id, State(StateKind.RECEIVE_COCKTAIL_NAME))
    elif kind is MenuKind.REGISTER:
        await processor.register_user(callback)
    elif kind is MenuKind.PROFILE_PAGE:
        await processor.show_profile_page(*_location(callback))
    elif kind is MenuKind.REGISTER_CONFIRMATION:
        await processor.show_register_confirmation(*_location(callback))
    elif kind is MenuKind.REMOVE_ACCOUNT:
        await processor.remove_user(callback)
    elif kind is MenuKind.REMOVE_ACCOUNT_CONFIRMATION:
        await processor.show_remove_user_confirmation(*_location(callback))
    elif kind is MenuKind.SHOW_FAVORITES:
        await processor.show_favorites(callback, command.page)
    elif not await _handle_cocktail_navigation(processor, command, callback):
        raise UnsupportedCommandError(f"unsupported menu command: {callback.data!r}")


async def receive_cocktail_name_callback_handler(
    processor: MessageProcessor,
    dialogue: DialogueStorage,
    callback: CallbackQuery,
    cocktail_name: str,
) -> None:
    """Handle a button press on the results of a search by name.

    Raises UnsupportedCommandError for commands with no handler here.
    """
    if callback.data is None:
        return
    log.debug("User %s press menu button: %s", callback.from_user_id, callback.data)
    command = parse_menu_command(callback.data)
    kind = command.kind

    if kind is MenuKind.MAIN_MENU:
        await _show_main_menu(processor, dialogue, callback)
    elif kind is MenuKind.COCKTAILS_LIST_BY_NAME:
        chat_id, message_id = _location(callback)
        await processor.show_cocktails_by_name(
            chat_id, message_id, cocktail_name, command.page
        )
    elif not await _handle_cocktail_navigation(processor, command, callback):
        raise UnsupportedCommandError(f"unsupported menu command: {callback.data!r}")