"""Inline keyboards shown by the bot."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from uuid import UUID

from .commands import (
    MenuCommand,
    MenuKind,
    cocktail_by_id_command,
    cocktail_pages_command,
    cocktails_list_by_name_command,
    cocktails_list_command,
    favorite_cocktails_command,
    main_menu_command,
    remove_from_favourite_command,
    add_to_favourite_command,
)
from .domain import CocktailsPaged
from .telegram import InlineKeyboardButton, InlineKeyboardMarkup, escape

BACK = "👈 Назад"
PREV_ARROW = "👈"
NEXT_ARROW = "👉"
PAGES_PER_ROW = 4


@dataclass(frozen=True)
class PageNumber:
    """A zero-based page number."""

    value: int

    def next(self) -> "PageNumber":
        return PageNumber(self.value + 1)

    def previous(self) -> "PageNumber":
        return PageNumber(max(self.value - 1, 0))

    def human_readable(self) -> "PageNumber":
        return PageNumber(self.value + 1)


class ListCocktailsSource(Enum):
    COCKTAIL_LIST = MenuKind.COCKTAILS_LIST
    FAVORITES = MenuKind.SHOW_FAVORITES
    COCKTAIL_LIST_BY_NAME = MenuKind.COCKTAILS_LIST_BY_NAME


_LIST_COMMANDS = {
    MenuKind.COCKTAILS_LIST: cocktails_list_command,
    MenuKind.SHOW_FAVORITES: favorite_cocktails_command,
    MenuKind.COCKTAILS_LIST_BY_NAME: cocktails_list_by_name_command,
}

_MAIN_MENU_BUTTONS = (
    ("📋 Список коктейлей", MenuKind.COCKTAILS_LIST.value),
    ("🔎 Поиск по названию", MenuKind.SEARCH_BY_NAME.value),
)
_PROFILE_BUTTON = ("🗄 Личная страница", MenuKind.PROFILE_PAGE.value)
_REGISTER_BUTTON = ("🔑 Регистрация", MenuKind.REGISTER_CONFIRMATION.value)


def _single_column(*buttons: tuple[str, str]) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [[InlineKeyboardButton(text, data)] for text, data in buttons]
    )


def get_main_menu_keyboard(user_registered: bool) -> InlineKeyboardMarkup:
    last = _PROFILE_BUTTON if user_registered else _REGISTER_BUTTON
    return _single_column(*_MAIN_MENU_BUTTONS, last)


def get_register_confirmation_keyboard() -> InlineKeyboardMarkup:
    return _single_column(
        ("Подтвердить регистрацию", MenuKind.REGISTER.value),
        (BACK, main_menu_command()),
    )


def get_remove_user_confirmation_keyboard() -> InlineKeyboardMarkup:
    return _single_column(
        ("Подтвердить удаление", MenuKind.REMOVE_ACCOUNT.value),
        (BACK, MenuKind.PROFILE_PAGE.value),
    )


def get_cocktails_list_keyboard(
    cocktails_paged: CocktailsPaged,
    current_page: PageNumber,
    page_size: int,
    source: ListCocktailsSource,
) -> InlineKeyboardMarkup:
    """One button per cocktail, a navigation row and a back button."""
    kind = source.value
    list_command = _LIST_COMMANDS[kind]
    here = MenuCommand(kind, page=current_page.value)
    rows = [
        [
            InlineKeyboardButton(
                cocktail.russian_name, cocktail_by_id_command(cocktail.id, here)
            )
        ]
        for cocktail in cocktails_paged.items
    ]

    full_pages, remainder = divmod(cocktails_paged.total_count, page_size)
    available_pages = full_pages + (1 if remainder else 0)
    counter = InlineKeyboardButton(
        escape(f"{current_page.human_readable().value}/{available_pages}"),
        cocktail_pages_command(available_pages, MenuCommand(kind)),
    )
    previous = InlineKeyboardButton(
        PREV_ARROW, list_command(current_page.previous().value)
    )
    following = InlineKeyboardButton(NEXT_ARROW, list_command(current_page.next().value))

    if current_page.value == 0:
        navigation = [counter] if available_pages == 1 else [counter, following]
    elif current_page.value == full_pages:
        navigation = [previous, counter]
    else:
        navigation = [previous, counter, following]
    rows.append(navigation)
    rows.append([InlineKeyboardButton(BACK, main_menu_command())])
    return InlineKeyboardMarkup(rows)


def get_cocktail_pages_keyboard(total_pages: int, source: MenuCommand) -> InlineKeyboardMarkup:
    """Buttons numbered from 1 to total_pages, four to a row."""
    list_command = _LIST_COMMANDS.get(source.kind, cocktails_list_command)
    buttons = [
        InlineKeyboardButton(str(page), list_command(page - 1))
        for page in range(1, total_pages + 1)
    ]
    return InlineKeyboardMarkup(
        [buttons[start : start + PAGES_PER_ROW] for start in range(0, len(buttons), PAGES_PER_ROW)]
    )


def get_cocktail_card_navigate_keyboard(
    prev_page: MenuCommand, cocktail_id: UUID, favorite: Optional[bool]
) -> InlineKeyboardMarkup:
    """Back button to the list shown before, plus a favourite toggle for users.

    Raises ValueError when prev_page is not a list command.
    """
    list_command = _LIST_COMMANDS.get(prev_page.kind)
    if list_command is None:
        raise ValueError(f"cannot return to {prev_page.kind.name} from a cocktail card")
    row = [InlineKeyboardButton(BACK, list_command(prev_page.page))]
    if favorite is True:
        row.append(
            InlineKeyboardButton("❤️", remove_from_favourite_command(cocktail_id, prev_page))
        )
    elif favorite is False:
        row.append(
            InlineKeyboardButton("🤍", add_to_favourite_command(cocktail_id, prev_page))
        )
    return InlineKeyboardMarkup([row])


def get_profile_page_keyboard() -> InlineKeyboardMarkup:
    return _single_column(
        ("❤ Показать избранное", favorite_cocktails_command(0)),
        ("🗑 Удалить учетную запись", MenuKind.REMOVE_ACCOUNT_CONFIRMATION.value),
        (BACK, MenuKind.MAIN_MENU.value),
    )