"""Bot screens: builds message texts and keyboards and sends them to Telegram."""

from __future__ import annotations

import logging
import uuid
from typing import Optional
from uuid import UUID

from .commands import MenuCommand
from .domain import (
    Cocktail,
    CocktailFilter,
    CocktailRepo,
    CocktailsPaged,
    Pagination,
    User,
    UserRepo,
)
from .keyboards import (
    ListCocktailsSource,
    PageNumber,
    get_cocktail_card_navigate_keyboard,
    get_cocktail_pages_keyboard,
    get_cocktails_list_keyboard,
    get_main_menu_keyboard,
    get_profile_page_keyboard,
    get_register_confirmation_keyboard,
    get_remove_user_confirmation_keyboard,
)
from .telegram import CallbackQuery, escape

log = logging.getLogger(__name__)

PAGE_SIZE = 10

MAIN_MENU_EDIT_TEXT = "Основное меню: "
MAIN_MENU_SEND_TEXT = "Основное меню:"
COCKTAILS_TEXT = "Коктейли: "
PAGES_TEXT = "Доступные страницы: "
PROFILE_TEXT = "Личный кабинет:"
REGISTERED_TEXT = "Вы успешно зарегистрированы"
REMOVED_TEXT = "Вы успешно удалили свою учетную запись"

REGISTER_CONFIRMATION_TEXT = (
    "Подтверждая регистрацию, вы соглашаетесь на то, что мы сохраняем ваш "
    "идентификатор пользователя Telegram. Другую информацию мы не собираем.\n\n"
    "У вас появляется возможность сохранять любимые коктейли в свою личную "
    "подборку, чтобы проще было их искать.\n\n"
    "В любой момент вы можете полностью удалить свой профиль.\n"
    "Приятного использования ☺️"
)
REMOVE_USER_CONFIRMATION_TEXT = (
    "Вы точно хотите удалить свой профиль?\n\n"
    "Все избранные коктейли будут удалены. 😔\n"
)


def _required(value, field_name: str, cocktail: Cocktail):
    if value is None:
        raise ValueError(f"cocktail {cocktail.id} has no {field_name}")
    return value


def render_cocktail_card(cocktail: Cocktail) -> str:
    """MarkdownV2 text of a cocktail card.

    Raises ValueError when the cocktail lacks any of the fields shown.
    """
    name = _required(cocktail.name, "name", cocktail)
    elements = _required(cocktail.composition_elements, "composition elements", cocktail)
    tools = _required(cocktail.tools, "tools", cocktail)
    recipe = _required(cocktail.recipe, "recipe", cocktail)
    history = _required(cocktail.history, "history", cocktail)
    tags = _required(cocktail.tags, "tags", cocktail)

    parts = [
        f"🍸*Коктейль:* {escape(cocktail.russian_name)}\n",
        f"*Английское название:* {escape(name)}\n",
        "\n*Ингредиенты:*\n",
    ]
    parts.extend(
        f"👉 {escape(item.name)} {item.count}{escape(item.unit)}\n" for item in elements
    )
    parts.append("\n*Требуемые инструменты:*\n")
    parts.extend(
        f"👉 {escape(tool.name)} {tool.count}{escape(tool.unit)}\n" for tool in tools
    )
    parts.append("\n*Способ приготовления:*\n")
    parts.extend(
        f"{number}\\. {escape(step)}\n" for number, step in enumerate(recipe.steps, start=1)
    )
    parts.append("\n*История для этого коктейля:*\n")
    parts.append(escape(history))
    parts.append("\n\n*Теги:*\n")
    parts.extend("\\#{} ".format(tag.name.replace(" ", "\\_")) for tag in tags)
    return "".join(parts)


def _location(callback: CallbackQuery) -> tuple[int, int]:
    if callback.message is None:
        raise ValueError(f"callback {callback.id} carries no message")
    return callback.message.chat_id, callback.message.message_id


class MessageProcessor:
    """Shows the bot's screens, reading users and cocktails from repositories."""

    def __init__(self, bot, user_repo: UserRepo, cocktail_repo: CocktailRepo) -> None:
        self._bot = bot
        self._users = user_repo
        self._cocktails = cocktail_repo

    async def show_main_menu(self, user_id, chat_id, message_id, edit_message) -> None:
        registered = await self._users.is_exist_by_telegram_id(user_id)
        keyboard = get_main_menu_keyboard(registered)
        if edit_message:
            await self._bot.edit_message_text(
                chat_id, message_id, MAIN_MENU_EDIT_TEXT, reply_markup=keyboard
            )
        else:
            await self._bot.send_message(
                chat_id, MAIN_MENU_SEND_TEXT, reply_markup=keyboard
            )

    async def show_cocktails_list(self, callback: CallbackQuery, next_page: int) -> None:
        cocktail_filter = CocktailFilter(
            pagination=Pagination(page=next_page, items_per_page=PAGE_SIZE), ids=[]
        )
        paged = await self._cocktails.get_names(cocktail_filter)
        keyboard = get_cocktails_list_keyboard(
            paged, PageNumber(next_page), PAGE_SIZE, ListCocktailsSource.COCKTAIL_LIST
        )
        chat_id, message_id = _location(callback)
        await self._bot.edit_message_text(
            chat_id, message_id, COCKTAILS_TEXT, reply_markup=keyboard
        )

    async def show_cocktails_by_name(
        self, chat_id, message_id: Optional[int], cocktail_name: str, next_page: int
    ) -> None:
        """Edit the message when its id is given, else send a new one."""
        cocktail_filter = CocktailFilter(
            pagination=Pagination(page=next_page, items_per_page=PAGE_SIZE),
            names=[cocktail_name],
            russian_names=[cocktail_name],
        )
        paged = await self._cocktails.get_by_filter(cocktail_filter)
        keyboard = get_cocktails_list_keyboard(
            paged,
            PageNumber(next_page),
            PAGE_SIZE,
            ListCocktailsSource.COCKTAIL_LIST_BY_NAME,
        )
        text = escape(COCKTAILS_TEXT)
        if message_id is not None:
            await self._bot.edit_message_text(
                chat_id, message_id, text, reply_markup=keyboard
            )
        else:
            await self._bot.send_message(chat_id, text, reply_markup=keyboard)

    async def show_favorites(self, callback: CallbackQuery, next_page: int) -> None:
        chat_id, message_id = _location(callback)
        user = await self._users.get_by_telegram_id(callback.from_user_id)
        if user is None:
            return
        if user.favorite_cocktails:
            cocktail_filter = CocktailFilter(
                pagination=Pagination(page=next_page, items_per_page=PAGE_SIZE),
                ids=list(user.favorite_cocktails),
            )
            paged = await self._cocktails.get_names(cocktail_filter)
        else:
            paged = CocktailsPaged(items=[], total_count=0)
        keyboard = get_cocktails_list_keyboard(
            paged, PageNumber(next_page), PAGE_SIZE, ListCocktailsSource.FAVORITES
        )
        await self._bot.edit_message_text(
            chat_id, message_id, COCKTAILS_TEXT, reply_markup=keyboard
        )

    async def show_cocktail_pages(
        self, callback: CallbackQuery, prev_page: MenuCommand, total_pages: int
    ) -> None:
        chat_id, message_id = _location(callback)
        keyboard = get_cocktail_pages_keyboard(total_pages, prev_page)
        await self._bot.edit_message_text(
            chat_id, message_id, PAGES_TEXT, reply_markup=keyboard
        )

    async def show_cocktail(
        self, callback: CallbackQuery, prev_page: MenuCommand, cocktail_id: UUID
    ) -> None:
        """Show a cocktail card; raises LookupError when the cocktail is unknown."""
        chat_id, message_id = _location(callback)
        cocktail = await self._cocktails.get_by_id(cocktail_id)
        if cocktail is None:
            raise LookupError(f"cocktail {cocktail_id} not found")
        text = render_cocktail_card(cocktail)
        user = await self._users.get_by_telegram_id(callback.from_user_id)
        favorite = None if user is None else cocktail_id in user.favorite_cocktails
        keyboard = get_cocktail_card_navigate_keyboard(prev_page, cocktail_id, favorite)
        await self._bot.edit_message_text(chat_id, message_id, text, reply_markup=keyboard)

    async def show_register_confirmation(self, chat_id, message_id) -> None:
        await self._bot.edit_message_text(
            chat_id,
            message_id,
            escape(REGISTER_CONFIRMATION_TEXT),
            reply_markup=get_register_confirmation_keyboard(),
        )

    async def register_user(self, callback: CallbackQuery) -> None:
        user_id = callback.from_user_id
        chat_id, message_id = _location(callback)
        await self._users.create(
            User(id=uuid.uuid4(), telegram_id=user_id, favorite_cocktails=[])
        )
        answered = await self._bot.answer_callback_query(
            callback.id, text=REGISTERED_TEXT, show_alert=True
        )
        log.info("Sent callback register result %s", answered)
        await self.show_main_menu(user_id, chat_id, message_id, True)

    async def show_remove_user_confirmation(self, chat_id, message_id) -> None:
        await self._bot.edit_message_text(
            chat_id,
            message_id,
            escape(REMOVE_USER_CONFIRMATION_TEXT),
            reply_markup=get_remove_user_confirmation_keyboard(),
        )

    async def remove_user(self, callback: CallbackQuery) -> None:
        user_id = callback.from_user_id
        chat_id, message_id = _location(callback)
        user = await self._users.get_by_telegram_id(user_id)
        if user is None:
            return
        await self._users.delete(user)
        answered = await self._bot.answer_callback_query(
            callback.id, text=REMOVED_TEXT, show_alert=True
        )
        log.info("Sent callback remove user result %s", answered)
        await self.show_main_menu(user_id, chat_id, message_id, True)

    async def show_profile_page(self, chat_id, message_id) -> None:
        await self._bot.edit_message_text(
            chat_id, message_id, PROFILE_TEXT, reply_markup=get_profile_page_keyboard()
        )

    async def add_to_favorite(
        self, callback: CallbackQuery, prev_page: MenuCommand, cocktail_id: UUID
    ) -> None:
        user = await self._users.get_by_telegram_id(callback.from_user_id)
        if user is None:
            log.warning("User with id %s not found in store", callback.from_user_id)
            return
        user.favorite_cocktails.append(cocktail_id)
        await self._users.update(user)
        await self.show_cocktail(callback, prev_page, cocktail_id)

    async def remove_from_favorite(
        self, callback: CallbackQuery, prev_page: MenuCommand, cocktail_id: UUID
    ) -> None:
        """Raises ValueError when the cocktail is not among the user's favourites."""
        user = await self._users.get_by_telegram_id(callback.from_user_id)
        if user is None:
            log.warning("User with id %s not found in store", callback.from_user_id)
            return
        user.favorite_cocktails.remove(cocktail_id)
        await self._users.update(user)
        await self.show_cocktail(callback, prev_page, cocktail_id)