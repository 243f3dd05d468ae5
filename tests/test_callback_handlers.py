from dataclasses import replace
from uuid import uuid4

import pytest

from cocktailbot.callback_handlers import (
    SEARCH_BY_NAME_PROMPT,
    UnsupportedCommandError,
    default_callback_handler,
    receive_cocktail_name_callback_handler,
)
from cocktailbot.commands import (
    MenuCommand,
    MenuKind,
    add_to_favourite_command,
    cocktail_by_id_command,
    cocktail_pages_command,
    remove_from_favourite_command,
)
from cocktailbot.dialogue import DialogueStorage, State, StateKind
from cocktailbot.domain import (
    Cocktail,
    CocktailFilter,
    CocktailItem,
    CocktailRepo,
    CocktailsPaged,
    Pagination,
    Recipe,
    Tag,
    User,
    UserRepo,
)
from cocktailbot.keyboards import (
    get_cocktail_card_navigate_keyboard,
    get_cocktail_pages_keyboard,
    get_main_menu_keyboard,
    get_profile_page_keyboard,
    get_register_confirmation_keyboard,
    get_remove_user_confirmation_keyboard,
)
from cocktailbot.message_processor import (
    COCKTAILS_TEXT,
    MAIN_MENU_EDIT_TEXT,
    PAGE_SIZE,
    PAGES_TEXT,
    PROFILE_TEXT,
    REGISTER_CONFIRMATION_TEXT,
    REGISTERED_TEXT,
    REMOVE_USER_CONFIRMATION_TEXT,
    REMOVED_TEXT,
    MessageProcessor,
    render_cocktail_card,
)
from cocktailbot.telegram import CallbackQuery, Message, escape

CHAT = 100
MSG = 7
USER = 42


class FakeBot:
    def __init__(self):
        self.calls = []
        self.answers = []

    async def edit_message_text(self, chat_id, message_id, text, reply_markup=None):
        self.calls.append(("edit", chat_id, message_id, text, reply_markup))

    async def send_message(self, chat_id, text, reply_markup=None):
        self.calls.append(("send", chat_id, text, reply_markup))

    async def answer_callback_query(self, callback_query_id, text=None, show_alert=False):
        self.answers.append((callback_query_id, text, show_alert))
        return True


class MemoryUsers(UserRepo):
    def __init__(self, users=()):
        self.users = {user.telegram_id: user for user in users}

    async def create(self, user_entity):
        self.users[user_entity.telegram_id] = user_entity

    async def delete(self, user_entity):
        self.users.pop(user_entity.telegram_id, None)

    async def update(self, user_entity):
        self.users[user_entity.telegram_id] = user_entity

    async def get_by_telegram_id(self, telegram_user_id):
        user = self.users.get(telegram_user_id)
        if user is None:
            return None
        return replace(user, favorite_cocktails=list(user.favorite_cocktails))

    async def is_exist_by_telegram_id(self, telegram_user_id):
        return telegram_user_id in self.users


class MemoryCocktails(CocktailRepo):
    def __init__(self, cocktails=()):
        self.cocktails = {cocktail.id: cocktail for cocktail in cocktails}
        self.filters = []

    async def create(self, entity):
        self.cocktails[entity.id] = entity

    async def delete(self, entity):
        self.cocktails.pop(entity.id, None)

    async def update(self, entity):
        self.cocktails[entity.id] = entity

    def _all(self):
        return CocktailsPaged(items=list(self.cocktails.values()), total_count=len(self.cocktails))

    async def get_names(self, filter):
        self.filters.append(("names", filter))
        return self._all()

    async def get_by_id(self, id):
        return self.cocktails.get(id)

    async def get_by_filter(self, filter):
        self.filters.append(("filter", filter))
        return self._all()


def make_cocktail():
    return Cocktail(
        id=uuid4(),
        russian_name="Мохито",
        name="Mojito",
        history="Cuba",
        tags=[Tag("classic")],
        tools=[CocktailItem("glass", 1, "pcs")],
        composition_elements=[CocktailItem("rum", 50, "ml")],
        recipe=Recipe(["Mix"]),
    )


def callback(data):
    return CallbackQuery(
        id="cb", from_user_id=USER, data=data, message=Message(message_id=MSG, chat_id=CHAT)
    )


@pytest.fixture
def cocktail():
    return make_cocktail()


@pytest.fixture
def env(cocktail):
    bot = FakeBot()
    users = MemoryUsers()
    cocktails = MemoryCocktails([cocktail])
    processor = MessageProcessor(bot, users, cocktails)
    return bot, users, cocktails, processor, DialogueStorage()


@pytest.mark.asyncio
async def test_main_menu_edits_message_and_resets_dialogue(env):
    bot, _, _, processor, dialogue = env
    dialogue.update(CHAT, State(StateKind.RECEIVE_COCKTAIL_NAME))
    await default_callback_handler(processor, bot, dialogue, callback("mam"))
    assert bot.calls == [("edit", CHAT, MSG, MAIN_MENU_EDIT_TEXT, get_main_menu_keyboard(False))]
    assert dialogue.get(CHAT) == State()


@pytest.mark.asyncio
async def test_search_by_name_prompts_and_waits_for_name(env):
    bot, _, _, processor, dialogue = env
    await default_callback_handler(processor, bot, dialogue, callback("sbn"))
    assert bot.calls == [("edit", CHAT, MSG, escape(SEARCH_BY_NAME_PROMPT), None)]
    assert dialogue.get(CHAT) == State(StateKind.RECEIVE_COCKTAIL_NAME)


@pytest.mark.asyncio
async def test_cocktails_list_requests_page(env):
    bot, _, cocktails, processor, dialogue = env
    await default_callback_handler(processor, bot, dialogue, callback("col 2"))
    assert cocktails.filters == [
        ("names", CocktailFilter(pagination=Pagination(2, PAGE_SIZE), ids=[]))
    ]
    assert bot.calls[0][3] == COCKTAILS_TEXT


@pytest.mark.asyncio
async def test_search_by_id_shows_card_with_back_to_list(env, cocktail):
    bot, _, _, processor, dialogue = env
    source = MenuCommand(MenuKind.COCKTAILS_LIST, page=3)
    data = cocktail_by_id_command(cocktail.id, source)
    await default_callback_handler(processor, bot, dialogue, callback(data))
    assert bot.calls == [
        (
            "edit",
            CHAT,
            MSG,
            render_cocktail_card(cocktail),
            get_cocktail_card_navigate_keyboard(source, cocktail.id, None),
        )
    ]


@pytest.mark.asyncio
async def test_search_by_id_shows_favourite_state_for_user(env, cocktail):
    bot, users, _, processor, dialogue = env
    await users.create(User(id=uuid4(), telegram_id=USER, favorite_cocktails=[cocktail.id]))
    source = MenuCommand(MenuKind.SHOW_FAVORITES, page=0)
    await default_callback_handler(
        processor, bot, dialogue, callback(cocktail_by_id_command(cocktail.id, source))
    )
    assert bot.calls[0][4] == get_cocktail_card_navigate_keyboard(source, cocktail.id, True)


@pytest.mark.asyncio
async def test_add_to_favorite_stores_cocktail(env, cocktail):
    bot, users, _, processor, dialogue = env
    await users.create(User(id=uuid4(), telegram_id=USER, favorite_cocktails=[]))
    source = MenuCommand(MenuKind.SHOW_FAVORITES, page=0)
    data = add_to_favourite_command(cocktail.id, source)
    await default_callback_handler(processor, bot, dialogue, callback(data))
    assert users.users[USER].favorite_cocktails == [cocktail.id]
    assert bot.calls[-1][4] == get_cocktail_card_navigate_keyboard(source, cocktail.id, True)


@pytest.mark.asyncio
async def test_remove_from_favorite_drops_cocktail(env, cocktail):
    bot, users, _, processor, dialogue = env
    await users.create(User(id=uuid4(), telegram_id=USER, favorite_cocktails=[cocktail.id]))
    source = MenuCommand(MenuKind.COCKTAILS_LIST, page=1)
    data = remove_from_favourite_command(cocktail.id, source)
    await default_callback_handler(processor, bot, dialogue, callback(data))
    assert users.users[USER].favorite_cocktails == []
    assert bot.calls[-1][4] == get_cocktail_card_navigate_keyboard(source, cocktail.id, False)


@pytest.mark.asyncio
async def test_cocktail_pages_shows_page_keyboard(env):
    bot, _, _, processor, dialogue = env
    source = MenuCommand(MenuKind.COCKTAILS_LIST)
    data = cocktail_pages_command(5, source)
    await default_callback_handler(processor, bot, dialogue, callback(data))
    assert bot.calls == [("edit", CHAT, MSG, PAGES_TEXT, get_cocktail_pages_keyboard(5, source))]


@pytest.mark.asyncio
async def test_register_creates_user_and_answers(env):
    bot, users, _, processor, dialogue = env
    await default_callback_handler(processor, bot, dialogue, callback("reg"))
    assert users.users[USER].favorite_cocktails == []
    assert bot.answers == [("cb", REGISTERED_TEXT, True)]
    assert bot.calls[-1][4] == get_main_menu_keyboard(True)


@pytest.mark.asyncio
async def test_remove_account_deletes_user(env):
    bot, users, _, processor, dialogue = env
    await users.create(User(id=uuid4(), telegram_id=USER))
    await default_callback_handler(processor, bot, dialogue, callback("rea"))
    assert USER not in users.users
    assert bot.answers == [("cb", REMOVED_TEXT, True)]
    assert bot.calls[-1][4] == get_main_menu_keyboard(False)


@pytest.mark.parametrize(
    "data, text, keyboard",
    [
        ("prp", PROFILE_TEXT, get_profile_page_keyboard()),
        ("rec", escape(REGISTER_CONFIRMATION_TEXT), get_register_confirmation_keyboard()),
        ("rac", escape(REMOVE_USER_CONFIRMATION_TEXT), get_remove_user_confirmation_keyboard()),
    ],
)
@pytest.mark.asyncio
async def test_static_pages(env, data, text, keyboard):
    bot, _, _, processor, dialogue = env
    await default_callback_handler(processor, bot, dialogue, callback(data))
    assert bot.calls == [("edit", CHAT, MSG, text, keyboard)]


@pytest.mark.asyncio
async def test_show_favorites_filters_by_user_favourites(env, cocktail):
    bot, users, cocktails, processor, dialogue = env
    await users.create(User(id=uuid4(), telegram_id=USER, favorite_cocktails=[cocktail.id]))
    await default_callback_handler(processor, bot, dialogue, callback("shf 1"))
    kind, used = cocktails.filters[0]
    assert kind == "names"
    assert used.ids == [cocktail.id]
    assert used.pagination == Pagination(1, PAGE_SIZE)


@pytest.mark.parametrize("data", ["xyz", "cln 0"])
@pytest.mark.asyncio
async def test_default_handler_rejects_unsupported(env, data):
    bot, _, _, processor, dialogue = env
    with pytest.raises(UnsupportedCommandError):
        await default_callback_handler(processor, bot, dialogue, callback(data))


@pytest.mark.asyncio
async def test_press_without_data_does_nothing(env):
    bot, _, _, processor, dialogue = env
    await default_callback_handler(processor, bot, dialogue, callback(None))
    assert bot.calls == []
    assert dialogue.get(CHAT) == State()


@pytest.mark.asyncio
async def test_invalid_cocktail_id_raises(env):
    bot, _, _, processor, dialogue = env
    with pytest.raises(ValueError):
        await default_callback_handler(
            processor, bot, dialogue, callback("sbi not-a-uuid col 0")
        )


@pytest.mark.asyncio
async def test_receive_handler_lists_by_stored_name(env):
    bot, _, cocktails, processor, dialogue = env
    await receive_cocktail_name_callback_handler(processor, dialogue, callback("cln 1"), "mojito")
    assert cocktails.filters == [
        (
            "filter",
            CocktailFilter(
                pagination=Pagination(1, PAGE_SIZE), names=["mojito"], russian_names=["mojito"]
            ),
        )
    ]
    assert bot.calls[0][:4] == ("edit", CHAT, MSG, escape(COCKTAILS_TEXT))


@pytest.mark.asyncio
async def test_receive_handler_main_menu_exits_dialogue(env):
    bot, _, _, processor, dialogue = env
    dialogue.update(CHAT, State(StateKind.RECEIVED_COCKTAIL_NAME, "mojito"))
    await receive_cocktail_name_callback_handler(processor, dialogue, callback("mam"), "mojito")
    assert dialogue.get(CHAT) == State()
    assert bot.calls[0][3] == MAIN_MENU_EDIT_TEXT


@pytest.mark.asyncio
async def test_receive_handler_shows_card(env, cocktail):
    bot, _, _, processor, dialogue = env
    source = MenuCommand(MenuKind.COCKTAILS_LIST_BY_NAME, page=0)
    data = cocktail_by_id_command(cocktail.id, source)
    await receive_cocktail_name_callback_handler(processor, dialogue, callback(data), "mojito")
    assert bot.calls[0][3] == render_cocktail_card(cocktail)
    assert bot.calls[0][4] == get_cocktail_card_navigate_keyboard(source, cocktail.id, None)


@pytest.mark.parametrize("data", ["reg", "col 0", "sbn"])
@pytest.mark.asyncio
async def test_receive_handler_rejects_unsupported(env, data):
    bot, _, _, processor, dialogue = env
    with pytest.raises(UnsupportedCommandError):
        await receive_cocktail_name_callback_handler(processor, dialogue, callback(data), "mojito")