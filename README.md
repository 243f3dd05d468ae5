# cocktailbot

An asyncio library for running a Telegram bot that lets people browse a
cocktail catalogue. It holds the bot's menus, screens, dialogue state and
update dispatching, a small Telegram Bot API client, and the conversion of
users and cocktails to and from MongoDB documents.

Through the bot, users can:

- page through the cocktail list and jump to any page;
- search cocktails by part of their English or Russian name;
- open a cocktail card with its ingredients, tools, recipe steps, history and tags;
- register, then keep a personal list of favourite cocktails;
- delete their account.

Bot texts are in Russian and are sent with MarkdownV2 formatting.

## Installation

Install with pip from the project directory. The package depends on
`aiohttp` and `pymongo`.

## Modules

- `cocktailbot.domain`: the dataclasses `Pagination`, `Tag`, `CocktailItem`,
  `Recipe`, `Cocktail`, `CocktailsPaged`, `CocktailFilter` and `User`. It also
  holds the abstract storage interfaces `CocktailRepo` and `UserRepo`.
  `Cocktail.new(...)` gives the new cocktail a random UUID.
- `cocktailbot.commands`: inline-button callback data. `MenuKind` lists the
  three-letter command codes. `parse_menu_command` turns callback data into a
  `MenuCommand`. It returns an `UNKNOWN` command for codes it does not
  recognise. It raises `ValueError` when a cocktail or pages command lacks
  parameters. Builders such as `cocktails_list_command` and
  `cocktail_by_id_command` produce the strings.
- `cocktailbot.dialogue`: `State`, `StateKind` and `DialogueStorage`. The
  storage keeps one state per chat in memory.
- `cocktailbot.telegram`: `BotClient`, an aiohttp-based client. It has `call`,
  `send_message`, `edit_message_text`, `answer_callback_query`, `get_updates`
  and `close`. The module also defines the data types `Message`,
  `CallbackQuery`, `Update`, `InlineKeyboardButton` and
  `InlineKeyboardMarkup`, the MarkdownV2 `escape` function, and
  `TelegramError`.
- `cocktailbot.keyboards`: the inline keyboards. They cover the main menu,
  cocktail lists with page navigation, page pickers, cocktail cards with a
  favourite toggle, the profile page, and the confirmation screens.
- `cocktailbot.mongo_models`: `user_to_document`, `user_from_document`,
  `user_update`, `cocktail_to_document`, `cocktail_from_document` and
  `cocktail_update`. UUIDs are stored as BSON binary values.
- `cocktailbot.message_processor`: `MessageProcessor` shows each bot screen,
  reading from a `UserRepo` and a `CocktailRepo`. `render_cocktail_card`
  builds the text of a cocktail card.
- `cocktailbot.callback_handlers`: `default_callback_handler` and
  `receive_cocktail_name_callback_handler` route button presses. They raise
  `UnsupportedCommandError` for commands that have no handler in the current
  state.
- `cocktailbot.bot`: `BotDispatcher`, which polls for updates and hands each
  one to the handler for its chat's dialogue state.

## Dispatching

`BotDispatcher` takes a `BotClient` and a repository factory. The factory is
any object with two coroutine methods: `get_user_repository()` returns a
`UserRepo`, and `get_cocktails_repository()` returns a `CocktailRepo`. The
dispatcher asks for fresh repositories for each update it handles.

The dispatcher handles updates as follows:

- `/menu` (or `/menu@botname`) sends the main menu.
- Other text is taken as a search query, but only after the user has pressed
  the search-by-name button.
- Button presses go to the callback handlers.

`run()` polls until it is cancelled. It logs handler errors rather than
raising them, and it waits `retry_delay` seconds after a failed poll.

```python
import asyncio

from cocktailbot.bot import BotDispatcher
from cocktailbot.telegram import BotClient


class Repositories:
    def __init__(self, users, cocktails):
        self._users = users
        self._cocktails = cocktails

    async def get_user_repository(self):
        return self._users

    async def get_cocktails_repository(self):
        return self._cocktails


async def serve(users, cocktails):
    async with BotClient("token") as bot:
        await BotDispatcher(bot, Repositories(users, cocktails)).run()
```

## What the package does not do

- It ships no storage. You supply your own `UserRepo` and `CocktailRepo`
  implementations. `cocktailbot.mongo_models` only converts objects to and
  from documents; it does not connect to a database.
- It has no HTTP API server.
- It does not read its settings from environment variables or `.env` files.
- It installs no command-line program; you start the dispatcher from your own
  code.