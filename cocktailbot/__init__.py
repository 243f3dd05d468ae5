"""Telegram cocktail catalogue bot: menus, screens, dialogue state, dispatching and MongoDB document mapping."""

__version__ = "0.1.0"