"""Callback-data menu commands: parsing and building their string form."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from uuid import UUID

_U64_MAX = 2**64 - 1
_UNSIGNED = re.compile(r"\+?[0-9]+")


class MenuKind(Enum):
    """Menu command kinds, valued by their three-letter code."""

    MAIN_MENU = "mam"
    COCKTAILS_LIST = "col"
    SEARCH_BY_NAME = "sbn"
    REGISTER = "reg"
    PROFILE_PAGE = "prp"
    SEARCH_BY_ID = "sbi"
    COCKTAILS_PAGES = "cop"
    ADD_TO_FAVORITE = "atf"
    REMOVE_FROM_FAVORITE = "rff"
    REGISTER_CONFIRMATION = "rec"
    REMOVE_ACCOUNT = "rea"
    REMOVE_ACCOUNT_CONFIRMATION = "rac"
    SHOW_FAVORITES = "shf"
    COCKTAILS_LIST_BY_NAME = "cln"
    UNKNOWN = "Unknown"


_LIST_KINDS = frozenset(
    {MenuKind.COCKTAILS_LIST, MenuKind.SHOW_FAVORITES, MenuKind.COCKTAILS_LIST_BY_NAME}
)
_COCKTAIL_KINDS = frozenset(
    {MenuKind.SEARCH_BY_ID, MenuKind.ADD_TO_FAVORITE, MenuKind.REMOVE_FROM_FAVORITE}
)
_BY_CODE = {kind.value: kind for kind in MenuKind if kind is not MenuKind.UNKNOWN}


@dataclass(frozen=True)
class MenuCommand:
    """A parsed menu command.

    ``page`` belongs to the list kinds; ``cocktail_id``, ``prev_command`` and
    ``prev_page`` to the cocktail kinds; ``total_pages`` and ``prev_command``
    to the pages kind.
    """

    kind: MenuKind
    page: int = 0
    cocktail_id: str = ""
    prev_command: str = ""
    prev_page: Optional[int] = None
    total_pages: int = 0

    def code(self) -> str:
        return self.kind.value

    def list_page(self) -> Optional[int]:
        """The page number of a list command, None for other kinds."""
        return self.page if self.kind in _LIST_KINDS else None


def _parse_u64(text: str) -> Optional[int]:
    if not _UNSIGNED.fullmatch(text):
        return None
    value = int(text)
    return value if value <= _U64_MAX else None


def parse_menu_command(s: str) -> MenuCommand:
    """Parse callback data; unrecognised codes give an UNKNOWN command.

    Raises ValueError when a cocktail or pages command lacks parameters.
    """
    kind = _BY_CODE.get(s[:3])
    if kind is None:
        return MenuCommand(MenuKind.UNKNOWN)
    param = s[3:].strip()

    if kind in _LIST_KINDS:
        page = _parse_u64(param)
        return MenuCommand(kind, page=0 if page is None else page)

    if kind in _COCKTAIL_KINDS:
        params = param.split(" ")
        if len(params) < 3:
            raise ValueError(f"malformed {kind.value} command: {s!r}")
        return MenuCommand(
            kind,
            cocktail_id=params[0],
            prev_command=params[1],
            prev_page=_parse_u64(params[2]),
        )

    if kind is MenuKind.COCKTAILS_PAGES:
        params = param.split(" ")
        if len(params) < 2:
            raise ValueError(f"malformed {kind.value} command: {s!r}")
        total = _parse_u64(params[0])
        return MenuCommand(
            kind, total_pages=0 if total is None else total, prev_command=params[1]
        )

    return MenuCommand(kind)


def cocktails_list_command(page: int) -> str:
    return f"{MenuKind.COCKTAILS_LIST.value} {page}"


def favorite_cocktails_command(page: int) -> str:
    return f"{MenuKind.SHOW_FAVORITES.value} {page}"


def cocktails_list_by_name_command(page: int) -> str:
    return f"{MenuKind.COCKTAILS_LIST_BY_NAME.value} {page}"


def main_menu_command() -> str:
    return MenuKind.MAIN_MENU.value


def cocktail_pages_command(total_pages: int, source_page: MenuCommand) -> str:
    return f"{MenuKind.COCKTAILS_PAGES.value} {total_pages} {source_page.code()}"


def _cocktail_command(kind: MenuKind, cocktail_id: UUID, source_page: MenuCommand) -> str:
    prev_page = source_page.list_page()
    page_text = "" if prev_page is None else str(prev_page)
    return f"{kind.value} {cocktail_id} {source_page.code()} {page_text}"


def cocktail_by_id_command(cocktail_id: UUID, source_page: MenuCommand) -> str:
    return _cocktail_command(MenuKind.SEARCH_BY_ID, cocktail_id, source_page)


def add_to_favourite_command(cocktail_id: UUID, source_page: MenuCommand) -> str:
    return _cocktail_command(MenuKind.ADD_TO_FAVORITE, cocktail_id, source_page)


def remove_from_favourite_command(cocktail_id: UUID, source_page: MenuCommand) -> str:
    return _cocktail_command(MenuKind.REMOVE_FROM_FAVORITE, cocktail_id, source_page)