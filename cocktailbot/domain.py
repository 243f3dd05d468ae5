"""Domain model: cocktails, users, filters and the repository interfaces."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID


@dataclass
class Pagination:
    """Zero-based page number and page size."""

    page: int
    items_per_page: int


@dataclass
class Tag:
    name: str


@dataclass
class CocktailItem:
    """An ingredient or a tool, with its amount and unit."""

    name: str
    count: int
    unit: str


@dataclass
class Recipe:
    steps: list[str] = field(default_factory=list)


@dataclass
class Cocktail:
    id: UUID
    russian_name: str
    url: Optional[str] = None
    name: Optional[str] = None
    country_of_origin: Optional[str] = None
    history: Optional[str] = None
    tags: Optional[list[Tag]] = None
    tools: Optional[list[CocktailItem]] = None
    composition_elements: Optional[list[CocktailItem]] = None
    recipe: Optional[Recipe] = None

    @classmethod
    def new(
        cls,
        name,
        russian_name,
        url,
        country_of_origin,
        history,
        tags,
        tools,
        composition_elements,
        recipe,
    ) -> "Cocktail":
        """Create a cocktail with a freshly generated random id."""
        return cls(
            id=uuid.uuid4(),
            russian_name=russian_name,
            url=url,
            name=name,
            country_of_origin=country_of_origin,
            history=history,
            tags=tags,
            tools=tools,
            composition_elements=composition_elements,
            recipe=recipe,
        )


@dataclass
class CocktailsPaged:
    """One page of cocktails together with the total number matching."""

    items: list[Cocktail]
    total_count: int


@dataclass
class CocktailFilter:
    pagination: Pagination
    ids: Optional[list[UUID]] = None
    names: Optional[list[str]] = None
    russian_names: Optional[list[str]] = None


@dataclass
class User:
    id: UUID
    telegram_id: int
    favorite_cocktails: list[UUID] = field(default_factory=list)


class CocktailRepo(ABC):
    """Storage of cocktails."""

    @abstractmethod
    async def create(self, entity: Cocktail) -> None:
        """Store a new cocktail."""

    @abstractmethod
    async def delete(self, entity: Cocktail) -> None:
        """Remove a cocktail."""

    @abstractmethod
    async def update(self, entity: Cocktail) -> None:
        """Replace the stored fields of a cocktail."""

    @abstractmethod
    async def get_names(self, filter: CocktailFilter) -> CocktailsPaged:
        """Return ids and Russian names of the cocktails matching the filter."""

    @abstractmethod
    async def get_by_id(self, id: UUID) -> Optional[Cocktail]:
        """Return the cocktail with this id, or None."""

    @abstractmethod
    async def get_by_filter(self, filter: CocktailFilter) -> CocktailsPaged:
        """Return the full cocktails matching the filter."""


class UserRepo(ABC):
    """Storage of bot users."""

    @abstractmethod
    async def create(self, user_entity: User) -> None:
        """Store a new user."""

    @abstractmethod
    async def delete(self, user_entity: User) -> None:
        """Remove a user."""

    @abstractmethod
    async def update(self, user_entity: User) -> None:
        """Save the user's favourite cocktails."""

    @abstractmethod
    async def get_by_telegram_id(self, telegram_user_id: int) -> Optional[User]:
        """Return the user with this Telegram id, or None."""

    @abstractmethod
    async def is_exist_by_telegram_id(self, telegram_user_id: int) -> bool:
        """Tell whether a user with this Telegram id is stored."""