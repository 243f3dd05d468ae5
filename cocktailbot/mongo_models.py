"""Conversion between domain objects and MongoDB documents."""

from __future__ import annotations

from typing import Any, Mapping, Optional
from uuid import UUID

from bson.binary import Binary

from .domain import Cocktail, CocktailItem, Recipe, Tag, User


def _uuid_to_bson(value: UUID) -> Binary:
    return Binary.from_uuid(value)


def _uuid_from_bson(value: Any) -> UUID:
    if isinstance(value, UUID):
        return value
    if isinstance(value, Binary):
        return value.as_uuid()
    raise ValueError(f"not a UUID value: {value!r}")


def _require(document: Mapping[str, Any], key: str) -> Any:
    try:
        return document[key]
    except KeyError:
        raise ValueError(f"document has no {key!r} field") from None


def user_to_document(user: User) -> dict[str, Any]:
    return {
        "id": _uuid_to_bson(user.id),
        "telegram_id": str(user.telegram_id),
        "favorite_cocktails": [_uuid_to_bson(c) for c in user.favorite_cocktails],
    }


def user_from_document(document: Mapping[str, Any]) -> User:
    return User(
        id=_uuid_from_bson(_require(document, "id")),
        telegram_id=int(_require(document, "telegram_id")),
        favorite_cocktails=[
            _uuid_from_bson(c) for c in _require(document, "favorite_cocktails")
        ],
    )


def user_update(user: User) -> dict[str, Any]:
    """Update operation that saves only the favourite cocktails."""
    return {"$set": {"favorite_cocktails": user_to_document(user)["favorite_cocktails"]}}


def _tags_to_bson(tags: Optional[list[Tag]]):
    return None if tags is None else [{"name": tag.name} for tag in tags]


def _items_to_bson(items: Optional[list[CocktailItem]]):
    if items is None:
        return None
    return [{"name": i.name, "count": i.count, "unit": i.unit} for i in items]


def _recipe_to_bson(recipe: Optional[Recipe]):
    return None if recipe is None else {"steps": list(recipe.steps)}


def _items_from_bson(items) -> Optional[list[CocktailItem]]:
    if items is None:
        return None
    return [
        CocktailItem(name=_require(i, "name"), count=int(_require(i, "count")), unit=_require(i, "unit"))
        for i in items
    ]


def _fields(cocktail: Cocktail) -> dict[str, Any]:
    return {
        "name": cocktail.name,
        "russian_name": cocktail.russian_name,
        "country_of_origin": cocktail.country_of_origin,
        "history": cocktail.history,
        "url": cocktail.url,
        "tags": _tags_to_bson(cocktail.tags),
        "composition_elements": _items_to_bson(cocktail.composition_elements),
        "tools": _items_to_bson(cocktail.tools),
        "recipe": _recipe_to_bson(cocktail.recipe),
    }


def cocktail_to_document(cocktail: Cocktail) -> dict[str, Any]:
    return {"id": _uuid_to_bson(cocktail.id), **_fields(cocktail)}


def cocktail_from_document(document: Mapping[str, Any]) -> Cocktail:
    """Build a cocktail; optional fields missing from the document become None."""
    tags = document.get("tags")
    recipe = document.get("recipe")
    return Cocktail(
        id=_uuid_from_bson(_require(document, "id")),
        russian_name=_require(document, "russian_name"),
        url=document.get("url"),
        name=document.get("name"),
        country_of_origin=document.get("country_of_origin"),
        history=document.get("history"),
        tags=None if tags is None else [Tag(name=_require(t, "name")) for t in tags],
        tools=_items_from_bson(document.get("tools")),
        composition_elements=_items_from_bson(document.get("composition_elements")),
        recipe=None if recipe is None else Recipe(steps=list(_require(recipe, "steps"))),
    )


def cocktail_update(cocktail: Cocktail) -> dict[str, Any]:
    """Update operation that replaces every field except the id."""
    return {"$set": _fields(cocktail)}