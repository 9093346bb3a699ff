"""
Recipe query engine.

Answers exact-criteria and free-text recipe lookups. Every result is a
``RecipeOut`` with the cuisine name and owner username joined in; recipes
without a cuisine or owner fall back to ``"N/A"`` / ``"Recipe Roulette"``.

Free-text search is deliberately two-stage: the SQL query only does the
substring match, and the cuisine / dietary filters are applied to the
fetched rows afterwards.
"""
from __future__ import annotations

import logging

from sqlalchemy import Select, or_, select

from ..db import Cuisine, Datastore, Recipe, User
from ..errors import NotFoundError, ValidationError
from ..validation import require_calorie_ceiling, require_positive_id, require_username
from .models import (
    ALL_CUISINES,
    ALL_DIETS,
    DEFAULT_CUISINE_NAME,
    DEFAULT_OWNER_NAME,
    RecipeOut,
)

logger = logging.getLogger(__name__)


def _with_cuisine_and_owner() -> Select:
    """Recipe rows joined to their (optional) cuisine name and owner username."""
    return (
        select(Recipe, Cuisine.name, User.username)
        .outerjoin(Cuisine, Recipe.cuisine_id == Cuisine.id)
        .outerjoin(User, Recipe.user_id == User.id)
        .order_by(Recipe.id)
    )


def _to_view(recipe: Recipe, cuisine_name: str | None, username: str | None) -> RecipeOut:
    return RecipeOut(
        id=recipe.id,
        title=recipe.title,
        description=recipe.description,
        ingredients=recipe.ingredients,
        instructions=recipe.instructions,
        difficulty_level=recipe.difficulty_level,
        average_rating=recipe.average_rating or 0.0,
        cuisine_id=recipe.cuisine_id,
        calories=recipe.calories,
        user_id=recipe.user_id,
        dietary_preferences=recipe.dietary_preferences,
        cuisine_name=cuisine_name or DEFAULT_CUISINE_NAME,
        username=username or DEFAULT_OWNER_NAME,
    )


def _matches_filters(recipe: RecipeOut, cuisine_id: int | None, dietary_preference: str | None) -> bool:
    if cuisine_id and cuisine_id != ALL_CUISINES and recipe.cuisine_id != cuisine_id:
        return False
    if dietary_preference and dietary_preference.strip() != ALL_DIETS:
        if (recipe.dietary_preferences or "").strip() != dietary_preference.strip():
            return False
    return True


class RecipeQueryEngine:
    def __init__(self, datastore: Datastore) -> None:
        self.datastore = datastore

    def _fetch(self, stmt: Select) -> list[RecipeOut]:
        with self.datastore.session() as session:
            rows = session.execute(stmt).all()
        return [_to_view(recipe, cuisine_name, username) for recipe, cuisine_name, username in rows]

    def find_by_criteria(
        self,
        dietary_preference: str | None,
        calorie_ceiling: float,
        cuisine_id: int | None = None,
    ) -> list[RecipeOut]:
        """Recipes at or under *calorie_ceiling*; diet and cuisine narrow only when given."""
        calorie_ceiling = require_calorie_ceiling(calorie_ceiling)
        stmt = _with_cuisine_and_owner().where(Recipe.calories <= calorie_ceiling)
        if dietary_preference:
            stmt = stmt.where(Recipe.dietary_preferences == dietary_preference.strip())
        if cuisine_id:
            stmt = stmt.where(Recipe.cuisine_id == require_positive_id(cuisine_id, "cuisine ID"))
        return self._fetch(stmt)

    def find_by_user(self, username: str) -> list[RecipeOut]:
        username = require_username(username)
        stmt = _with_cuisine_and_owner().where(User.username == username)
        return self._fetch(stmt)

    def get_details(self, recipe_id: int) -> RecipeOut:
        recipe_id = require_positive_id(recipe_id, "recipe ID")
        found = self._fetch(_with_cuisine_and_owner().where(Recipe.id == recipe_id))
        if not found:
            raise NotFoundError("Recipe not found.")
        return found[0]

    def search(
        self,
        free_text: str,
        cuisine_id: int | None = ALL_CUISINES,
        dietary_preference: str | None = ALL_DIETS,
    ) -> list[RecipeOut]:
        """
        Substring search over title, ingredients and dietary preferences.

        Matching is case-sensitive ``LIKE %text%``; an empty string matches
        every recipe. ``cuisine_id`` / ``dietary_preference`` then filter the
        matches exactly, with ``0`` / ``"All"`` meaning no filter.
        """
        if free_text is None:
            free_text = ""
        if not isinstance(free_text, str):
            raise ValidationError("searchQuery must be a string.")
        text = free_text.strip()

        stmt = _with_cuisine_and_owner().where(
            or_(
                Recipe.title.contains(text, autoescape=True),
                Recipe.ingredients.contains(text, autoescape=True),
                Recipe.dietary_preferences.contains(text, autoescape=True),
            )
        )
        matches = self._fetch(stmt)
        filtered = [r for r in matches if _matches_filters(r, cuisine_id, dietary_preference)]
        logger.debug(
            "Search %r matched %d recipes, %d after filters", text, len(matches), len(filtered)
        )
        return filtered
