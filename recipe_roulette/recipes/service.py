from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from ..db import Datastore, DietaryPreference, DifficultyLevel, Recipe
from ..errors import NotFoundError, ValidationError
from ..validation import require_choice, require_positive_id, require_text
from .cuisines import CuisineCatalogue
from .models import RecipeOut
from .query import RecipeQueryEngine

logger = logging.getLogger(__name__)


class RecipeService:
    """Creates recipes; reads go through the query engine."""

    def __init__(
        self,
        datastore: Datastore,
        cuisines: CuisineCatalogue,
        query: RecipeQueryEngine,
    ) -> None:
        self.datastore = datastore
        self.cuisines = cuisines
        self.query = query

    def create_recipe(
        self,
        user_id: int,
        *,
        title: str,
        description: str,
        ingredients: str,
        instructions: str,
        difficulty_level: str,
        cuisine_name: str,
        calories: int,
        dietary_preferences: str,
    ) -> RecipeOut:
        user_id = require_positive_id(user_id, "user ID")
        title = require_text(title, "title")
        description = require_text(description, "description")
        ingredients = require_text(ingredients, "ingredients")
        instructions = require_text(instructions, "instructions")
        difficulty = require_choice(difficulty_level, DifficultyLevel, "difficultyLevel")
        diet = require_choice(dietary_preferences, DietaryPreference, "dietaryPreferences")
        if isinstance(calories, bool) or not isinstance(calories, int) or calories < 0:
            raise ValidationError("Calories must be a non-negative integer.")

        cuisine_id = self.cuisines.cuisine_id_by_name(cuisine_name)

        with self.datastore.session() as session:
            recipe = Recipe(
                title=title,
                description=description,
                ingredients=ingredients,
                instructions=instructions,
                difficulty_level=difficulty,
                average_rating=0.0,
                cuisine_id=cuisine_id,
                calories=calories,
                user_id=user_id,
                dietary_preferences=diet,
            )
            session.add(recipe)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                raise NotFoundError("User not found.") from None
            recipe_id = recipe.id

        logger.info("User %d created recipe %d (%s)", user_id, recipe_id, title)
        return self.query.get_details(recipe_id)
