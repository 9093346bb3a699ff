from __future__ import annotations

from collections.abc import Callable

from ..db import User
from ..recipes.query import RecipeQueryEngine
from ..reviews.aggregator import ReviewAggregator
from .models import ProfileOut

JOIN_DATE_FORMAT = "%d/%m/%y"


def format_join_date(user: User) -> str:
    return user.join_date.strftime(JOIN_DATE_FORMAT)


def build_profile(
    user: User,
    recipes: RecipeQueryEngine,
    reviews: ReviewAggregator,
    image_lookup: Callable[[str], str],
) -> ProfileOut:
    """A user's public profile: bio, join date, and their recipes and reviews with images."""
    own_recipes = [
        recipe.model_copy(update={"image_url": image_lookup(recipe.title)})
        for recipe in recipes.find_by_user(user.username)
    ]
    own_reviews = [
        review.model_copy(update={"image_url": image_lookup(review.recipe_title or "")})
        for review in reviews.reviews_by_user(user.username)
    ]
    return ProfileOut(
        join_date=format_join_date(user),
        username=user.username,
        bio=user.bio,
        recipes=own_recipes,
        reviews=own_reviews,
    )
