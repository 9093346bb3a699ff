from __future__ import annotations

from pydantic import Field

from ..api_model import ApiModel
from ..db import DietaryPreference, DifficultyLevel

DEFAULT_CUISINE_NAME = "N/A"
DEFAULT_OWNER_NAME = "Recipe Roulette"

# Sentinels meaning "no filter" for the search post-filter
ALL_CUISINES = 0
ALL_DIETS = "All"


class CuisineOut(ApiModel):
    id: int
    name: str


class CuisineListResponse(ApiModel):
    data: list[CuisineOut]


class RecipeCreateRequest(ApiModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    ingredients: str = Field(..., min_length=1)
    instructions: str = Field(..., min_length=1)
    difficulty_level: DifficultyLevel
    cuisine_name: str = Field(..., min_length=1)
    calories: int = Field(..., ge=0)
    dietary_preferences: DietaryPreference


class RecipeOut(ApiModel):
    id: int
    title: str
    description: str | None = None
    ingredients: str | None = None
    instructions: str | None = None
    difficulty_level: str | None = None
    average_rating: float = 0.0
    cuisine_id: int | None = None
    calories: int | None = None
    user_id: int | None = None
    dietary_preferences: str | None = None
    cuisine_name: str = DEFAULT_CUISINE_NAME
    username: str = DEFAULT_OWNER_NAME
    image_url: str | None = None


class RecipeListResponse(ApiModel):
    data: list[RecipeOut]


class RecipeDetailResponse(ApiModel):
    data: RecipeOut
    image_url: str


class RecipeCreatedResponse(ApiModel):
    message: str
    recipe: RecipeOut
