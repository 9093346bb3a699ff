from __future__ import annotations

from datetime import datetime

from pydantic import Field

from ..api_model import ApiModel


class ReviewCreateRequest(ApiModel):
    recipe_id: int = Field(..., alias="recipeID", ge=1)
    content: str | None = None
    value: int = Field(..., ge=1, le=5)


class ReviewOut(ApiModel):
    id: int
    content: str | None = None
    review_date: datetime
    formatted_date: str
    recipe_id: int
    user_id: int
    value: int
    username: str | None = None
    recipe_title: str | None = None
    image_url: str | None = None


class ReviewCreatedResponse(ApiModel):
    message: str
    review_id: int
    average_rating: float


class ReviewDeletedResponse(ApiModel):
    message: str
    average_rating: float


class RecipeReviewsResponse(ApiModel):
    reviews: list[ReviewOut]
    recipe_id: int


class UserReviewsResponse(ApiModel):
    reviews: list[ReviewOut]
