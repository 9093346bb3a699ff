from __future__ import annotations

from datetime import date

from pydantic import Field

from ..api_model import ApiModel
from ..recipes.models import RecipeOut
from ..reviews.models import ReviewOut


class RegisterRequest(ApiModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    confirm_password: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)


class RegisterResponse(ApiModel):
    user_id: int
    message: str


class LoginRequest(ApiModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(ApiModel):
    message: str
    user_id: int
    token: str


class UserOut(ApiModel):
    id: int
    username: str
    email: str
    join_date: date
    bio: str | None = None


class BioUpdateRequest(ApiModel):
    new_bio: str | None = None


class ProfileRequest(ApiModel):
    id: int | None = None


class ProfileOut(ApiModel):
    join_date: str
    username: str
    bio: str | None = None
    recipes: list[RecipeOut]
    reviews: list[ReviewOut]


class ProfileResponse(ApiModel):
    success: bool = True
    data: ProfileOut


class UserResponse(ApiModel):
    success: bool = True
    data: UserOut


class BioUpdateResponse(ApiModel):
    success: bool = True
    message: str
    data: dict


class JoinDateResponse(ApiModel):
    success: bool = True
    data: dict


class BioResponse(ApiModel):
    success: bool = True
    data: dict
