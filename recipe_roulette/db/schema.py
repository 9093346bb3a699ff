"""
Relational schema for users, cuisines, recipes and reviews.

Every table and foreign key is declared here up front. Tables do not hold
ORM relationships to each other; queries join explicitly (see
``recipes/query.py`` and ``reviews/aggregator.py``).
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class DifficultyLevel(str, Enum):
    easy = "easy"
    moderate = "moderate"
    hard = "hard"


class DietaryPreference(str, Enum):
    vegan = "Vegan"
    vegetarian = "Vegetarian"
    pescetarian = "Pescetarian"
    gluten_free = "Gluten-Free"
    lactose_free = "Lactose-Free"
    none = "None"


def _in_clause(column: str, enum_cls: type[Enum]) -> str:
    values = ", ".join(f"'{m.value}'" for m in enum_cls)
    return f"{column} IS NULL OR {column} IN ({values})"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _today() -> date:
    return datetime.now(timezone.utc).date()


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    join_date: Mapped[date] = mapped_column(Date, nullable=False, default=_today)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)


class Cuisine(Base):
    __tablename__ = "cuisine"
    __table_args__ = (CheckConstraint("length(trim(name)) > 0", name="ck_cuisine_name_not_blank"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)


class Recipe(Base):
    __tablename__ = "recipe"
    __table_args__ = (
        CheckConstraint(_in_clause("difficulty_level", DifficultyLevel), name="ck_recipe_difficulty"),
        CheckConstraint(_in_clause("dietary_preferences", DietaryPreference), name="ck_recipe_diet"),
        CheckConstraint("average_rating >= 0 AND average_rating <= 5", name="ck_recipe_rating_range"),
        CheckConstraint("calories IS NULL OR calories >= 0", name="ck_recipe_calories"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    ingredients: Mapped[str | None] = mapped_column(Text, nullable=True)
    instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    difficulty_level: Mapped[str | None] = mapped_column(String(20), nullable=True)
    average_rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    cuisine_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("cuisine.id", ondelete="SET NULL", onupdate="CASCADE"),
        nullable=True,
        index=True,
    )
    calories: Mapped[int | None] = mapped_column(Integer, nullable=True)
    user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user.id", ondelete="SET NULL", onupdate="CASCADE"),
        nullable=True,
        index=True,
    )
    dietary_preferences: Mapped[str | None] = mapped_column(String(20), nullable=True)


class Review(Base):
    __tablename__ = "review"
    __table_args__ = (CheckConstraint("value >= 1 AND value <= 5", name="ck_review_value_range"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    review_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    recipe_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("recipe.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    value: Mapped[int] = mapped_column(Integer, nullable=False)
