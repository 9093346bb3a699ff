"""
Review aggregator.

Records and removes reviews and keeps ``recipe.average_rating`` equal to
the mean of the recipe's review values (rounded to 2 decimals, 0 when the
recipe has no reviews).

Each mutation commits its own write first and only then recomputes. The
recompute is a single ``UPDATE ... SET average_rating = (SELECT AVG ...)``
statement in its own transaction, so it always reads the review set as
committed at that moment. Two concurrent mutations on the same recipe each
trigger a recompute after their own write; whichever recompute commits last
wins, and it has seen both writes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from ..db import Datastore, Recipe, Review, User
from ..errors import ForbiddenError, NotFoundError
from ..validation import (
    optional_text,
    require_positive_id,
    require_review_value,
    require_username,
)
from .models import ReviewOut

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d/%m/%y"


@dataclass(frozen=True)
class ReviewChange:
    review: ReviewOut
    average_rating: float


def _to_view(
    review: Review,
    username: str | None = None,
    recipe_title: str | None = None,
) -> ReviewOut:
    return ReviewOut(
        id=review.id,
        content=review.content,
        review_date=review.review_date,
        formatted_date=review.review_date.strftime(DATE_FORMAT),
        recipe_id=review.recipe_id,
        user_id=review.user_id,
        value=review.value,
        username=username,
        recipe_title=recipe_title,
    )


class ReviewAggregator:
    def __init__(self, datastore: Datastore) -> None:
        self.datastore = datastore

    def record_review(
        self,
        recipe_id: int,
        user_id: int,
        value: int,
        content: str | None = None,
    ) -> ReviewChange:
        """Store a review stamped with the current time, then refresh the recipe's average."""
        value = require_review_value(value)
        recipe_id = require_positive_id(recipe_id, "recipe ID")
        user_id = require_positive_id(user_id, "user ID")
        content = optional_text(content)

        with self.datastore.session() as session:
            if session.get(Recipe, recipe_id) is None:
                raise NotFoundError("Recipe not found.")
            author = session.get(User, user_id)
            if author is None:
                raise NotFoundError("User not found.")

            review = Review(recipe_id=recipe_id, user_id=user_id, value=value, content=content)
            session.add(review)
            try:
                session.commit()
            except IntegrityError:
                # recipe or user vanished between the check and the insert
                session.rollback()
                raise NotFoundError("Recipe or user not found.") from None
            view = _to_view(review, username=author.username)

        average = self.recompute_average(recipe_id)
        logger.info(
            "User %d rated recipe %d with %d (average now %.2f)", user_id, recipe_id, value, average
        )
        return ReviewChange(review=view, average_rating=average)

    def remove_review(
        self,
        review_id: int,
        requester_id: int,
        recipe_id: int | None = None,
    ) -> ReviewChange:
        """
        Delete a review on behalf of its author, then refresh the recipe's average.

        When *recipe_id* is given the review must belong to that recipe,
        otherwise it is reported as not found.
        """
        review_id = require_positive_id(review_id, "review ID")
        requester_id = require_positive_id(requester_id, "user ID")

        with self.datastore.session() as session:
            review = session.get(Review, review_id)
            if review is None or (recipe_id is not None and review.recipe_id != recipe_id):
                raise NotFoundError("Review not found.")
            if review.user_id != requester_id:
                raise ForbiddenError("Forbidden: You can only delete your own reviews.")
            view = _to_view(review)
            session.delete(review)
            session.commit()

        average = self.recompute_average(view.recipe_id)
        logger.info(
            "User %d deleted review %d on recipe %d (average now %.2f)",
            requester_id,
            review_id,
            view.recipe_id,
            average,
        )
        return ReviewChange(review=view, average_rating=average)

    def recompute_average(self, recipe_id: int) -> float:
        """Write the current mean review value to the recipe and return it."""
        recipe_id = require_positive_id(recipe_id, "recipe ID")
        mean = (
            select(func.coalesce(func.round(func.avg(Review.value), 2), 0))
            .where(Review.recipe_id == recipe_id)
            .scalar_subquery()
        )
        stmt = (
            update(Recipe)
            .where(Recipe.id == recipe_id)
            .values(average_rating=mean)
            .execution_options(synchronize_session=False)
        )
        with self.datastore.session() as session:
            result = session.execute(stmt)
            session.commit()
            if result.rowcount == 0:
                raise NotFoundError("Recipe not found.")
            average = session.scalar(select(Recipe.average_rating).where(Recipe.id == recipe_id))

        logger.debug("Recomputed average rating for recipe %d: %s", recipe_id, average)
        return float(average or 0.0)

    def reviews_for_recipe(self, recipe_id: int) -> list[ReviewOut]:
        recipe_id = require_positive_id(recipe_id, "recipe ID")
        stmt = (
            select(Review, User.username)
            .join(User, Review.user_id == User.id)
            .where(Review.recipe_id == recipe_id)
            .order_by(Review.review_date, Review.id)
        )
        with self.datastore.session() as session:
            rows = session.execute(stmt).all()
        return [_to_view(review, username=username) for review, username in rows]

    def reviews_by_user(self, username: str) -> list[ReviewOut]:
        username = require_username(username)
        stmt = (
            select(Review, User.username, Recipe.title)
            .join(User, Review.user_id == User.id)
            .join(Recipe, Review.recipe_id == Recipe.id)
            .where(User.username == username)
            .order_by(Review.review_date, Review.id)
        )
        with self.datastore.session() as session:
            rows = session.execute(stmt).all()
        return [
            _to_view(review, username=author, recipe_title=title)
            for review, author, title in rows
        ]
