from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from functools import partial

import pytest
from sqlalchemy import delete, func, select

from recipe_roulette.db import Datastore, Recipe, Review, User
from recipe_roulette.errors import NotFoundError, ValidationError
from recipe_roulette.reviews.aggregator import ReviewAggregator
from recipe_roulette.tests.helpers import create_recipe, login_headers


def _review(client, headers, recipe_id, value, content="Tasty"):
    return client.post(
        "/createReview",
        json={"recipeID": recipe_id, "content": content, "value": value},
        headers=headers,
    )


def _average(client, headers, recipe_id):
    resp = client.get("/recipedetails", params={"recipeId": recipe_id}, headers=headers)
    return resp.json()["data"]["averageRating"]


@pytest.fixture
def recipe(client, alice):
    return create_recipe(client, alice)


# ── Create / delete through the API ──────────────────────────────────────


def test_average_follows_creates_and_deletes(client, alice, recipe):
    reviewers = [login_headers(client, name) for name in ("carol", "dave", "erin")]
    for headers, value in zip(reviewers, (5, 3, 4)):
        assert _review(client, headers, recipe["id"], value).status_code == 201
    assert _average(client, alice, recipe["id"]) == 4.0

    resp = _review(client, alice, recipe["id"], 2)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Review created successfully"
    assert body["averageRating"] == 3.5
    assert _average(client, alice, recipe["id"]) == 3.5

    resp = client.post(f"/deleteReview/{body['reviewId']}/{recipe['id']}", headers=alice)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Review deleted successfully.", "averageRating": 4.0}
    assert _average(client, alice, recipe["id"]) == 4.0


def test_average_is_rounded_to_two_places(client, alice, bob, recipe):
    carol = login_headers(client, "carol")
    _review(client, alice, recipe["id"], 5)
    _review(client, bob, recipe["id"], 4)
    resp = _review(client, carol, recipe["id"], 4)
    assert resp.json()["averageRating"] == 4.33


def test_deleting_last_review_resets_average(client, alice, recipe):
    review_id = _review(client, alice, recipe["id"], 5).json()["reviewId"]
    resp = client.post(f"/deleteReview/{review_id}/{recipe['id']}", headers=alice)
    assert resp.json()["averageRating"] == 0
    assert _average(client, alice, recipe["id"]) == 0


def test_non_owner_cannot_delete(client, alice, bob, recipe):
    review_id = _review(client, alice, recipe["id"], 5).json()["reviewId"]
    _review(client, bob, recipe["id"], 2)

    resp = client.post(f"/deleteReview/{review_id}/{recipe['id']}", headers=bob)
    assert resp.status_code == 403
    assert resp.json() == {"error": "Forbidden: You can only delete your own reviews."}

    assert _average(client, alice, recipe["id"]) == 3.5
    reviews = client.get(f"/getReviewsByRecipe/{recipe['id']}", headers=alice).json()["reviews"]
    assert review_id in [r["id"] for r in reviews]


def test_delete_unknown_review(client, alice, recipe):
    resp = client.post(f"/deleteReview/999/{recipe['id']}", headers=alice)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Review not found."}


def test_delete_review_under_wrong_recipe(client, alice, recipe):
    other = create_recipe(client, alice, title="Second Dish")
    review_id = _review(client, alice, recipe["id"], 5).json()["reviewId"]
    resp = client.post(f"/deleteReview/{review_id}/{other['id']}", headers=alice)
    assert resp.status_code == 404
    assert _average(client, alice, recipe["id"]) == 5.0


@pytest.mark.parametrize("value", [0, 6, -1])
def test_review_value_out_of_range(client, alice, recipe, value):
    resp = _review(client, alice, recipe["id"], value)
    assert resp.status_code == 400
    assert _average(client, alice, recipe["id"]) == 0


def test_review_for_missing_recipe(client, alice):
    resp = _review(client, alice, 999, 4)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Recipe not found."}


def test_review_content_is_optional(client, alice, recipe):
    resp = client.post("/createReview", json={"recipeID": recipe["id"], "value": 3}, headers=alice)
    assert resp.status_code == 201


# ── Listings ─────────────────────────────────────────────────────────────


def test_reviews_by_recipe(client, alice, bob, recipe):
    _review(client, alice, recipe["id"], 5, "Loved it")
    _review(client, bob, recipe["id"], 3, "Fine")
    resp = client.get(f"/getReviewsByRecipe/{recipe['id']}", headers=alice)
    assert resp.status_code == 200
    body = resp.json()
    assert body["recipeId"] == recipe["id"]
    assert [(r["username"], r["value"], r["content"]) for r in body["reviews"]] == [
        ("alice", 5, "Loved it"),
        ("bob", 3, "Fine"),
    ]
    assert re.fullmatch(r"\d{2}/\d{2}/\d{2}", body["reviews"][0]["formattedDate"])


def test_reviews_by_user_include_recipe_title(client, alice, bob, recipe):
    _review(client, bob, recipe["id"], 4)
    reviews = client.get("/getReviewsByUser/bob", headers=alice).json()["reviews"]
    assert len(reviews) == 1
    assert reviews[0]["recipeTitle"] == "Chicken Tikka"
    assert client.get("/getReviewsByUser/alice", headers=alice).json()["reviews"] == []


def test_reviews_by_recipe_bad_id(client, alice):
    resp = client.get("/getReviewsByRecipe/0", headers=alice)
    assert resp.status_code == 400


# ── Aggregator ───────────────────────────────────────────────────────────


@pytest.fixture
def seeded(datastore):
    """Ids of one recipe and three users inserted straight into the store."""
    with datastore.session() as session:
        users = [User(username=f"u{i}", email=f"u{i}@example.com", password="x") for i in range(3)]
        recipe = Recipe(title="Soup", calories=100)
        session.add_all([*users, recipe])
        session.commit()
        return recipe.id, [u.id for u in users]


@pytest.mark.parametrize(
    "values, expected",
    [
        ([1], 1.0),
        ([1, 2], 1.5),
        ([1, 1, 2], 1.33),
        ([2, 2, 3], 2.33),
        ([5, 5, 4], 4.67),
    ],
)
def test_average_matches_rounded_mean(datastore, seeded, values, expected):
    recipe_id, user_ids = seeded
    aggregator = ReviewAggregator(datastore)
    change = None
    for user_id, value in zip(user_ids, values):
        change = aggregator.record_review(recipe_id, user_id, value)
    assert change.average_rating == expected
    assert aggregator.recompute_average(recipe_id) == expected


def test_create_then_delete_restores_average(datastore, seeded):
    recipe_id, (first, second, _) = seeded
    aggregator = ReviewAggregator(datastore)
    before = aggregator.record_review(recipe_id, first, 4).average_rating

    change = aggregator.record_review(recipe_id, second, 1)
    after = aggregator.remove_review(change.review.id, second).average_rating
    assert after == before


def test_record_review_validates_before_writing(datastore, seeded):
    recipe_id, (user_id, _, _) = seeded
    aggregator = ReviewAggregator(datastore)
    with pytest.raises(ValidationError):
        aggregator.record_review(recipe_id, user_id, True)
    with pytest.raises(NotFoundError):
        aggregator.record_review(recipe_id, 999, 3)
    assert aggregator.reviews_for_recipe(recipe_id) == []


def test_recompute_unknown_recipe(datastore):
    with pytest.raises(NotFoundError):
        ReviewAggregator(datastore).recompute_average(42)


def test_concurrent_mutations_leave_consistent_average(tmp_path):
    store = Datastore(f"sqlite:///{tmp_path / 'reviews.db'}")
    store.create_schema()
    try:
        with store.session() as session:
            cooks = [User(username=f"cook{i}", email=f"cook{i}@example.com", password="x") for i in range(6)]
            stew = Recipe(title="Stew", calories=300)
            session.add_all([*cooks, stew])
            session.commit()
            recipe_id, user_ids = stew.id, [c.id for c in cooks]

        aggregator = ReviewAggregator(store)
        doomed = [aggregator.record_review(recipe_id, user_ids[i], v).review.id for i, v in enumerate((1, 2, 3))]

        jobs = [
            partial(aggregator.remove_review, doomed[0], user_ids[0]),
            partial(aggregator.remove_review, doomed[1], user_ids[1]),
            partial(aggregator.record_review, recipe_id, user_ids[3], 5),
            partial(aggregator.record_review, recipe_id, user_ids[4], 4),
            partial(aggregator.record_review, recipe_id, user_ids[5], 5),
        ]
        with ThreadPoolExecutor(max_workers=len(jobs)) as pool:
            for future in [pool.submit(job) for job in jobs]:
                future.result()

        survivors = sorted(r.value for r in aggregator.reviews_for_recipe(recipe_id))
        assert survivors == [3, 4, 5, 5]
        with store.session() as session:
            stored = session.scalar(select(Recipe.average_rating).where(Recipe.id == recipe_id))
        assert stored == round(sum(survivors) / len(survivors), 2) == 4.25
    finally:
        store.dispose()


# ── Cascades ─────────────────────────────────────────────────────────────


def test_deleting_recipe_removes_its_reviews(datastore, seeded):
    recipe_id, (first, second, _) = seeded
    aggregator = ReviewAggregator(datastore)
    aggregator.record_review(recipe_id, first, 4)
    aggregator.record_review(recipe_id, second, 2)

    with datastore.session() as session:
        session.execute(delete(Recipe).where(Recipe.id == recipe_id))
        session.commit()
        remaining = session.scalar(select(func.count()).select_from(Review))
    assert remaining == 0


def test_deleting_user_removes_their_reviews(datastore, seeded):
    recipe_id, (first, second, _) = seeded
    aggregator = ReviewAggregator(datastore)
    aggregator.record_review(recipe_id, first, 5)
    aggregator.record_review(recipe_id, second, 3)

    with datastore.session() as session:
        session.execute(delete(User).where(User.id == first))
        session.commit()
    assert [r.value for r in aggregator.reviews_for_recipe(recipe_id)] == [3]
