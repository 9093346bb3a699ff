from __future__ import annotations

from recipe_roulette.config import AppConfig
from recipe_roulette.images.config import ImageConfig
from recipe_roulette.llm.config import LLMConfig

TEST_CONFIG = AppConfig(
    database_url="sqlite://",
    jwt_secret="test-secret",
    cors_origins=("http://testserver",),
    seed_cuisines=("Chinese", "Italian", "Mexican"),
)
TEST_IMAGE_CONFIG = ImageConfig(api_key="", default_image_url="/images/default-recipe.jpg", enabled=False)
TEST_LLM_CONFIG = LLMConfig(api_key="test-key", enabled=True)

RECIPE_DEFAULTS = {
    "title": "Chicken Tikka",
    "description": "Smoky grilled chicken.",
    "ingredients": "chicken, yoghurt, spices",
    "instructions": "Marinate, grill, serve.",
    "difficultyLevel": "moderate",
    "cuisineName": "Italian",
    "calories": 450,
    "dietaryPreferences": "None",
}


def register(client, username="alice", password="secret123", email=None):
    return client.post(
        "/register",
        json={
            "username": username,
            "password": password,
            "confirmPassword": password,
            "email": email or f"{username}@example.com",
        },
    )


def login_headers(client, username="alice", password="secret123", email=None):
    """Register *username* and return bearer headers for them."""
    assert register(client, username, password, email).status_code == 201
    resp = client.post("/login", json={"username": username, "password": password})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def create_recipe(client, headers, **overrides):
    body = {**RECIPE_DEFAULTS, **overrides}
    resp = client.post("/createRecipe", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["recipe"]
