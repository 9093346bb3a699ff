from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from recipe_roulette.app import create_app
from recipe_roulette.auth import passwords
from recipe_roulette.db import Datastore
from recipe_roulette.tests.helpers import (
    TEST_CONFIG,
    TEST_IMAGE_CONFIG,
    TEST_LLM_CONFIG,
    login_headers,
)


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(passwords, "_BCRYPT_ROUNDS", 4)


@pytest.fixture
def datastore():
    store = Datastore("sqlite://")
    store.create_schema()
    store.seed_cuisines(TEST_CONFIG.seed_cuisines)
    yield store
    store.dispose()


@pytest.fixture
def app(datastore):
    return create_app(
        config=TEST_CONFIG,
        datastore=datastore,
        image_config=TEST_IMAGE_CONFIG,
        llm_config=TEST_LLM_CONFIG,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def alice(client):
    return login_headers(client, "alice")


@pytest.fixture
def bob(client):
    return login_headers(client, "bob")
