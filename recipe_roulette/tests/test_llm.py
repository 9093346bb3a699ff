from unittest.mock import MagicMock, patch

import pytest

from recipe_roulette.errors import InternalError, ValidationError
from recipe_roulette.llm.config import LLMConfig
from recipe_roulette.llm.groq_client import SYSTEM_PROMPT, generate_text

ENABLED_CONFIG = LLMConfig(api_key="test-key", enabled=True)
DISABLED_CONFIG = LLMConfig(api_key="test-key", enabled=False)


def _mock_groq_response(content) -> MagicMock:
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


@patch("recipe_roulette.llm.groq_client.Groq")
def test_generate_text_returns_completion(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(
        "  Swap butter for olive oil.  "
    )

    assert generate_text("What can replace butter?", config=ENABLED_CONFIG) == "Swap butter for olive oil."

    _, kwargs = mock_groq_cls.return_value.chat.completions.create.call_args
    assert kwargs["model"] == ENABLED_CONFIG.model
    assert kwargs["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert kwargs["messages"][1] == {"role": "user", "content": "What can replace butter?"}


@patch("recipe_roulette.llm.groq_client.Groq")
def test_generate_text_api_error(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.side_effect = Exception("API timeout")

    with pytest.raises(InternalError, match="Error generating text"):
        generate_text("Any tips?", config=ENABLED_CONFIG)


@patch("recipe_roulette.llm.groq_client.Groq")
def test_generate_text_empty_completion(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(None)

    with pytest.raises(InternalError):
        generate_text("Any tips?", config=ENABLED_CONFIG)


@patch("recipe_roulette.llm.groq_client.Groq")
def test_generate_text_disabled(mock_groq_cls):
    with pytest.raises(InternalError, match="not available"):
        generate_text("Any tips?", config=DISABLED_CONFIG)
    mock_groq_cls.assert_not_called()


def test_generate_text_blank_prompt():
    with pytest.raises(ValidationError):
        generate_text("   ", config=ENABLED_CONFIG)


# ── Endpoint ─────────────────────────────────────────────────────────────


@patch("recipe_roulette.llm.groq_client.Groq")
def test_generate_text_endpoint(mock_groq_cls, client, alice):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response("Bake at 180C.")

    resp = client.post("/generateText", json={"question": "How hot for bread?"}, headers=alice)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Bake at 180C."}


@patch("recipe_roulette.llm.groq_client.Groq")
def test_generate_text_endpoint_failure(mock_groq_cls, client, alice):
    mock_groq_cls.return_value.chat.completions.create.side_effect = Exception("boom")

    resp = client.post("/generateText", json={"question": "How hot for bread?"}, headers=alice)
    assert resp.status_code == 500
    assert resp.json() == {"error": "Error generating text. Please try again later."}


def test_generate_text_endpoint_requires_question(client, alice):
    resp = client.post("/generateText", json={"question": ""}, headers=alice)
    assert resp.status_code == 400
