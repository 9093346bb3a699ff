from __future__ import annotations

import logging

from groq import Groq

from ..errors import InternalError
from ..validation import require_text
from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a friendly cooking assistant for a recipe-sharing site. "
    "Answer questions about recipes, ingredients, substitutions and techniques "
    "concisely and in plain text."
)


def generate_text(prompt: str, config: LLMConfig = DEFAULT_LLM_CONFIG) -> str:
    """
    Send *prompt* to the Groq chat model and return the generated text.

    Raises ``InternalError`` when the model is disabled, has no API key, or
    the call fails.
    """
    prompt = require_text(prompt, "question")

    if not config.enabled or not config.api_key:
        raise InternalError("Text generation is not available.")

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )
        content = response.choices[0].message.content

    except Exception:
        logger.warning("Groq text generation failed", exc_info=True)
        raise InternalError("Error generating text. Please try again later.") from None

    if not content:
        raise InternalError("Error generating text. Please try again later.")
    return content.strip()
