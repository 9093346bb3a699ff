"""
Settings for the cooking-assistant endpoint (`POST /generateText`).

Questions are answered by a Groq-hosted chat model. Without `GROQ_API_KEY`, or
with `enabled=False`, the endpoint reports that text generation is
unavailable instead of calling out. `max_tokens` and `temperature` keep
answers short and conversational.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class LLMConfig:
    api_key: str = os.getenv("GROQ_API_KEY", "")
    model: str = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")
    timeout: float = 15.0
    max_tokens: int = 512
    temperature: float = 0.7
    enabled: bool = True


DEFAULT_LLM_CONFIG = LLMConfig()
