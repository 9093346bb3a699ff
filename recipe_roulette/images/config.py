"""
Settings for recipe images looked up on Pixabay by recipe title.

An empty `PIXABAY_API_KEY` turns lookups off and every recipe shows
`default_image_url`. Results are cached per title for `cache_ttl` seconds.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class ImageConfig:
    api_key: str = os.getenv("PIXABAY_API_KEY", "")
    endpoint: str = "https://pixabay.com/api/"
    timeout: float = 5.0
    default_image_url: str = os.getenv("DEFAULT_RECIPE_IMAGE", "/images/default-recipe.jpg")
    enabled: bool = True
    cache_ttl: float = float(os.getenv("IMAGE_CACHE_TTL", "300"))


DEFAULT_IMAGE_CONFIG = ImageConfig()
