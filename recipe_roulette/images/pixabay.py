from __future__ import annotations

import logging

import requests

from .config import DEFAULT_IMAGE_CONFIG, ImageConfig

logger = logging.getLogger(__name__)


def find_image_url(query: str, config: ImageConfig = DEFAULT_IMAGE_CONFIG) -> str:
    """
    Return the URL of the first Pixabay photo matching *query*.

    Falls back to ``config.default_image_url`` when the lookup is disabled,
    finds nothing, or fails for any reason.
    """
    if not config.enabled or not config.api_key or not query or not query.strip():
        return config.default_image_url

    try:
        response = requests.get(
            config.endpoint,
            params={"key": config.api_key, "q": query.strip(), "image_type": "photo"},
            timeout=config.timeout,
        )
        response.raise_for_status()
        hits = response.json().get("hits") or []
        if hits and hits[0].get("webformatURL"):
            return hits[0]["webformatURL"]
        return config.default_image_url

    except (requests.RequestException, ValueError):
        logger.warning("Pixabay lookup failed for %r, using default image", query, exc_info=True)
        return config.default_image_url
