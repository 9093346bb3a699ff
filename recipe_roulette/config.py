from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

DEFAULT_CUISINES: tuple[str, ...] = (
    "American",
    "Chinese",
    "French",
    "Greek",
    "Indian",
    "Italian",
    "Japanese",
    "Lebanese",
    "Mexican",
    "Thai",
)


def _split_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if not raw:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class AppConfig:
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///recipe_roulette.db")
    jwt_secret: str = os.getenv("JWT_SECRET", "recipe-roulette-secret-change-in-production")
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    jwt_expires_minutes: int = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))
    cors_origins: tuple[str, ...] = field(
        default_factory=lambda: _split_env("CORS_ORIGINS", ("http://localhost:3000",))
    )
    seed_cuisines: tuple[str, ...] = field(
        default_factory=lambda: _split_env("SEED_CUISINES", DEFAULT_CUISINES)
    )
    docs_url: str = "/recipeRouletteDoc"


DEFAULT_APP_CONFIG = AppConfig()
