"""
Relational storage layer.

Responsibilities:
- Declare the user / cuisine / recipe / review schema.
- Own the engine and session factory shared by every component.
- Seed the cuisine lookup table.
"""
from .datastore import Datastore
from .schema import Base, Cuisine, DietaryPreference, DifficultyLevel, Recipe, Review, User

__all__ = [
    "Base",
    "Cuisine",
    "Datastore",
    "DietaryPreference",
    "DifficultyLevel",
    "Recipe",
    "Review",
    "User",
]
