"""
Error taxonomy shared by every component.

Components raise these; ``app.py`` renders them as ``{"error": message}``
with the status code carried by the exception class.
"""
from __future__ import annotations


class RecipeRouletteError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error. Please try again later."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(RecipeRouletteError):
    status_code = 400
    default_message = "Invalid input."


class AuthError(RecipeRouletteError):
    status_code = 401
    default_message = "Authorization token missing, malformed or expired."


class ForbiddenError(RecipeRouletteError):
    status_code = 403
    default_message = "You are not allowed to perform this action."


class NotFoundError(RecipeRouletteError):
    status_code = 404
    default_message = "Not found."


class InternalError(RecipeRouletteError):
    status_code = 500
