from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any

from .errors import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_PASSWORD_LENGTH = 6
MIN_REVIEW_VALUE = 1
MAX_REVIEW_VALUE = 5


def require_positive_id(value: Any, label: str) -> int:
    """Return *value* as an int, or raise if it is not a positive integer id."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"A valid {label} is required.")
    return value


def require_text(value: Any, label: str) -> str:
    """Return *value* trimmed, or raise if it is not a non-blank string."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"A valid {label} is required.")
    return value.strip()


def require_username(value: Any) -> str:
    return require_text(value, "username")


def optional_text(value: Any) -> str | None:
    """Trimmed text, with blank or missing values collapsed to ``None``."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("Text fields must be strings.")
    return value.strip() or None


def require_email(value: Any) -> str:
    email = require_text(value, "email address")
    if not _EMAIL_RE.match(email):
        raise ValidationError("A valid email address is required.")
    return email


def require_review_value(value: Any) -> int:
    if (
        isinstance(value, bool)
        or not isinstance(value, int)
        or not MIN_REVIEW_VALUE <= value <= MAX_REVIEW_VALUE
    ):
        raise ValidationError(
            f"A valid review value between {MIN_REVIEW_VALUE} and {MAX_REVIEW_VALUE} is required."
        )
    return value


def require_calorie_ceiling(value: Any) -> float:
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or not math.isfinite(value)
        or value <= 0
    ):
        raise ValidationError("calorieLimitPerMeal must be a positive number.")
    return value


def require_choice(value: Any, enum_cls: type[Enum], label: str) -> str:
    """Return the enum value matching *value* exactly (after trimming)."""
    allowed = [m.value for m in enum_cls]
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str) or value.strip() not in allowed:
        raise ValidationError(f"{label} must be one of: {', '.join(allowed)}.")
    return value.strip()
