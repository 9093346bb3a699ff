from __future__ import annotations

from pydantic import Field

from ..api_model import ApiModel


class GenerateTextRequest(ApiModel):
    question: str = Field(..., min_length=1, max_length=4000)


class GenerateTextResponse(ApiModel):
    success: bool = True
    message: str
