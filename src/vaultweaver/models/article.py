"""Article generation result models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ArticleResult(BaseModel):
    """Output of one article generation call."""

    content: str
    # In order of appearance in the content
    next_themes: list[str] = Field(default_factory=list)
