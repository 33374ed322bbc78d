"""Topic models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Topic(BaseModel):
    """A unit of work: a theme to write an article about.

    Identity is the theme string (exact, case-sensitive match).
    """

    model_config = ConfigDict(frozen=True)

    theme: str
    level: int = Field(default=0, ge=0)
    parent_context: str = ""
