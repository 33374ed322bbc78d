from __future__ import annotations

from vaultweaver.prompts.article import (
    ARTICLE_PROMPT_TEMPLATE,
    ARTICLE_SYSTEM_PROMPT,
    NEXT_CONCEPTS_HEADING,
    WEB_RESEARCH_SYSTEM_PROMPT,
)

__all__ = [
    "ARTICLE_PROMPT_TEMPLATE",
    "ARTICLE_SYSTEM_PROMPT",
    "NEXT_CONCEPTS_HEADING",
    "WEB_RESEARCH_SYSTEM_PROMPT",
]
