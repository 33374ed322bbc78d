"""LLM-backed article generator.

Writes each article from model knowledge, optionally appends a web research section grounded on
search results, then cleans up wikilinks and extracts the follow-up themes.
"""

from __future__ import annotations

import asyncio
from typing import Sequence

from vaultweaver.config import GenerationConfig, Settings
from vaultweaver.generation.base import GenerationError
from vaultweaver.llm.client import ChatMessage, LLMClient
from vaultweaver.logging import get_logger
from vaultweaver.models.article import ArticleResult
from vaultweaver.models.search import SearchResult
from vaultweaver.models.topic import Topic
from vaultweaver.prompts import (
    ARTICLE_PROMPT_TEMPLATE,
    ARTICLE_SYSTEM_PROMPT,
    NEXT_CONCEPTS_HEADING,
    WEB_RESEARCH_SYSTEM_PROMPT,
)
from vaultweaver.tools.web_search import WebSearchError, WebSearchProvider
from vaultweaver.utils.wikilinks import extract_next_themes, fix_wikilinks

logger = get_logger(__name__)

WEB_RESEARCH_UNAVAILABLE = "Web search could not be completed for this topic."


class LLMArticleGenerator:
    """Article generator using an OpenAI-compatible chat model."""

    def __init__(
        self,
        llm: LLMClient,
        settings: Settings,
        search: WebSearchProvider | None = None,
    ) -> None:
        self._llm = llm
        self._settings = settings
        self._search = search

    async def generate(
        self,
        topic: Topic,
        config: GenerationConfig,
        already_generated: Sequence[str],
    ) -> ArticleResult:
        prompt = build_article_prompt(
            topic,
            config,
            already_generated,
            context_chars=self._settings.prompt_context_chars,
        )
        messages = [
            ChatMessage(role="system", content=ARTICLE_SYSTEM_PROMPT),
            ChatMessage(role="user", content=prompt),
        ]
        try:
            content = await self._llm.complete_async(messages, model=config.model_name)
        except Exception as e:
            raise GenerationError(f"article request failed: {e}") from e
        if not content.strip():
            raise GenerationError("model returned an empty article")

        if not config.model_only:
            content += await self._web_research_section(topic.theme, config)

        cleaned = fix_wikilinks(content)
        return ArticleResult(
            content=cleaned,
            next_themes=extract_next_themes(cleaned, config.child_count),
        )

    async def _web_research_section(self, theme: str, config: GenerationConfig) -> str:
        header = f"\n\n## Web Research: {theme}\n"
        if self._search is None:
            logger.warning("Web research requested but no search provider is configured")
            return header + WEB_RESEARCH_UNAVAILABLE

        try:
            results = await asyncio.to_thread(
                self._search.search,
                theme,
                max_results=self._settings.search_max_results,
            )
            if not results:
                return header + WEB_RESEARCH_UNAVAILABLE
            body = await self._llm.complete_async(
                [
                    ChatMessage(role="system", content=WEB_RESEARCH_SYSTEM_PROMPT),
                    ChatMessage(role="user", content=_format_search_results(theme, results)),
                ],
                temperature=0.2,
                model=config.model_name,
            )
        except WebSearchError:
            logger.warning("Web search failed; using model knowledge only", exc_info=True)
            return header + WEB_RESEARCH_UNAVAILABLE
        except Exception:
            logger.warning("Web research summary failed; using model knowledge only", exc_info=True)
            return header + WEB_RESEARCH_UNAVAILABLE
        return header + body.strip()


def build_article_prompt(
    topic: Topic,
    config: GenerationConfig,
    already_generated: Sequence[str],
    *,
    context_chars: int = 2000,
) -> str:
    """Render the user prompt for one article."""

    avoid_list = ", ".join(already_generated) if already_generated else "(none)"
    return ARTICLE_PROMPT_TEMPLATE.format(
        theme=topic.theme,
        parent_context=topic.parent_context[:context_chars],
        extra_prompt=config.extra_prompt,
        next_heading=NEXT_CONCEPTS_HEADING,
        more_clause=f"Please suggest exactly {config.child_count} concepts.",
        avoid_list=avoid_list,
    )


def _format_search_results(theme: str, results: list[SearchResult]) -> str:
    lines = [f"Theme: {theme}", "", "Search results:"]
    for i, r in enumerate(results, start=1):
        lines.append(r.as_source(i))
        lines.append("")
    return "\n".join(lines)
