"""External tools used by the article generator."""

from __future__ import annotations

from vaultweaver.tools.web_search import TavilySearchProvider, WebSearchError, get_search_provider

__all__ = ["TavilySearchProvider", "WebSearchError", "get_search_provider"]
