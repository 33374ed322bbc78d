"""Web search used to ground the optional research section of an article."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Protocol

import httpx
from pydantic import ValidationError

from vaultweaver.config import Settings
from vaultweaver.logging import get_logger
from vaultweaver.models.search import SearchResult

logger = get_logger(__name__)


class WebSearchProvider(Protocol):
    """Search provider interface."""

    def search(self, query: str, *, max_results: int) -> list[SearchResult]:
        """Search web."""


class WebSearchError(RuntimeError):
    pass


class TavilySearchError(WebSearchError):
    pass


_TRANSIENT_STATUS = frozenset({429, 500, 502, 503, 504})


@dataclass(frozen=True)
class TavilySearchProvider:
    """Tavily API search provider.

    Notes:
        - API key must be provided via settings (`VAULTWEAVER_TAVILY_API_KEY`).
        - Only URL/title/snippet are returned; snippets are what the research section is
          written from.
    """

    api_key: str
    base_url: str = "https://api.tavily.com"
    search_depth: str = "basic"
    timeout_s: float = 30.0
    max_retries: int = 3
    retry_backoff_s: float = 0.75
    retry_max_backoff_s: float = 8.0
    source_name: str = "tavily"

    def search(self, query: str, *, max_results: int) -> list[SearchResult]:
        """Search using Tavily.

        Args:
            query: Search query.
            max_results: Maximum number of results.

        Returns:
            List of results.

        Raises:
            TavilySearchError: When every attempt failed.
        """

        url = f"{self.base_url.rstrip('/')}/search"
        payload = {
            "api_key": self.api_key,
            "query": query,
            "max_results": max_results,
            "search_depth": self.search_depth,
            "include_answer": False,
            "include_raw_content": False,
            "include_images": False,
        }

        last_err: Exception | None = None
        started = time.monotonic()

        with httpx.Client(timeout=httpx.Timeout(self.timeout_s), follow_redirects=True) as client:
            for attempt in range(self.max_retries + 1):
                status_code: int | None = None
                try:
                    resp = client.post(url, json=payload)
                    status_code = resp.status_code
                    if status_code in _TRANSIENT_STATUS:
                        raise httpx.HTTPStatusError(
                            f"tavily transient status={status_code}",
                            request=resp.request,
                            response=resp,
                        )
                    resp.raise_for_status()
                    results = self._parse(resp.json())
                    logger.info(
                        "Tavily search ok",
                        extra={
                            "query_len": len(query),
                            "attempt": attempt,
                            "result_count": len(results),
                            "latency_ms": int((time.monotonic() - started) * 1000),
                        },
                    )
                    return results
                except (httpx.HTTPError, TavilySearchError, ValueError) as e:
                    last_err = e

                if attempt >= self.max_retries:
                    break

                sleep_s = self._retry_delay(last_err, attempt)
                logger.warning(
                    "Tavily search retry",
                    extra={
                        "attempt": attempt,
                        "max_retries": self.max_retries,
                        "status_code": status_code,
                        "sleep_s": sleep_s,
                    },
                )
                time.sleep(sleep_s)

        msg = "Tavily search failed"
        logger.error(
            msg,
            extra={
                "query_len": len(query),
                "max_retries": self.max_retries,
                "elapsed_ms": int((time.monotonic() - started) * 1000),
                "error": str(last_err) if last_err is not None else None,
            },
        )
        raise TavilySearchError(msg) from last_err

    def _parse(self, data: object) -> list[SearchResult]:
        if not isinstance(data, dict):
            raise TavilySearchError("tavily response not a JSON object")
        raw_results = data.get("results")
        if not isinstance(raw_results, list):
            raise TavilySearchError("tavily response missing results list")

        results: list[SearchResult] = []
        for i, item in enumerate(raw_results, start=1):
            if not isinstance(item, dict) or not item.get("url"):
                continue
            try:
                result = SearchResult(
                    title=item.get("title"),
                    snippet=item.get("content") or item.get("snippet"),
                    url=item["url"],
                    source=self.source_name,
                    rank=i,
                )
            except ValidationError:
                logger.debug("Tavily result skipped", extra={"rank": i})
                continue
            results.append(result)
        return results

    def _retry_delay(self, err: Exception | None, attempt: int) -> float:
        if isinstance(err, httpx.HTTPStatusError) and err.response.status_code == 429:
            retry_after = err.response.headers.get("retry-after")
            if retry_after is not None:
                try:
                    return float(retry_after)
                except ValueError:
                    pass
        return min(self.retry_max_backoff_s, self.retry_backoff_s * (2**attempt))


def get_search_provider(settings: Settings) -> WebSearchProvider | None:
    """Build the configured search provider, or None when no API key is set."""

    if not settings.tavily_api_key:
        return None
    return TavilySearchProvider(
        api_key=settings.tavily_api_key,
        base_url=settings.tavily_api_base_url,
        search_depth=settings.tavily_search_depth,
        timeout_s=settings.tavily_timeout_s,
        max_retries=settings.tavily_max_retries,
        retry_backoff_s=settings.tavily_retry_backoff_s,
        retry_max_backoff_s=settings.tavily_retry_max_backoff_s,
    )
