"""Web search hits used for an article's research section."""

from __future__ import annotations

from pydantic import BaseModel, HttpUrl


class SearchResult(BaseModel):
    """One search hit. `rank` is its 1-based position in the provider's response."""

    title: str | None = None
    snippet: str | None = None
    url: HttpUrl
    source: str
    rank: int

    def as_source(self, index: int) -> str:
        """Numbered source block; `index` is the footnote number the summary cites."""

        lines = [f"[{index}] {self.title or self.url}", f"URL: {self.url}"]
        if self.snippet:
            lines.append(self.snippet.strip())
        return "\n".join(lines)
