"""Wikilink parsing and cleanup for generated markdown."""

from __future__ import annotations

import re

from vaultweaver.prompts.article import NEXT_CONCEPTS_HEADING

_WIKILINK_RE = re.compile(r"\[\[(?P<title>[^\[\]]+)\]\]")
_NEXT_SECTION_RE = re.compile(
    r"##\s*" + re.escape(NEXT_CONCEPTS_HEADING) + r"\s*(?P<body>.*?)(?:\n##|\Z)",
    re.IGNORECASE | re.DOTALL,
)

_BACKTICKED_LINK_RE = re.compile(r"`+\s*\[\[([^\[\]]+)\]\]\s*`+")
_QUOTED_LINK_RE = re.compile(r"[\"“”'「」]+(\s*\[\[[^\[\]]+\]\]\s*)[\"“”'「」]+")
_BULLET_TRAILING_PUNCT_RE = re.compile(r"^( *[-*]\s*\[\[[^\[\]]+\]\])\s*[。、．.,]+$", re.MULTILINE)


def fix_wikilinks(markdown: str) -> str:
    """Normalize wikilinks the model decorated despite instructions.

    Unwraps backticked or quoted links and drops punctuation trailing a bulleted link.
    """

    fixed = _BACKTICKED_LINK_RE.sub(r"[[\1]]", markdown)
    fixed = _QUOTED_LINK_RE.sub(lambda m: m.group(1).strip(), fixed)
    fixed = _BULLET_TRAILING_PUNCT_RE.sub(r"\1", fixed)
    return fixed


def extract_wikilinks(text: str) -> list[str]:
    """Extract link titles in first-seen order, trimmed and de-duplicated."""

    seen: set[str] = set()
    out: list[str] = []
    for m in _WIKILINK_RE.finditer(text):
        title = m.group("title").strip()
        if title and title not in seen:
            out.append(title)
            seen.add(title)
    return out


def extract_next_themes(content: str, limit: int) -> list[str]:
    """Follow-up themes listed in the article's next-concepts section.

    Args:
        content: Article markdown.
        limit: Maximum number of themes to return.

    Returns:
        Up to `limit` themes; empty if the section is missing.
    """

    m = _NEXT_SECTION_RE.search(content)
    if not m or limit <= 0:
        return []
    return extract_wikilinks(m.group("body"))[:limit]
