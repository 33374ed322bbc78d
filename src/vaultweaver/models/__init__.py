"""Pydantic models used across the project."""

from __future__ import annotations

from vaultweaver.models.article import ArticleResult
from vaultweaver.models.search import SearchResult
from vaultweaver.models.topic import Topic
from vaultweaver.models.vault import GenerationStatus, Progress, VaultFile

__all__ = [
    "ArticleResult",
    "GenerationStatus",
    "Progress",
    "SearchResult",
    "Topic",
    "VaultFile",
]
