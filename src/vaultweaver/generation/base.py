"""Article generator contract."""

from __future__ import annotations

from typing import Protocol, Sequence

from vaultweaver.config import GenerationConfig
from vaultweaver.models.article import ArticleResult
from vaultweaver.models.topic import Topic


class GenerationError(RuntimeError):
    """Raised when an article could not be generated."""


class ArticleGenerator(Protocol):
    """Produces an article and its follow-up themes for one topic.

    Implementations may raise any exception on failure; the scheduler treats every failure as
    local to the topic.
    """

    async def generate(
        self,
        topic: Topic,
        config: GenerationConfig,
        already_generated: Sequence[str],
    ) -> ArticleResult:
        """Generate one article."""
