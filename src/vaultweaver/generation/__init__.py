"""Article generation: the contract used by the scheduler and the LLM-backed implementation."""

from __future__ import annotations

from vaultweaver.generation.base import ArticleGenerator, GenerationError

__all__ = ["ArticleGenerator", "GenerationError"]
