"""Shared test helpers."""

from __future__ import annotations

import asyncio
from typing import Sequence

import pytest

from vaultweaver.config import GenerationConfig
from vaultweaver.generation.base import GenerationError
from vaultweaver.models.article import ArticleResult
from vaultweaver.models.topic import Topic


class ScriptedGenerator:
    """Deterministic article generator driven by a theme -> children table."""

    def __init__(
        self,
        children: dict[str, list[str]] | None = None,
        *,
        fail: Sequence[str] = (),
        delays: dict[str, float] | None = None,
        gates: dict[str, asyncio.Event] | None = None,
    ) -> None:
        self.children = children or {}
        self.fail = set(fail)
        self.delays = delays or {}
        self.gates = gates or {}
        self.calls: list[str] = []
        self.topics: list[Topic] = []
        self.avoid_lists: list[list[str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def generate(
        self,
        topic: Topic,
        config: GenerationConfig,
        already_generated: Sequence[str],
    ) -> ArticleResult:
        self.calls.append(topic.theme)
        self.topics.append(topic)
        self.avoid_lists.append(list(already_generated))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            gate = self.gates.get(topic.theme)
            if gate is not None:
                await gate.wait()
            await asyncio.sleep(self.delays.get(topic.theme, 0))
            if topic.theme in self.fail:
                raise GenerationError(f"backend unavailable for {topic.theme}")
            kids = self.children.get(topic.theme, [])
            links = "\n".join(f"- [[{k}]]" for k in kids)
            return ArticleResult(content=f"# {topic.theme}\n\n{links}", next_themes=list(kids))
        finally:
            self.in_flight -= 1


@pytest.fixture
def scripted_generator() -> type[ScriptedGenerator]:
    return ScriptedGenerator
