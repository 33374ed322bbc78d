"""Run wiring: generator, recorders, scheduler and on-disk export."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import redis

from vaultweaver.config import GenerationConfig, Settings
from vaultweaver.core.vault import write_vault_tree
from vaultweaver.events import RunEvent
from vaultweaver.generation.article import LLMArticleGenerator
from vaultweaver.generation.base import ArticleGenerator
from vaultweaver.llm.client import LLMClient
from vaultweaver.logging import get_logger
from vaultweaver.orchestrator.scheduler import EventListener, VaultScheduler
from vaultweaver.orchestrator.state import RunState
from vaultweaver.recording.file_recorder import FileEventRecorder, iter_events
from vaultweaver.recording.redis_recorder import RedisEventRecorder
from vaultweaver.tools.web_search import get_search_provider
from vaultweaver.utils.ids import new_run_id

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunPaths:
    """Paths for a run."""

    root: Path

    @property
    def events_path(self) -> Path:
        return self.root / "events.jsonl"


def build_generator(settings: Settings) -> ArticleGenerator:
    """Create the LLM article generator.

    Raises:
        ValueError: If no LLM API key is configured.
    """

    return LLMArticleGenerator(
        llm=LLMClient(settings),
        settings=settings,
        search=get_search_provider(settings),
    )


class VaultRun:
    """One generation run with its recorders and artifact directory.

    Args:
        settings: Service settings.
        generator: Article generator; the LLM generator is built from settings when omitted.
        run_id: Run identifier; generated when omitted.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        generator: ArticleGenerator | None = None,
        run_id: str | None = None,
    ) -> None:
        self.run_id = run_id or new_run_id()
        self.paths = RunPaths(root=_prepare_run_dir(settings.artifacts_dir, self.run_id))
        self.vault_dir: Path | None = None

        listeners: list[EventListener] = [FileEventRecorder(self.paths.events_path)]
        self._redis = _redis_recorder(self.run_id, settings)
        if self._redis is not None:
            listeners.append(self._redis)

        self.scheduler = VaultScheduler(
            generator or build_generator(settings),
            run_id=self.run_id,
            loop_yield_s=settings.loop_yield_s,
            parent_context_chars=settings.parent_context_chars,
            listeners=listeners,
        )

    async def execute(self, config: GenerationConfig) -> RunState:
        """Run the scheduler to completion, then write the vault to disk."""

        state = await self.scheduler.start(config)
        files = self.scheduler.vault
        if files:
            self.vault_dir = write_vault_tree(files, self.paths.root, config.vault_name)
            logger.info("Vault written", extra={"vault_dir": str(self.vault_dir), "files": len(files)})
            if self._redis is not None:
                try:
                    self._redis.store_vault(files)
                except redis.RedisError:
                    logger.exception("Redis vault store failed", extra={"run_id": self.run_id})
        return state


def run_vault(*, config: GenerationConfig, settings: Settings) -> tuple[RunState, Path | None]:
    """Run a generation synchronously.

    Returns:
        Final run state and the vault directory (None when nothing was generated).
    """

    run = VaultRun(settings)
    state = asyncio.run(run.execute(config))
    return state, run.vault_dir


def replay_run(*, run_id: str, artifacts_dir: Path, settings: Settings | None = None) -> Iterator[RunEvent]:
    """Replay a run from recorded events."""

    file_events = iter_events(RunPaths(root=artifacts_dir / f"run_{run_id}").events_path)
    if file_events:
        yield from file_events
        return

    # Fall back to Redis when this instance did not record the run.
    rr = _redis_recorder(run_id, settings)
    if rr is not None:
        yield from rr.iter_events()


def recorded_state(*, run_id: str, settings: Settings) -> dict[str, str]:
    """Latest status and progress of a run recorded in Redis (empty when unknown)."""

    rr = _redis_recorder(run_id, settings)
    return rr.get_state() if rr is not None else {}


def recorded_vault(*, run_id: str, settings: Settings) -> dict[str, str]:
    """Vault files of a finished run recorded in Redis (empty when unknown)."""

    rr = _redis_recorder(run_id, settings)
    return rr.load_vault() if rr is not None else {}


def _redis_recorder(run_id: str, settings: Settings | None) -> RedisEventRecorder | None:
    if settings is None or not settings.redis_enabled:
        return None
    return RedisEventRecorder(
        redis_url=settings.redis_url,
        key_prefix=settings.redis_key_prefix,
        run_id=run_id,
    )


def _prepare_run_dir(base: Path, run_id: str) -> Path:
    run_dir = base / f"run_{run_id}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir
