"""Vault generation scheduler.

Expands seed topics into a tree of articles. Topics are admitted from a FIFO queue up to the
worker limit; each completed article may enqueue follow-up topics one level deeper. All state
mutation happens on the event loop between awaits, so no locking is needed: generation tasks only
call the generator and hand back a :data:`TaskOutcome`, which the loop applies.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Sequence

from vaultweaver.config import GenerationConfig
from vaultweaver.core.concurrency import TaskPool
from vaultweaver.core.estimator import planned_total
from vaultweaver.core.stop import StopController, StopReason
from vaultweaver.core.topic_queue import TopicQueue
from vaultweaver.core.vault import VaultAccumulator, article_path, build_moc
from vaultweaver.events import ContentType, EventType, RunEvent
from vaultweaver.generation.base import ArticleGenerator
from vaultweaver.logging import get_logger, run_context, set_theme
from vaultweaver.models.article import ArticleResult
from vaultweaver.models.topic import Topic
from vaultweaver.models.vault import GenerationStatus, Progress
from vaultweaver.orchestrator.state import RunState
from vaultweaver.utils.ids import new_run_id

logger = get_logger(__name__)

EventListener = Callable[[RunEvent], None]

SINGLE_ROOT_CONTEXT = "This is the root topic of the knowledge vault."
MOC_ROOT_CONTEXT = "This is one of the initial topics for a Map of Contents (MOC)."


@dataclass(frozen=True)
class TaskSuccess:
    topic: Topic
    result: ArticleResult


@dataclass(frozen=True)
class TaskFailure:
    topic: Topic
    error: str


TaskOutcome = TaskSuccess | TaskFailure


class VaultScheduler:
    """Runs one vault generation.

    Observable state (:attr:`status`, :attr:`logs`, :attr:`progress`, :attr:`vault`) is updated
    incrementally, and every change is also published as a :class:`RunEvent` to subscribers.

    Args:
        generator: Article generator invoked once per admitted theme.
        run_id: Identifier used in events and log context. Generated when omitted.
        loop_yield_s: Pause between scheduling passes.
        parent_context_chars: Prefix of a parent's content handed to its children.
        listeners: Initial event subscribers.
    """

    def __init__(
        self,
        generator: ArticleGenerator,
        *,
        run_id: str | None = None,
        loop_yield_s: float = 0.1,
        parent_context_chars: int = 3000,
        listeners: Iterable[EventListener] = (),
    ) -> None:
        self._generator = generator
        self._loop_yield_s = loop_yield_s
        self._parent_context_chars = parent_context_chars
        self._listeners: list[EventListener] = list(listeners)

        self._state = RunState(run_id=run_id or new_run_id())
        self._queue = TopicQueue()
        self._stop = StopController()
        self._vault = VaultAccumulator()
        self._seq = 0
        self._active = False

    # ------------------------------------------------------------------
    # Observable state

    @property
    def run_id(self) -> str:
        return self._state.run_id

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def status(self) -> GenerationStatus:
        return self._state.status

    @property
    def logs(self) -> list[str]:
        return list(self._state.logs)

    @property
    def progress(self) -> Progress:
        return self._state.progress.model_copy()

    @property
    def vault(self) -> Mapping[str, str]:
        return self._vault.snapshot()

    @property
    def is_active(self) -> bool:
        """Whether a run is in progress, including stopped runs still draining tasks."""
        return self._active

    def subscribe(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Control

    async def start(self, config: GenerationConfig) -> RunState:
        """Run a generation to completion.

        Ignored while a run is in progress; returns the current state in that case.
        """

        if self._active:
            logger.warning("Start ignored: a run is already in progress")
            return self._state

        self._active = True
        try:
            with run_context(run_id=self.run_id):
                try:
                    await self._run(config)
                except Exception as e:
                    logger.exception("Generation aborted")
                    self._log(f"Error: generation aborted: {e}", level=logging.ERROR)
                    self._set_status(GenerationStatus.ERROR)
        finally:
            self._active = False
        return self._state

    def stop(self) -> None:
        """Stop admitting new topics. Articles already being generated still complete."""

        if self._state.status != GenerationStatus.RUNNING:
            return
        self._log("--- Stop request received. Finishing current tasks... ---")
        self._engage_stop(StopReason.USER)

    # ------------------------------------------------------------------
    # Run

    async def _run(self, config: GenerationConfig) -> None:
        self._reset()
        self._set_status(GenerationStatus.RUNNING)
        self._log("Generation started...")

        seeds = config.seed_topics()
        if not seeds:
            self._log("Error: No initial topics provided.", level=logging.ERROR)
            self._set_status(GenerationStatus.ERROR)
            return

        root_context = SINGLE_ROOT_CONTEXT if config.mode == "single" else MOC_ROOT_CONTEXT
        self._queue.extend([Topic(theme=t, level=0, parent_context=root_context) for t in seeds])

        if config.mode == "moc":
            moc = build_moc(config.moc_title, seeds)
            self._vault.add(moc)
            self._emit(EventType.SYSTEM, ContentType.MOC_CREATED, data={"path": moc.path})
            self._log(f"Created MOC file: {moc.path}")

        total = planned_total(len(seeds), config.child_count, config.max_depth, config.max_articles)
        self._set_progress(Progress(current=0, total=total))
        self._log(f"Planning to generate up to {total} articles.")

        await self._process_queue(config)

        if self._stop.reason == StopReason.CAP:
            self._log("Generation stopped: article cap reached.")
        elif self._stop.reason == StopReason.USER:
            self._log("Generation stopped by user.")
        else:
            self._log("--- All articles generated successfully! ---")
            self._set_status(GenerationStatus.FINISHED)

    async def _process_queue(self, config: GenerationConfig) -> None:
        pool: TaskPool[TaskOutcome] = TaskPool(config.worker_count)
        try:
            while True:
                self._admit(config, pool)
                if pool.active_count == 0 and (not self._queue or self._stop.stopped):
                    break

                for task in await pool.wait_any():
                    self._apply(task.result(), config)

                await asyncio.sleep(self._loop_yield_s)
        finally:
            await pool.cancel_all()

    def _admit(self, config: GenerationConfig, pool: TaskPool[TaskOutcome]) -> None:
        while self._queue and pool.has_capacity and not self._stop.stopped:
            topic = self._queue.pop()
            if topic is None or self._queue.is_processed(topic.theme):
                continue

            self._queue.mark_processed(topic.theme)
            started = self._queue.processed_count
            self._log(
                f"[{started}/{self._state.progress.total}] (Depth:{topic.level}) Generating: {topic.theme}"
            )
            self._emit(
                EventType.TASK,
                ContentType.TASK_STARTED,
                data={"theme": topic.theme, "level": topic.level},
            )
            pool.spawn(
                self._generate(topic, config, self._queue.processed_themes()),
                name=f"generate:{topic.theme}",
            )

            if config.max_articles > 0 and started >= config.max_articles:
                self._log("Article generation cap reached.")
                self._engage_stop(StopReason.CAP)

    async def _generate(
        self,
        topic: Topic,
        config: GenerationConfig,
        already_generated: Sequence[str],
    ) -> TaskOutcome:
        # Runs inside its own task; must not touch scheduler state.
        set_theme(topic.theme)
        try:
            result = await self._generator.generate(topic, config, already_generated)
        except Exception as e:
            logger.warning("Article generation failed", exc_info=True)
            return TaskFailure(topic=topic, error=str(e) or type(e).__name__)
        return TaskSuccess(topic=topic, result=result)

    def _apply(self, outcome: TaskOutcome, config: GenerationConfig) -> None:
        topic = outcome.topic

        if isinstance(outcome, TaskFailure):
            self._log(f'Error generating "{topic.theme}": {outcome.error}', level=logging.ERROR)
            self._emit(
                EventType.ERROR,
                ContentType.TASK_FAILED,
                data={"theme": topic.theme, "error": outcome.error},
            )
            return

        result = outcome.result
        path = article_path(topic.theme, topic.level, config.mode)
        self._vault.write(path, result.content)
        progress = self._state.progress
        self._set_progress(Progress(current=progress.current + 1, total=progress.total))
        self._log(f"✔ Saved: {path}")
        self._emit(
            EventType.TASK,
            ContentType.ARTICLE_SAVED,
            data={"theme": topic.theme, "level": topic.level, "path": path},
        )

        if topic.level >= config.max_depth:
            return

        self._log(f"  → Found next topics: {', '.join(result.next_themes) or 'None'}")
        context = result.content[: self._parent_context_chars]
        queued = [
            theme
            for theme in result.next_themes
            if theme.strip()
            and self._queue.push(Topic(theme=theme, level=topic.level + 1, parent_context=context))
        ]
        self._emit(
            EventType.TASK,
            ContentType.TOPICS_FOUND,
            data={"theme": topic.theme, "found": list(result.next_themes), "queued": queued},
        )

    # ------------------------------------------------------------------
    # State updates

    def _reset(self) -> None:
        self._state.status = GenerationStatus.IDLE
        self._state.logs = []
        self._state.progress = Progress()
        self._state.stop_reason = None
        self._queue = TopicQueue()
        self._stop = StopController()
        self._vault = VaultAccumulator()

    def _engage_stop(self, reason: StopReason) -> None:
        engaged = self._stop.reach_cap() if reason == StopReason.CAP else self._stop.request_stop()
        if not engaged:
            return
        self._state.stop_reason = reason.value
        self._set_status(GenerationStatus.STOPPED)

    def _set_status(self, status: GenerationStatus) -> None:
        self._state.status = status
        self._emit(EventType.SYSTEM, ContentType.STATUS, data=status.value)

    def _set_progress(self, progress: Progress) -> None:
        self._state.progress = progress
        self._emit(EventType.SYSTEM, ContentType.PROGRESS, data=progress.model_dump())

    def _log(self, message: str, *, level: int = logging.INFO) -> None:
        self._state.logs.append(message)
        logger.log(level, message)
        event_type = EventType.ERROR if level >= logging.ERROR else EventType.SYSTEM
        self._emit(event_type, ContentType.LOG, data=message)

    def _emit(
        self,
        event_type: EventType,
        content_type: ContentType,
        data: str | dict | list | None = None,
        *,
        metadata: dict[str, str | int | float | bool | None] | None = None,
    ) -> None:
        self._seq += 1
        ev = RunEvent(
            run_id=self.run_id,
            seq=self._seq,
            event_type=event_type,
            content_type=content_type,
            data=data,
            metadata=dict(metadata or {}),
        )
        for listener in self._listeners:
            try:
                listener(ev)
            except Exception:
                logger.warning(
                    "Event listener failed",
                    exc_info=True,
                    extra={"content_type": content_type.value, "seq": ev.seq},
                )
