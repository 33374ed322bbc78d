"""FastAPI app exposing start/stop control, run state and the generated vault."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Generator
from dataclasses import dataclass, field
from typing import Any, Callable

from fastapi import FastAPI, HTTPException
from fastapi.responses import StreamingResponse

from vaultweaver.config import GenerationConfig, Settings, load_settings
from vaultweaver.events import ContentType, RunEvent
from vaultweaver.generation.base import ArticleGenerator
from vaultweaver.logging import configure_logging, get_logger
from vaultweaver.orchestrator.runner import (
    VaultRun,
    build_generator,
    recorded_state,
    recorded_vault,
    replay_run,
)
from vaultweaver.orchestrator.state import RunState

GeneratorFactory = Callable[[Settings], ArticleGenerator]


@dataclass
class RunRegistry:
    """Runs started by this process, keyed by run id."""

    runs: dict[str, VaultRun] = field(default_factory=dict)
    tasks: dict[str, asyncio.Task[RunState]] = field(default_factory=dict)

    def add(self, run: VaultRun, task: asyncio.Task[RunState]) -> None:
        self.runs[run.run_id] = run
        self.tasks[run.run_id] = task

    def get(self, run_id: str) -> VaultRun:
        run = self.runs.get(run_id)
        if run is None:
            raise HTTPException(status_code=404, detail="run not found")
        return run


def _state_payload(run: VaultRun) -> dict[str, Any]:
    scheduler = run.scheduler
    return {
        "run_id": run.run_id,
        "status": scheduler.status.value,
        "progress": scheduler.progress.model_dump(),
        "logs": scheduler.logs,
        "files": len(scheduler.vault),
        "vault_dir": str(run.vault_dir) if run.vault_dir is not None else None,
    }


def create_app(
    settings: Settings | None = None,
    generator_factory: GeneratorFactory | None = None,
) -> FastAPI:
    """Create FastAPI app.

    Args:
        settings: Service settings; loaded from the environment when omitted.
        generator_factory: Builds the article generator for each run. Defaults to the LLM generator.
    """

    settings = settings or load_settings()
    configure_logging(settings.log_level)
    logger = get_logger(__name__)
    make_generator = generator_factory or build_generator
    registry = RunRegistry()

    def _report_failure(task: asyncio.Task[RunState]) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error("Run task failed", exc_info=task.exception(), extra={"task": task.get_name()})

    app = FastAPI(title="VaultWeaver", version="0.1.0")
    app.state.registry = registry

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/runs", status_code=202)
    async def runs_start(config: GenerationConfig) -> dict[str, Any]:
        try:
            generator = make_generator(settings)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        run = VaultRun(settings, generator=generator)
        task = asyncio.create_task(run.execute(config), name=f"vault-run:{run.run_id}")
        task.add_done_callback(_report_failure)
        registry.add(run, task)
        logger.info("API run requested", extra={"run_id": run.run_id, "mode": config.mode})
        # Let the run reach its first state before answering.
        await asyncio.sleep(0)
        return _state_payload(run)

    @app.get("/runs/{run_id}")
    def runs_state(run_id: str) -> dict[str, Any]:
        run = registry.runs.get(run_id)
        if run is not None:
            return _state_payload(run)

        # Runs started by another instance are served from Redis.
        recorded = recorded_state(run_id=run_id, settings=settings)
        if not recorded:
            raise HTTPException(status_code=404, detail="run not found")
        logs = [
            str(ev.data)
            for ev in replay_run(run_id=run_id, artifacts_dir=settings.artifacts_dir, settings=settings)
            if ev.content_type == ContentType.LOG
        ]
        return {
            "run_id": run_id,
            "status": recorded.get("status"),
            "progress": {
                "current": int(recorded.get("current", 0)),
                "total": int(recorded.get("total", 0)),
            },
            "logs": logs,
            "files": len(recorded_vault(run_id=run_id, settings=settings)),
            "vault_dir": None,
        }

    @app.post("/runs/{run_id}/stop")
    async def runs_stop(run_id: str) -> dict[str, Any]:
        run = registry.get(run_id)
        run.scheduler.stop()
        logger.info("API stop requested", extra={"run_id": run_id})
        return _state_payload(run)

    @app.get("/runs/{run_id}/vault")
    def runs_vault(run_id: str) -> dict[str, str]:
        run = registry.runs.get(run_id)
        if run is not None:
            return dict(run.scheduler.vault)
        files = recorded_vault(run_id=run_id, settings=settings)
        if not files:
            raise HTTPException(status_code=404, detail="run not found")
        return files

    @app.get("/runs/{run_id}/events")
    def runs_events(run_id: str) -> list[RunEvent]:
        events = list(replay_run(run_id=run_id, artifacts_dir=settings.artifacts_dir, settings=settings))
        if not events:
            raise HTTPException(status_code=404, detail="run not found")
        return events

    @app.get("/runs/{run_id}/replay")
    def runs_replay(run_id: str) -> StreamingResponse:
        logger.info("API replay requested", extra={"run_id": run_id})

        def gen() -> Generator[bytes, None, None]:
            for ev in replay_run(run_id=run_id, artifacts_dir=settings.artifacts_dir, settings=settings):
                payload = json.dumps(ev.model_dump(mode="json"), ensure_ascii=False)
                yield f"data: {payload}\n\n".encode("utf-8")

        return StreamingResponse(gen(), media_type="text/event-stream")

    return app
