"""Tests for the HTTP API."""

from __future__ import annotations

import time
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from vaultweaver.api.app import create_app
from vaultweaver.config import Settings
from vaultweaver.events import ContentType, EventType, RunEvent
from vaultweaver.orchestrator import runner

TERMINAL = {"finished", "stopped", "error"}


def _wait_for_terminal(client: TestClient, run_id: str) -> dict:
    body: dict = {}
    for _ in range(500):
        body = client.get(f"/runs/{run_id}").json()
        if body["status"] in TERMINAL:
            break
        time.sleep(0.01)
    return body


def test_run_lifecycle_over_http(tmp_path: Path, scripted_generator) -> None:
    """It should start a run in the background and expose its state, vault and events."""

    settings = Settings(artifacts_dir=tmp_path, loop_yield_s=0)
    app = create_app(settings, generator_factory=lambda s: scripted_generator({"AI": ["A1", "A2"]}))

    with TestClient(app) as client:
        assert client.get("/health").json() == {"status": "ok"}

        resp = client.post("/runs", json={"initial_topics": "AI", "child_count": 2, "max_depth": 1})
        assert resp.status_code == 202
        run_id = resp.json()["run_id"]

        body = _wait_for_terminal(client, run_id)
        assert body["status"] == "finished"
        assert body["progress"] == {"current": 3, "total": 3}

        vault = client.get(f"/runs/{run_id}/vault").json()
        assert sorted(vault) == ["1/A1.md", "1/A2.md", "AI.md"]

        events = client.get(f"/runs/{run_id}/events").json()
        assert events[0]["seq"] == 1
        assert any(e["content_type"] == "article_saved" for e in events)

        stopped = client.post(f"/runs/{run_id}/stop")
        assert stopped.status_code == 200
        assert stopped.json()["status"] == "finished"


def test_unknown_run_and_invalid_config(tmp_path: Path, scripted_generator) -> None:
    """It should answer 404 for unknown runs and 422 for invalid settings."""

    settings = Settings(artifacts_dir=tmp_path, loop_yield_s=0)
    app = create_app(settings, generator_factory=lambda s: scripted_generator())

    with TestClient(app) as client:
        assert client.get("/runs/nope").status_code == 404
        assert client.post("/runs/nope/stop").status_code == 404
        assert client.get("/runs/nope/events").status_code == 404
        assert client.post("/runs", json={"initial_topics": "AI", "max_depth": -1}).status_code == 422


def test_missing_credentials_rejected_before_start(tmp_path: Path) -> None:
    """It should refuse to start when the generator cannot be built."""

    def no_key(settings: Settings):
        raise ValueError("Missing VAULTWEAVER_OPENAI_API_KEY.")

    app = create_app(Settings(artifacts_dir=tmp_path), generator_factory=no_key)

    with TestClient(app) as client:
        resp = client.post("/runs", json={"initial_topics": "AI"})
        assert resp.status_code == 400
        assert "OPENAI_API_KEY" in resp.json()["detail"]


class StoredRunRecorder:
    """Stands in for the Redis recorder with one run recorded by another instance."""

    def __init__(self, *, redis_url: str, key_prefix: str, run_id: str) -> None:
        self.run_id = run_id

    def get_state(self) -> dict[str, str]:
        if self.run_id != "elsewhere":
            return {}
        return {"status": "finished", "current": "1", "total": "1"}

    def load_vault(self) -> dict[str, str]:
        return {"AI.md": "# AI"} if self.run_id == "elsewhere" else {}

    def iter_events(self) -> list[RunEvent]:
        if self.run_id != "elsewhere":
            return []
        return [
            RunEvent(run_id=self.run_id, seq=1, event_type=EventType.SYSTEM, content_type=ContentType.LOG, data="Generation started..."),
            RunEvent(run_id=self.run_id, seq=2, event_type=EventType.SYSTEM, content_type=ContentType.STATUS, data="finished"),
        ]


def test_runs_from_other_instances_are_served_from_redis(
    tmp_path: Path, scripted_generator, monkeypatch: pytest.MonkeyPatch
) -> None:
    """It should fall back to the recorded state and vault for runs not held in memory."""

    monkeypatch.setattr(runner, "RedisEventRecorder", StoredRunRecorder)
    settings = Settings(artifacts_dir=tmp_path, loop_yield_s=0, redis_enabled=True)
    app = create_app(settings, generator_factory=lambda s: scripted_generator())

    with TestClient(app) as client:
        body = client.get("/runs/elsewhere").json()
        assert body["status"] == "finished"
        assert body["progress"] == {"current": 1, "total": 1}
        assert body["logs"] == ["Generation started..."]
        assert body["files"] == 1

        assert client.get("/runs/elsewhere/vault").json() == {"AI.md": "# AI"}
        assert client.get("/runs/missing").status_code == 404
        assert client.get("/runs/missing/vault").status_code == 404
