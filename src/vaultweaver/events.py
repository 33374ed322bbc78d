"""Event model used for streaming output and replay.

A run produces a sequence of events mirroring every observable state change of the scheduler.
Events are recorded to JSONL so the run can be replayed later (e.g., for debugging or UI playback).
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """High-level event categories."""

    SYSTEM = "system"
    TASK = "task"
    ERROR = "error"


class ContentType(str, Enum):
    """Semantic types within event streams."""

    LOG = "log"
    STATUS = "status"
    PROGRESS = "progress"

    MOC_CREATED = "moc_created"
    TASK_STARTED = "task_started"
    ARTICLE_SAVED = "article_saved"
    TOPICS_FOUND = "topics_found"
    TASK_FAILED = "task_failed"


class RunEvent(BaseModel):
    """A single event in a run."""

    run_id: str
    seq: int = Field(ge=1)
    ts: datetime = Field(default_factory=lambda: datetime.now(UTC))

    event_type: EventType
    content_type: ContentType

    data: str | dict | list | None = None
    metadata: dict[str, str | int | float | bool | None] = Field(default_factory=dict)
