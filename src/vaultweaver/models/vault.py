"""Vault and run progress models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class GenerationStatus(str, Enum):
    """Lifecycle of a generation run."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
    FINISHED = "finished"
    ERROR = "error"


class VaultFile(BaseModel):
    """A single markdown file of the vault, addressed by its relative path."""

    path: str
    content: str


class Progress(BaseModel):
    """Run progress.

    `total` is a planning estimate fixed at start; `current` may exceed it.
    """

    current: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)
