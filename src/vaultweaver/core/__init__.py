"""Scheduling primitives: topic queue, progress estimate, stop flag, vault store, task pool."""

from __future__ import annotations

from vaultweaver.core.concurrency import TaskPool
from vaultweaver.core.estimator import estimate_total, planned_total
from vaultweaver.core.stop import StopController, StopReason
from vaultweaver.core.topic_queue import TopicQueue
from vaultweaver.core.vault import VaultAccumulator, article_path, build_moc, sanitize_filename

__all__ = [
    "StopController",
    "StopReason",
    "TaskPool",
    "TopicQueue",
    "VaultAccumulator",
    "article_path",
    "build_moc",
    "estimate_total",
    "planned_total",
    "sanitize_filename",
]
