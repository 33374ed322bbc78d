"""Generation scheduling and run wiring."""

from __future__ import annotations

from vaultweaver.orchestrator.scheduler import TaskFailure, TaskOutcome, TaskSuccess, VaultScheduler
from vaultweaver.orchestrator.state import RunState

__all__ = ["RunState", "TaskFailure", "TaskOutcome", "TaskSuccess", "VaultScheduler"]
