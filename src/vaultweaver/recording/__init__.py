"""Recording utilities for run events."""

from __future__ import annotations

from vaultweaver.recording.file_recorder import FileEventRecorder, iter_events
from vaultweaver.recording.redis_recorder import RedisEventRecorder

__all__ = ["FileEventRecorder", "RedisEventRecorder", "iter_events"]
