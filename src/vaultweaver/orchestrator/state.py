from __future__ import annotations

from dataclasses import dataclass, field

from vaultweaver.models.vault import GenerationStatus, Progress


@dataclass
class RunState:
    run_id: str
    status: GenerationStatus = GenerationStatus.IDLE
    logs: list[str] = field(default_factory=list)
    progress: Progress = field(default_factory=Progress)
    stop_reason: str | None = None

    def snapshot(self) -> dict[str, str | int | None]:
        return {
            "run_id": self.run_id,
            "status": self.status.value,
            "current": self.progress.current,
            "total": self.progress.total,
            "log_count": len(self.logs),
            "stop_reason": self.stop_reason,
        }
