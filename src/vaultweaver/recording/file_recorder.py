"""JSONL recording of a vault run.

Each run directory holds an `events.jsonl` with one scheduler event per line, in
emission order. The API replays it and the CLI leaves it beside the exported vault.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from vaultweaver.events import RunEvent


@dataclass
class FileEventRecorder:
    """Scheduler listener that appends every event of a run to `path`."""

    path: Path

    def __post_init__(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, event: RunEvent) -> None:
        line = json.dumps(event.model_dump(mode="json"), ensure_ascii=False)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")

    __call__ = append


def iter_events(path: Path) -> list[RunEvent]:
    """Events recorded at `path` in sequence order; empty when the run was never recorded here."""

    if not path.exists():
        return []
    with path.open(encoding="utf-8") as f:
        return [RunEvent.model_validate_json(line) for line in f if line.strip()]
