"""ID utilities."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime


def new_run_id() -> str:
    """Return a run id.

    Time-based for readability plus a short random suffix to avoid collisions,
    e.g. ``20251219T103122Z_0b38a400``.
    """

    ts = datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ")
    return f"{ts}_{uuid.uuid4().hex[:8]}"
