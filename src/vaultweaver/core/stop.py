"""Cooperative cancellation for a run."""

from __future__ import annotations

from enum import Enum


class StopReason(str, Enum):
    USER = "user"
    CAP = "cap"


class StopController:
    """A one-way stop flag.

    Once engaged it stays engaged for the rest of the run. The first reason recorded wins.
    In-flight work is never aborted; the scheduler only stops admitting new topics.
    """

    def __init__(self) -> None:
        self._reason: StopReason | None = None

    def request_stop(self) -> bool:
        """Engage on an external request. Returns False if already engaged."""

        return self._engage(StopReason.USER)

    def reach_cap(self) -> bool:
        """Engage because the article cap was reached. Returns False if already engaged."""

        return self._engage(StopReason.CAP)

    def _engage(self, reason: StopReason) -> bool:
        if self._reason is not None:
            return False
        self._reason = reason
        return True

    @property
    def stopped(self) -> bool:
        return self._reason is not None

    @property
    def reason(self) -> StopReason | None:
        return self._reason
