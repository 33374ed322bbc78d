"""FIFO topic backlog with theme deduplication."""

from __future__ import annotations

from collections import deque

from vaultweaver.models.topic import Topic


class TopicQueue:
    """Pending topics plus the set of themes whose generation has started.

    A theme is never queued twice and never queued once it has been processed. The processed
    set only grows. Both checks are also repeated by the scheduler on pop, since a theme can be
    marked processed while a copy of it is still waiting.
    """

    def __init__(self) -> None:
        self._queue: deque[Topic] = deque()
        self._queued: set[str] = set()
        # dict keeps start order for the avoid list
        self._processed: dict[str, None] = {}

    def push(self, topic: Topic) -> bool:
        """Append a topic unless its theme is processed or already waiting.

        Returns:
            Whether the topic was appended.
        """

        if topic.theme in self._processed or topic.theme in self._queued:
            return False
        self._queue.append(topic)
        self._queued.add(topic.theme)
        return True

    def extend(self, topics: list[Topic]) -> int:
        return sum(1 for t in topics if self.push(t))

    def pop(self) -> Topic | None:
        """Remove and return the earliest pushed topic, or None when empty."""

        if not self._queue:
            return None
        topic = self._queue.popleft()
        self._queued.discard(topic.theme)
        return topic

    def mark_processed(self, theme: str) -> None:
        self._processed.setdefault(theme, None)

    def is_processed(self, theme: str) -> bool:
        return theme in self._processed

    def is_queued(self, theme: str) -> bool:
        return theme in self._queued

    def processed_themes(self) -> list[str]:
        """Themes in the order their generation started."""

        return list(self._processed)

    @property
    def processed_count(self) -> int:
        return len(self._processed)

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)
