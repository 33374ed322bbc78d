"""Redis-based event recorder.

Optional complement to the file recorder: events, the latest run state and the finished vault
are kept in Redis so other instances can serve them without reading local disk.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Mapping

import redis

from vaultweaver.events import ContentType, RunEvent


@dataclass
class RedisEventRecorder:
    """Stores a run under `<prefix>:run:<run_id>:{events,state,vault}` with a TTL."""

    redis_url: str
    key_prefix: str
    run_id: str
    ttl_seconds: int = 60 * 60 * 24 * 7

    def __post_init__(self) -> None:
        self._client = redis.Redis.from_url(self.redis_url, decode_responses=True)
        base = f"{self.key_prefix}:run:{self.run_id}"
        self._events_key = f"{base}:events"
        self._state_key = f"{base}:state"
        self._vault_key = f"{base}:vault"

    def append(self, event: RunEvent) -> None:
        """Append an event; status and progress events also update the state hash."""

        line = json.dumps(event.model_dump(mode="json"), ensure_ascii=False)
        pipe = self._client.pipeline()
        pipe.rpush(self._events_key, line)
        pipe.expire(self._events_key, self.ttl_seconds)
        if event.content_type == ContentType.STATUS and isinstance(event.data, str):
            pipe.hset(self._state_key, mapping={"status": event.data})
            pipe.expire(self._state_key, self.ttl_seconds)
        elif event.content_type == ContentType.PROGRESS and isinstance(event.data, dict):
            pipe.hset(self._state_key, mapping={k: str(v) for k, v in event.data.items()})
            pipe.expire(self._state_key, self.ttl_seconds)
        pipe.execute()

    __call__ = append

    def store_vault(self, files: Mapping[str, str]) -> None:
        """Store the vault as a path -> content hash."""

        if not files:
            return
        pipe = self._client.pipeline()
        pipe.delete(self._vault_key)
        pipe.hset(self._vault_key, mapping=dict(files))
        pipe.expire(self._vault_key, self.ttl_seconds)
        pipe.execute()

    def get_state(self) -> dict[str, str]:
        return self._client.hgetall(self._state_key)

    def load_vault(self) -> dict[str, str]:
        return self._client.hgetall(self._vault_key)

    def iter_events(self) -> list[RunEvent]:
        """Load all events from Redis."""

        return [RunEvent.model_validate_json(line) for line in self._client.lrange(self._events_key, 0, -1)]
