from __future__ import annotations

import asyncio
import time
import uuid
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any


@dataclass(slots=True, frozen=True)
class McpSessionRecord:
    session_id: str
    initialized: bool
    protocol_version: str | None
    client_info: dict[str, Any] | None
    created_at: float
    last_seen_at: float


class McpSessionStore:
    """`initialize` 핸드셰이크마다 발급한 세션을 기억하는 제한된 캐시예요.

    TTL이 지난 항목과, 용량을 넘기면 가장 오래 쓰지 않은 항목부터 버려요.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = 3600.0,
        max_entries: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = asyncio.Lock()
        self._sessions: OrderedDict[str, McpSessionRecord] = OrderedDict()
        self._ttl_seconds = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock

    async def create(
        self,
        *,
        protocol_version: str | None,
        client_info: dict[str, Any] | None,
    ) -> McpSessionRecord:
        async with self._lock:
            now = self._clock()
            self._evict_expired(now)
            record = McpSessionRecord(
                session_id=str(uuid.uuid4()),
                initialized=True,
                protocol_version=protocol_version,
                client_info=client_info,
                created_at=now,
                last_seen_at=now,
            )
            self._sessions[record.session_id] = record
            while len(self._sessions) > self._max_entries:
                self._sessions.popitem(last=False)
            return record

    async def touch(self, session_id: str) -> McpSessionRecord | None:
        """세션이 살아 있으면 마지막 사용 시각을 갱신해서 반환해요. 없거나 만료됐으면 None이에요."""
        async with self._lock:
            now = self._clock()
            self._evict_expired(now)
            record = self._sessions.get(session_id)
            if record is None:
                return None
            updated = replace(record, last_seen_at=now)
            self._sessions[session_id] = updated
            self._sessions.move_to_end(session_id)
            return updated

    def _evict_expired(self, now: float) -> None:
        expired = [
            session_id
            for session_id, record in self._sessions.items()
            if now - record.last_seen_at > self._ttl_seconds
        ]
        for session_id in expired:
            del self._sessions[session_id]

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
