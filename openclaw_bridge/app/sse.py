from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable

from libs.common.logging import get_logger

logger = get_logger("openclaw_bridge.sse")

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}

CONNECTED_COMMENT = ": connected\n\n"
KEEPALIVE_COMMENT = ": keepalive\n\n"


async def heartbeat_stream(
    is_disconnected: Callable[[], Awaitable[bool]],
    *,
    interval_seconds: float,
    poll_seconds: float = 1.0,
) -> AsyncIterator[str]:
    """클라이언트가 끊길 때까지 주기적으로 주석 한 줄을 내보내는 SSE 본문이에요.

    애플리케이션 페이로드는 보내지 않아요. 어떤 이유로 스트림이 끝나든
    `finally` 블록이 정확히 한 번 실행돼요.
    """
    logger.info("sse_stream_opened", interval_seconds=interval_seconds)
    sent = 0
    loop = asyncio.get_running_loop()
    try:
        yield CONNECTED_COMMENT
        next_beat = loop.time() + interval_seconds
        while True:
            if await is_disconnected():
                break
            remaining = next_beat - loop.time()
            if remaining > 0:
                await asyncio.sleep(min(poll_seconds, remaining))
                continue
            yield KEEPALIVE_COMMENT
            sent += 1
            next_beat = loop.time() + interval_seconds
    finally:
        logger.info("sse_stream_closed", keepalives_sent=sent)
