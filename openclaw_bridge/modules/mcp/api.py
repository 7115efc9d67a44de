"""MCP Streamable HTTP 엔드포인트예요.

지원하는 전송 형태는 하나예요. ``POST /mcp``는 JSON-RPC 요청/응답을 그대로 주고받고,
``GET /mcp``는 하트비트 주석만 흘려보내는 SSE 스트림이에요.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
from collections.abc import Awaitable
from typing import Any

from fastapi import APIRouter, Depends, Header, Request, Response
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError

from openclaw_bridge.app.dispatcher import DispatchResult
from openclaw_bridge.app.mcp_protocol import SESSION_HEADER, JsonRpcEnvelope, JsonRpcErrorCode, build_error
from openclaw_bridge.app.sse import SSE_HEADERS, heartbeat_stream
from openclaw_bridge.modules.common.deps import get_dispatcher, get_settings, require_auth
from libs.common.errors import DomainError, InvalidRequestError, ParseError
from libs.common.logging import get_logger

router = APIRouter()
logger = get_logger("openclaw_bridge.modules.mcp")

_DISCONNECT_POLL_SECONDS = 0.5
# nginx 관례를 따라 클라이언트가 먼저 끊은 요청은 499로 기록해요.
_CLIENT_CLOSED_REQUEST = 499


async def _read_envelope(request: Request) -> JsonRpcEnvelope:
    raw = await request.body()
    try:
        payload: Any = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ParseError() from exc
    if not isinstance(payload, dict):
        raise InvalidRequestError()
    try:
        return JsonRpcEnvelope.model_validate(payload)
    except ValidationError as exc:
        raise InvalidRequestError() from exc


async def _run_until_disconnect(request: Request, work: Awaitable[DispatchResult]) -> DispatchResult | None:
    """클라이언트가 먼저 끊으면 작업을 취소하고 None을 반환해요.

    작업이 취소되면 실행 중이던 openclaw 프로세스도 함께 종료돼요.
    """
    # is_disconnected()는 이미 취소된 anyio 스코프 안에서 receive를 호출해요.
    # 그래서 감시 태스크를 따로 두지 않고 요청 태스크에서 직접 폴링해요.
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=_DISCONNECT_POLL_SECONDS)
            if done:
                return task.result()
            if await request.is_disconnected():
                break
    except asyncio.CancelledError:
        task.cancel()
        raise

    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task
    return None


@router.post("/mcp", dependencies=[Depends(require_auth)])
async def mcp_post(
    request: Request,
    mcp_session_id: str | None = Header(default=None),
) -> Response:
    envelope = await _read_envelope(request)
    dispatcher = get_dispatcher(request)
    dispatcher.validate(envelope)

    try:
        result = await _run_until_disconnect(request, dispatcher.dispatch(envelope, session_id=mcp_session_id))
    except DomainError:
        raise
    except Exception as exc:
        logger.exception("mcp_dispatch_failed", method=envelope.method, request_id=envelope.id, error=str(exc))
        return JSONResponse(
            status_code=500,
            content=build_error(envelope.id, JsonRpcErrorCode.INTERNAL_ERROR, str(exc)),
        )

    if result is None:
        logger.warning("mcp_client_disconnected", method=envelope.method, request_id=envelope.id)
        return Response(status_code=_CLIENT_CLOSED_REQUEST)

    if result.is_acknowledgement:
        return Response(status_code=202)

    headers = {SESSION_HEADER: result.session_id} if result.session_id else None
    return JSONResponse(content=result.body, headers=headers)


@router.get("/mcp", dependencies=[Depends(require_auth)])
async def mcp_stream(request: Request) -> StreamingResponse:
    interval_seconds = get_settings(request).sse_keepalive_seconds
    return StreamingResponse(
        heartbeat_stream(request.is_disconnected, interval_seconds=interval_seconds),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
