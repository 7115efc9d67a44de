"""JSON-RPC 메서드 이름을 핸들러로 연결하는 MCP 디스패처예요.

`tools/call`의 실패는 JSON-RPC 오류가 아니라 ``isError`` 콘텐츠 블록으로 돌려줘요.
봉투(envelope) 자체가 잘못된 경우에만 `InvalidRequestError`를 던져요.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from openclaw_bridge.app.mcp_protocol import (
    JSONRPC_VERSION,
    MCP_PROTOCOL_VERSION,
    SERVER_VERSION,
    JsonRpcEnvelope,
    JsonRpcErrorCode,
    build_error,
    build_result,
)
from openclaw_bridge.app.session_store import McpSessionStore
from openclaw_bridge.app.tools.registry import ToolRegistry
from libs.common.errors import InvalidRequestError
from libs.common.logging import get_logger

logger = get_logger("openclaw_bridge.dispatcher")

_INITIALIZED_NOTIFICATIONS = frozenset({"initialized", "notifications/initialized"})

Handler = Callable[[JsonRpcEnvelope], Awaitable[dict[str, Any]]]


@dataclass(slots=True)
class DispatchResult:
    body: dict[str, Any] | None
    session_id: str | None = None

    @property
    def is_acknowledgement(self) -> bool:
        return self.body is None


class McpDispatcher:
    def __init__(
        self,
        *,
        registry: ToolRegistry,
        session_store: McpSessionStore,
        server_name: str,
        server_version: str = SERVER_VERSION,
    ) -> None:
        self._registry = registry
        self._session_store = session_store
        self._server_info = {"name": server_name, "version": server_version}
        self._handlers: dict[str, Handler] = {
            "initialize": self._initialize,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
            "ping": self._ping,
        }

    @property
    def server_info(self) -> dict[str, str]:
        return dict(self._server_info)

    @staticmethod
    def validate(envelope: JsonRpcEnvelope) -> str:
        """디스패치 전에 봉투를 검사하고 메서드 이름을 반환해요."""
        if envelope.jsonrpc != JSONRPC_VERSION:
            raise InvalidRequestError("Invalid JSON-RPC version")
        if not isinstance(envelope.method, str) or not envelope.method:
            raise InvalidRequestError("Invalid Request")
        return envelope.method

    async def dispatch(self, envelope: JsonRpcEnvelope, *, session_id: str | None = None) -> DispatchResult:
        method = self.validate(envelope)
        if session_id:
            known = await self._session_store.touch(session_id)
            if known is None:
                logger.info("mcp_session_unknown", session_id=session_id)

        logger.info("mcp_request", method=method, request_id=envelope.id, notification=envelope.is_notification)

        # id가 붙은 notifications/* 요청은 아래에서 -32601로 답해요.
        if method in _INITIALIZED_NOTIFICATIONS:
            return DispatchResult(body=None)
        if envelope.is_notification and method.startswith("notifications/"):
            return DispatchResult(body=None)

        handler = self._handlers.get(method)
        if handler is None:
            if envelope.is_notification:
                return DispatchResult(body=None)
            return DispatchResult(
                body=build_error(envelope.id, JsonRpcErrorCode.METHOD_NOT_FOUND, f"Method not found: {method}")
            )

        result = await handler(envelope)
        if envelope.is_notification:
            return DispatchResult(body=None)

        new_session_id = result.get("sessionId") if method == "initialize" else None
        return DispatchResult(body=build_result(envelope.id, result), session_id=new_session_id)

    async def _initialize(self, envelope: JsonRpcEnvelope) -> dict[str, Any]:
        params = envelope.param_dict
        protocol_version = params.get("protocolVersion")
        client_info = params.get("clientInfo")
        record = await self._session_store.create(
            protocol_version=protocol_version if isinstance(protocol_version, str) else None,
            client_info=client_info if isinstance(client_info, dict) else None,
        )
        logger.info(
            "mcp_session_created",
            session_id=record.session_id,
            client_protocol_version=record.protocol_version,
            client_name=(record.client_info or {}).get("name"),
        )
        return {
            "protocolVersion": MCP_PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": self.server_info,
            "sessionId": record.session_id,
        }

    async def _list_tools(self, envelope: JsonRpcEnvelope) -> dict[str, Any]:
        del envelope
        return {"tools": [tool.to_dict() for tool in self._registry.list_mcp_tools()]}

    async def _call_tool(self, envelope: JsonRpcEnvelope) -> dict[str, Any]:
        params = envelope.param_dict
        name = params.get("name")
        arguments = params.get("arguments")
        if not isinstance(arguments, dict):
            arguments = {}

        tool_name = name if isinstance(name, str) else str(name)
        logger.info("tool_called", tool=tool_name, argument_keys=sorted(arguments.keys()))
        result = await self._registry.call(tool_name, arguments)
        return result.to_call_result().to_dict()

    async def _ping(self, envelope: JsonRpcEnvelope) -> dict[str, Any]:
        del envelope
        return {}
