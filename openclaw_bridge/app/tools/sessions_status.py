from __future__ import annotations

from typing import Any

from openclaw_bridge.app.agent_client import OpenClawAgent
from openclaw_bridge.app.tools.base import BaseTool, ToolResult
from libs.common.errors import AgentCommandError


class SessionsStatusTool(BaseTool):
    """openclaw 세션 목록을 조회하는 도구예요."""

    def __init__(self, *, agent: OpenClawAgent, limit: int = 10) -> None:
        self._agent = agent
        self._limit = limit

    @property
    def name(self) -> str:
        return "sessions_status"

    @property
    def description(self) -> str:
        return "Check the status of OpenClaw sessions"

    @property
    def input_schema(self) -> dict[str, Any]:
        return {"type": "object", "properties": {}}

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        del arguments
        try:
            output = await self._agent.list_sessions(limit=self._limit)
        except AgentCommandError as exc:
            return ToolResult(ok=False, error=exc.message, metadata={"retryable": exc.retryable})
        return ToolResult(ok=True, output=output)
